from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .validators import validate_gender, validate_password, validate_username


class RegisterRequestSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    username = serializers.CharField(max_length=150)
    phone = serializers.CharField(max_length=50)
    gender = serializers.CharField()
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    dob = serializers.DateField(required=False, allow_null=True)
    avatarUrl = serializers.URLField(max_length=500, required=False, allow_blank=True)

    def validate_username(self, value: str) -> str:
        return validate_username(value)

    def validate_password(self, value: str) -> str:
        return validate_password(value)

    def validate_gender(self, value: str) -> str:
        return validate_gender(value)


class UserSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    username = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField()
    address = serializers.CharField(allow_null=True)
    dob = serializers.DateField(allow_null=True)
    gender = serializers.CharField()
    avatarUrl = serializers.URLField(source="avatar_url")
    isStaff = serializers.BooleanField(source="is_privileged")


class CartLineSummarySerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id")
    quantity = serializers.IntegerField()


class LoginUserSerializer(UserSummarySerializer):
    cart = CartLineSummarySerializer(source="cart_lines.all", many=True)


class RegisterResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSummarySerializer()
    access = serializers.CharField()
    refresh = serializers.CharField()


class LoginResponseSerializer(serializers.Serializer):
    access = serializers.CharField()
    refresh = serializers.CharField()
    user = LoginUserSerializer()


class LoginTokenSerializer(TokenObtainPairSerializer):
    """Token pair plus the account summary and its current cart lines."""

    def validate(self, attrs):
        data = super().validate(attrs)
        data["user"] = LoginUserSerializer(self.user).data
        return data
