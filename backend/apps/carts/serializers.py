from django.conf import settings
from rest_framework import serializers

from apps.catalog.serializers import ProductReadSerializer
from .dtos import CartAdditionDTO, CartDTO, CartLineDTO

# Largest primary key a BigAutoField can hold.
MAX_ROW_ID = 2**63 - 1


class CartAddSerializer(serializers.Serializer):
    productId = serializers.IntegerField(min_value=1, max_value=MAX_ROW_ID)
    count = serializers.IntegerField(
        min_value=1,
        max_value=getattr(settings, "CART_MAX_QUANTITY", 999),
        required=False,
        default=1,
    )


class CartItemSerializer(serializers.Serializer):
    productId = serializers.IntegerField()
    quantity = serializers.IntegerField()


class CartLineSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    productId = serializers.IntegerField()
    quantity = serializers.IntegerField()
    product = ProductReadSerializer()

    def to_representation(self, instance: CartLineDTO):
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "id": instance.id,
                "productId": instance.product.id,
                "quantity": instance.quantity,
                "product": ProductReadSerializer(instance.product).data,
            }
        return super().to_representation(instance)


class CartReadSerializer(serializers.Serializer):
    userId = serializers.IntegerField()
    totalQuantity = serializers.IntegerField()
    items = CartLineSerializer(many=True)

    def to_representation(self, instance: CartDTO):
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "userId": instance.user_id,
                "totalQuantity": instance.total_quantity,
                "items": CartLineSerializer(instance.lines, many=True).data,
            }
        return super().to_representation(instance)


class CartAdditionSerializer(serializers.Serializer):
    message = serializers.CharField()
    product = ProductReadSerializer()
    item = CartItemSerializer()

    def to_representation(self, instance: CartAdditionDTO):
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "message": "Product added to cart",
                "product": ProductReadSerializer(instance.product).data,
                "item": {
                    "productId": instance.item.product_id,
                    "quantity": instance.item.quantity,
                },
            }
        return super().to_representation(instance)
