from rest_framework import serializers

from .dtos import BrandDTO, CategoryDTO, ProductDTO, SubcategoryDTO


class RefSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()


class SubcategorySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField()
    slug = serializers.CharField()
    categoryId = serializers.IntegerField()

    def to_representation(self, instance: SubcategoryDTO):
        if instance is None:
            return None
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "id": instance.id,
                "name": instance.name,
                "slug": instance.slug,
                "categoryId": instance.category_id,
            }
        return super().to_representation(instance)


class CategorySerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField()
    slug = serializers.CharField()
    subcategories = SubcategorySerializer(many=True)

    def to_representation(self, instance: CategoryDTO):
        if instance is None:
            return None
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "id": instance.id,
                "name": instance.name,
                "slug": instance.slug,
                "subcategories": SubcategorySerializer(
                    instance.subcategories, many=True
                ).data,
            }
        return super().to_representation(instance)


class BrandSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    name = serializers.CharField()
    slug = serializers.CharField()

    def to_representation(self, instance: BrandDTO):
        if instance is None:
            return None
        if hasattr(instance, "__dataclass_fields__"):
            return {"id": instance.id, "name": instance.name, "slug": instance.slug}
        return super().to_representation(instance)


class ProductReadSerializer(serializers.Serializer):
    # Matches ProductDTO shapes used for responses
    id = serializers.IntegerField()
    name = serializers.CharField()
    description = serializers.CharField()
    price = serializers.CharField()
    discount = serializers.IntegerField()
    images = serializers.ListField(child=serializers.CharField())
    category = RefSerializer()
    subcategory = RefSerializer()
    brand = RefSerializer()
    color = serializers.CharField(allow_null=True)
    size = serializers.CharField(allow_null=True)
    createdAt = serializers.CharField(allow_null=True)
    updatedAt = serializers.CharField(allow_null=True)

    def to_representation(self, instance: ProductDTO):
        if instance is None:
            return None
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "id": instance.id,
                "name": instance.name,
                "description": instance.description,
                "price": instance.price,
                "discount": instance.discount,
                "images": list(instance.images),
                "category": {"id": instance.category.id, "name": instance.category.name},
                "subcategory": {
                    "id": instance.subcategory.id,
                    "name": instance.subcategory.name,
                },
                "brand": {"id": instance.brand.id, "name": instance.brand.name},
                "color": instance.color,
                "size": instance.size,
                "createdAt": instance.created_at,
                "updatedAt": instance.updated_at,
            }
        return super().to_representation(instance)


class ProductWriteSerializer(serializers.Serializer):
    # 'id' is server-assigned and never accepted from clients.
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    categoryId = serializers.IntegerField(min_value=1)
    subcategoryId = serializers.IntegerField(min_value=1)
    brandId = serializers.IntegerField(min_value=1)
    description = serializers.CharField(required=False, allow_blank=True)
    discount = serializers.IntegerField(required=False, min_value=0, max_value=100)
    images = serializers.ListField(child=serializers.URLField(), required=False)
    color = serializers.CharField(required=False, allow_null=True, max_length=30)
    size = serializers.CharField(required=False, allow_null=True, max_length=10)


class NamedEntityWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    slug = serializers.SlugField(required=False, allow_blank=True, max_length=120)

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name may not be blank.")
        return value


class SubcategoryWriteSerializer(NamedEntityWriteSerializer):
    categoryId = serializers.IntegerField(min_value=1)
