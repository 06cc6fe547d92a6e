from typing import Iterable, List

from .dtos import BrandDTO, CategoryDTO, ProductDTO, RefDTO, SubcategoryDTO
from .models import Brand, Category, Product, Subcategory


def _iso(value):
    return value.isoformat() if value else None


class SubcategoryMapper:
    @staticmethod
    def to_dto(sub: Subcategory) -> SubcategoryDTO:
        return SubcategoryDTO(
            id=sub.id, name=sub.name, slug=sub.slug or "", category_id=sub.category_id
        )

    @staticmethod
    def many_to_dto(subs: Iterable[Subcategory]) -> List[SubcategoryDTO]:
        return [SubcategoryMapper.to_dto(s) for s in subs]


class CategoryMapper:
    @staticmethod
    def to_dto(cat: Category) -> CategoryDTO:
        return CategoryDTO(
            id=cat.id,
            name=cat.name,
            slug=cat.slug or "",
            subcategories=SubcategoryMapper.many_to_dto(cat.subcategories.all()),
        )

    @staticmethod
    def many_to_dto(categories: Iterable[Category]) -> List[CategoryDTO]:
        return [CategoryMapper.to_dto(c) for c in categories]


class BrandMapper:
    @staticmethod
    def to_dto(brand: Brand) -> BrandDTO:
        return BrandDTO(id=brand.id, name=brand.name, slug=brand.slug or "")

    @staticmethod
    def many_to_dto(brands: Iterable[Brand]) -> List[BrandDTO]:
        return [BrandMapper.to_dto(b) for b in brands]


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        color = product.color
        size = product.size
        return ProductDTO(
            id=product.id,
            name=product.name,
            description=product.description,
            price=str(product.price),
            discount=product.discount,
            images=list(product.images or []),
            category=RefDTO(id=product.category_id, name=product.category.name),
            subcategory=RefDTO(id=product.subcategory_id, name=product.subcategory.name),
            brand=RefDTO(id=product.brand_id, name=product.brand.name),
            color=color.code if color else None,
            size=size.code if size else None,
            created_at=_iso(product.created_at),
            updated_at=_iso(product.updated_at),
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p) for p in products]
