from __future__ import annotations

from django.core.cache import cache

from .cache import ProductListingCache
from .repositories import (
    BrandRepository,
    CategoryRepository,
    PaletteRepository,
    ProductRepository,
    SubcategoryRepository,
)
from .services import BrandService, CategoryService, ProductService, SubcategoryService


def build_listing_cache(*, disable_cache: bool = False) -> ProductListingCache:
    return ProductListingCache(cache, enabled=not disable_cache)


def build_product_service(*, disable_cache: bool = False) -> ProductService:
    return ProductService(
        products=ProductRepository(),
        categories=CategoryRepository(),
        subcategories=SubcategoryRepository(),
        brands=BrandRepository(),
        palette=PaletteRepository(),
        listing_cache=build_listing_cache(disable_cache=disable_cache),
    )


def build_category_service() -> CategoryService:
    return CategoryService(CategoryRepository(), build_listing_cache())


def build_subcategory_service() -> SubcategoryService:
    return SubcategoryService(
        subcategories=SubcategoryRepository(),
        categories=CategoryRepository(),
        listing_cache=build_listing_cache(),
    )


def build_brand_service() -> BrandService:
    return BrandService(BrandRepository(), build_listing_cache())
