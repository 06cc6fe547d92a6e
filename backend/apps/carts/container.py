from __future__ import annotations

from apps.catalog.mappers import ProductMapper
from apps.catalog.repositories import ProductRepository

from .mappers import CartLineMapper
from .repositories import CartLineRepository
from .services import CartService


def build_cart_service() -> CartService:
    return CartService(
        lines=CartLineRepository(),
        products=ProductRepository(),
        line_mapper=CartLineMapper(ProductMapper()),
    )
