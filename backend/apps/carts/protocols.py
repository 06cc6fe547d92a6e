from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol

from .models import CartLine

if TYPE_CHECKING:
    from apps.catalog.models import Product


class CartLineRepositoryProtocol(Protocol):
    def list_for_user(self, user_id: int) -> List[CartLine]:
        ...

    def get_line(self, user_id: int, product_id: int) -> Optional[CartLine]:
        ...

    def increment(
        self, user_id: int, product_id: int, count: int, max_quantity: Optional[int] = None
    ) -> int:
        ...

    def insert(self, user_id: int, product_id: int, quantity: int) -> CartLine:
        ...

    def delete_line(self, user_id: int, product_id: int) -> int:
        ...


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Product"]:
        ...
