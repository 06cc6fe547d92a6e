from dataclasses import dataclass
from typing import List

from apps.catalog.dtos import ProductDTO


@dataclass
class CartItemDTO:
    product_id: int
    quantity: int


@dataclass
class CartLineDTO:
    id: int
    product: ProductDTO
    quantity: int


@dataclass
class CartDTO:
    user_id: int
    lines: List[CartLineDTO]

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)


@dataclass
class CartAdditionDTO:
    """Outcome of an add: the product added and the line as it now stands."""

    product: ProductDTO
    item: CartItemDTO
