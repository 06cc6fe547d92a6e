from typing import Iterable, List, Optional

from apps.catalog.mappers import ProductMapper
from .dtos import CartDTO, CartItemDTO, CartLineDTO
from .models import CartLine


class CartLineMapper:
    def __init__(self, product_mapper: Optional[ProductMapper] = None) -> None:
        self.product_mapper = product_mapper or ProductMapper()

    def to_dto(self, line: CartLine) -> CartLineDTO:
        return CartLineDTO(
            id=line.id,
            product=self.product_mapper.to_dto(line.product),
            quantity=line.quantity,
        )

    def to_item(self, line: CartLine) -> CartItemDTO:
        return CartItemDTO(product_id=line.product_id, quantity=line.quantity)

    def many_to_dto(self, lines: Iterable[CartLine]) -> List[CartLineDTO]:
        return [self.to_dto(line) for line in lines]

    def to_cart(self, user_id: int, lines: Iterable[CartLine]) -> CartDTO:
        return CartDTO(user_id=user_id, lines=self.many_to_dto(lines))
