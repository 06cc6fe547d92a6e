from __future__ import annotations

from typing import Optional, Union

from django.conf import settings
from django.db import IntegrityError

from apps.api.utils import ServiceError
from apps.catalog.mappers import ProductMapper
from apps.common import get_logger
from .commands import CartAddCommand, CartRemoveCommand
from .dtos import CartAdditionDTO, CartDTO, CartItemDTO
from .mappers import CartLineMapper
from .protocols import CartLineRepositoryProtocol, ProductRepositoryProtocol

logger = get_logger(__name__).bind(component="carts", layer="service")

# Upper bound on update/insert rounds when concurrent adds race on a new line.
MAX_UPSERT_ATTEMPTS = 3


class CartService:
    def __init__(
        self,
        lines: CartLineRepositoryProtocol,
        products: ProductRepositoryProtocol,
        line_mapper: Optional[CartLineMapper] = None,
        max_quantity: Optional[int] = None,
    ):
        self.lines = lines
        self.products = products
        self.line_mapper = line_mapper or CartLineMapper()
        self.max_quantity = max_quantity or getattr(settings, "CART_MAX_QUANTITY", 999)
        self.logger = logger.bind(service="CartService")

    def list_cart(self, user_id: int) -> CartDTO:
        self.logger.debug("Listing cart", user_id=user_id)
        return self.line_mapper.to_cart(user_id, self.lines.list_for_user(user_id))

    def _quantity_exceeded(self, current: int) -> ServiceError:
        return (
            "VALIDATION_ERROR",
            f"Cart quantity cannot exceed {self.max_quantity}",
            {"quantity": current, "maxQuantity": self.max_quantity},
        )

    def add_to_cart(
        self, user_id: int, product_id: int, count: int = 1
    ) -> Union[CartAdditionDTO, ServiceError]:
        """Add ``count`` units of a product, keeping one line per (user, product).

        The product is looked up before any write. The line is then bumped with
        a single UPDATE bounded by ``max_quantity``; if no line matched it is
        inserted, and a unique constraint violation from a concurrent insert
        sends us back to the UPDATE so both requests' counts land on the same
        line. A line that would grow past ``max_quantity`` is left untouched.
        """
        cmd = CartAddCommand(user_id=user_id, product_id=product_id, count=count)
        log = self.logger.bind(user_id=cmd.user_id, product_id=cmd.product_id)
        if cmd.count > self.max_quantity:
            log.warning("Cart add rejected: count above limit", count=cmd.count)
            return self._quantity_exceeded(cmd.count)
        product = self.products.get(id=cmd.product_id)
        if not product:
            log.info("Cart add rejected: product not found")
            return ("NOT_FOUND", "Product not found", {"productId": str(cmd.product_id)})

        for attempt in range(1, MAX_UPSERT_ATTEMPTS + 1):
            if self.lines.increment(
                cmd.user_id, cmd.product_id, cmd.count, max_quantity=self.max_quantity
            ):
                log.debug("Incremented cart line", count=cmd.count, attempt=attempt)
                break
            try:
                self.lines.insert(cmd.user_id, cmd.product_id, cmd.count)
                log.debug("Created cart line", count=cmd.count, attempt=attempt)
                break
            except IntegrityError:
                log.warning("Cart line insert conflicted; retrying", attempt=attempt)
            existing = self.lines.get_line(cmd.user_id, cmd.product_id)
            if existing is not None and existing.quantity + cmd.count > self.max_quantity:
                log.warning("Cart add rejected: quantity above limit", quantity=existing.quantity)
                return self._quantity_exceeded(existing.quantity + cmd.count)
        else:
            log.error("Cart add gave up after repeated conflicts", attempts=MAX_UPSERT_ATTEMPTS)
            return (
                "CONFLICT",
                "Cart was modified concurrently, please retry",
                {"productId": str(cmd.product_id)},
            )

        line = self.lines.get_line(cmd.user_id, cmd.product_id)
        if line is None:
            # Removed by a concurrent request after our write
            log.info("Cart line gone before re-read", count=cmd.count)
            item = CartItemDTO(product_id=cmd.product_id, quantity=cmd.count)
        else:
            log.info("Product added to cart", quantity=line.quantity)
            item = self.line_mapper.to_item(line)
        return CartAdditionDTO(product=ProductMapper.to_dto(product), item=item)

    def remove_from_cart(self, user_id: int, product_id: int) -> Optional[ServiceError]:
        cmd = CartRemoveCommand(user_id=user_id, product_id=product_id)
        deleted = self.lines.delete_line(cmd.user_id, cmd.product_id)
        if not deleted:
            self.logger.info(
                "Cart remove: line not found", user_id=cmd.user_id, product_id=cmd.product_id
            )
            return ("NOT_FOUND", "Item not found in cart", {"itemId": str(cmd.product_id)})
        self.logger.info("Cart line removed", user_id=cmd.user_id, product_id=cmd.product_id)
        return None
