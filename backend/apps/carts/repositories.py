from typing import Optional

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.common.repository import GenericRepository
from .models import CartLine


class CartLineRepository(GenericRepository[CartLine]):
    def __init__(self):
        super().__init__(CartLine)

    def queryset(self):
        return self.model.objects.select_related(
            "product",
            "product__category",
            "product__subcategory",
            "product__brand",
            "product__color",
            "product__size",
        )

    def list_for_user(self, user_id: int):
        return list(self.queryset().filter(user_id=user_id))

    def get_line(self, user_id: int, product_id: int):
        return self.get(user_id=user_id, product_id=product_id)

    def increment(
        self, user_id: int, product_id: int, count: int, max_quantity: Optional[int] = None
    ) -> int:
        """Add ``count`` to an existing line in one UPDATE; returns rows touched.

        With ``max_quantity`` a line that would grow past it is not matched.
        """
        lines = self.model.objects.filter(user_id=user_id, product_id=product_id)
        if max_quantity is not None:
            lines = lines.filter(quantity__lte=max_quantity - count)
        return lines.update(quantity=F("quantity") + count, updated_at=timezone.now())

    def insert(self, user_id: int, product_id: int, quantity: int) -> CartLine:
        # Savepoint so a unique-constraint failure leaves the outer transaction usable.
        with transaction.atomic():
            return self.model.objects.create(
                user_id=user_id, product_id=product_id, quantity=quantity
            )

    def delete_line(self, user_id: int, product_id: int) -> int:
        deleted, _ = self.model.objects.filter(
            user_id=user_id, product_id=product_id
        ).delete()
        return deleted
