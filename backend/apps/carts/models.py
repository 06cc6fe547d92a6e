from django.conf import settings
from django.db import models

from apps.catalog.models import Product


class CartLine(models.Model):
    """One (user, product) entry of a shopping cart; quantity accumulates."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="cart_lines"
    )
    # Products referenced by a cart cannot be deleted.
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="cart_lines"
    )
    quantity = models.PositiveIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "cart_lines"
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "product"], name="cart_line_user_product_uniq"
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1), name="cart_line_quantity_positive"
            ),
        ]

    def __str__(self):
        return f"CartLine user={self.user_id} product={self.product_id} x{self.quantity}"
