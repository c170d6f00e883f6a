import uuid

from django.db import models


def generate_product_id() -> str:
    return uuid.uuid4().hex


class Product(models.Model):
    """
    Product row whose stock level is adjusted through the update-stock endpoint.

    Rows are created by the catalogue side of the storefront; this app only
    reads and updates `stock_quantity`.
    """

    id = models.CharField(
        primary_key=True, max_length=64, default=generate_product_id, editable=False
    )
    name = models.CharField(max_length=255, blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    # No check constraint: "set" stores negative values as given.
    stock_quantity = models.IntegerField(default=0)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name or self.id} ({self.stock_quantity})"
