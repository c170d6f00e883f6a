"""
Backing-store access for stock records.

The adjustment service only needs two calls against the store: one read of
the current record and one write of the new stock level. `StockStore` is that
contract; `DjangoStockStore` fulfils it through the ORM.
"""
from __future__ import annotations

from typing import Any, Protocol

from django.apps import apps
from django.db import DatabaseError, models, router, transaction
from django.db.transaction import TransactionManagementError

from .conf import get_setting
from .exceptions import NotFoundError, StorageError, ValidationError

StockRecord = dict[str, Any]


class StockStore(Protocol):
    def get(self, product_id: str) -> StockRecord | None: ...
    def update(
        self, product_id: str, stock_quantity: int, current: StockRecord | None = None
    ) -> StockRecord: ...


class DjangoStockStore:
    """
    StockStore over a Django model with a `stock_quantity` field.

    Records are returned as plain dicts of the model's concrete fields, the
    shape the endpoint serializes as `data`.

    Each statement commits on its own, so the write is visible to the next
    holder of the product's lock. Calling the store inside an outer
    `transaction.atomic()` block (or with ATOMIC_REQUESTS) would defer the
    commit past the lock release, and raises TransactionManagementError.

    Parameters
    ----------
    model : type[models.Model] | None
        Product model. Defaults to the PRODUCT_MODEL setting.
    """

    def __init__(self, model: type[models.Model] | None = None) -> None:
        self.model = model or apps.get_model(get_setting("PRODUCT_MODEL"))

    def _queryset(self) -> models.QuerySet:
        return self.model._default_manager.all()

    def _check_autocommit(self) -> None:
        if transaction.get_connection(router.db_for_write(self.model)).in_atomic_block:
            raise TransactionManagementError(
                "stock_adjust: adjustments must not run inside an atomic block; "
                "the write would commit after the product lock is released."
            )

    def _check_range(self, stock_quantity: int) -> None:
        field = self.model._meta.get_field("stock_quantity")
        connection = transaction.get_connection(router.db_for_write(self.model))
        low, high = connection.ops.integer_field_range(field.get_internal_type())
        if (low is not None and stock_quantity < low) or (
            high is not None and stock_quantity > high
        ):
            raise ValidationError(
                f"quantity out of range: stock would become {stock_quantity}",
                field="quantity",
            )

    def get(self, product_id: str) -> StockRecord | None:
        self._check_autocommit()
        try:
            return self._queryset().filter(pk=product_id).values().first()
        except DatabaseError as e:
            raise StorageError(f"Failed to read stock for product '{product_id}'") from e

    def update(
        self, product_id: str, stock_quantity: int, current: StockRecord | None = None
    ) -> StockRecord:
        """
        Write `stock_quantity` with a single UPDATE statement.

        The returned record is `current` (the record the caller read) with the
        new stock level, so no second read is issued.
        """
        self._check_range(stock_quantity)
        try:
            updated = self._queryset().filter(pk=product_id).update(
                stock_quantity=stock_quantity
            )
        except OverflowError as e:
            raise ValidationError(
                f"quantity out of range: stock would become {stock_quantity}",
                field="quantity",
            ) from e
        except DatabaseError as e:
            raise StorageError(f"Failed to update stock for product '{product_id}'") from e

        if not updated:
            raise NotFoundError(f"Product '{product_id}' not found")

        if current is not None:
            record = dict(current)
        else:
            record = {self.model._meta.pk.attname: product_id}
        record["stock_quantity"] = stock_quantity
        return record
