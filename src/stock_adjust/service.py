from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import structlog

from .conf import get_setting
from .exceptions import NotFoundError, ValidationError
from .hashing import stock_lock_key
from .locking import LockBackend, lock
from .operations import compute_new_stock
from .store import DjangoStockStore, StockRecord, StockStore

logger = structlog.get_logger(__name__)

_UNSET: Any = object()


@dataclass(frozen=True)
class AdjustmentResult:
    data: StockRecord
    previous_stock: int
    operation: str

    @property
    def stock_quantity(self) -> int:
        return self.data["stock_quantity"]

    def as_response(self) -> dict[str, Any]:
        return {
            "success": True,
            "data": self.data,
            "previous_stock": self.previous_stock,
            "operation": self.operation,
        }


def _validate(product_id: Any, quantity: Any, operation: Any) -> int:
    """
    Check that all three inputs are present and return `quantity` as an int.

    `productId` and `operation` must be non-empty strings. `quantity` of 0 is
    present. Negative quantities are accepted.
    """
    for field, value in (("productId", product_id), ("operation", operation)):
        if value is None or value == "":
            raise ValidationError(f"Missing required field: {field}", field=field)
        if not isinstance(value, str):
            raise ValidationError(f"{field} must be a string", field=field)

    if quantity is None:
        raise ValidationError("Missing required field: quantity", field="quantity")

    # bool is an int subclass
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        raise ValidationError("quantity must be a number", field="quantity")
    if isinstance(quantity, float) and not quantity.is_integer():
        raise ValidationError("quantity must be a whole number", field="quantity")

    return int(quantity)


def adjust_stock(
    product_id: str,
    quantity: int,
    operation: str,
    *,
    store: StockStore | None = None,
    lock_backend: LockBackend | None = None,
    timeout: float | None = _UNSET,
) -> AdjustmentResult:
    """
    Read the product's stock, apply `operation` and write the new level back.

    The read and the write run under the product's lock, so concurrent
    adjustments of the same product are applied one after the other. The
    write must commit before the lock is released: do not call this inside
    `transaction.atomic()`. DjangoStockStore raises TransactionManagementError
    when it finds an open atomic block.

    Parameters
    ----------
    product_id : str
        Identifier of an existing product.
    quantity : int
        Amount to add or subtract, or the new level for "set".
    operation : str
        One of "add", "subtract", "set".
    store : StockStore | None
        Backing store. Defaults to DjangoStockStore.
    lock_backend : LockBackend | None
        Defaults to the LOCK_BACKEND setting.
    timeout : float | None
        Lock wait in seconds. Defaults to the LOCK_TIMEOUT setting.

    Raises
    ------
    ValidationError
        A required input is missing, quantity is not a whole number, or the
        new stock level does not fit the stock column.
    NotFoundError
        No product with that identifier. Nothing is written.
    InvalidOperationError
        Unknown operation tag. Nothing is written.
    StorageError
        The backing store failed on read or write.
    LockAcquireTimeout
        Another adjustment of the product held the lock for too long.
    """
    quantity = _validate(product_id, quantity, operation)

    if store is None:
        store = DjangoStockStore()
    if timeout is _UNSET:
        timeout = get_setting("LOCK_TIMEOUT")

    with lock(stock_lock_key(product_id), timeout=timeout, backend=lock_backend):
        record = store.get(product_id)
        if record is None:
            raise NotFoundError(f"Product '{product_id}' not found")

        previous_stock = record["stock_quantity"]
        new_stock = compute_new_stock(previous_stock, quantity, operation)
        data = store.update(product_id, new_stock, current=record)

    logger.info(
        "stock_adjusted",
        product_id=product_id,
        operation=operation,
        quantity=quantity,
        previous_stock=previous_stock,
        stock_quantity=new_stock,
    )
    return AdjustmentResult(data=data, previous_stock=previous_stock, operation=operation)


def add_stock(product_id: str, quantity: int, **kwargs: Any) -> AdjustmentResult:
    return adjust_stock(product_id, quantity, "add", **kwargs)


def subtract_stock(product_id: str, quantity: int, **kwargs: Any) -> AdjustmentResult:
    return adjust_stock(product_id, quantity, "subtract", **kwargs)


def set_stock(product_id: str, quantity: int, **kwargs: Any) -> AdjustmentResult:
    return adjust_stock(product_id, quantity, "set", **kwargs)
