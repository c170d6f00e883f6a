from .exceptions import (
    InvalidOperationError,
    LockAcquireTimeout,
    NotFoundError,
    StockAdjustError,
    StorageError,
    ValidationError,
)
from .service import AdjustmentResult, add_stock, adjust_stock, set_stock, subtract_stock

__all__ = [
    "adjust_stock",
    "add_stock",
    "subtract_stock",
    "set_stock",
    "AdjustmentResult",
    "StockAdjustError",
    "ValidationError",
    "NotFoundError",
    "LockAcquireTimeout",
    "InvalidOperationError",
    "StorageError",
]
