"""
Exception hierarchy for stock_adjust.

Every failure of a stock adjustment is a `StockAdjustError`. Each subclass
carries the HTTP status the endpoint answers with, so callers outside the view
(management commands, background jobs) can map errors the same way.

Example
-------
>>> try:
...     adjust_stock("p-1", 3, "add")
... except StockAdjustError as exc:
...     print(exc.status, exc)
"""


class StockAdjustError(Exception):
    """
    Base exception for all stock_adjust errors.
    """

    #: Error code for programmatic handling.
    code: str = "stock_adjust_error"

    #: HTTP status used by the endpoint.
    status: int = 500

    default_message: str = "An unspecified stock adjustment error occurred."

    def __init__(self, message: str | None = None) -> None:
        if message is None:
            message = self.default_message
        super().__init__(message)


class ValidationError(StockAdjustError):
    """
    Raised when a required input is missing or malformed.

    `field` names the offending request field (e.g. "productId").
    """

    code: str = "validation_error"
    status: int = 400
    default_message = "Missing required fields"

    def __init__(self, message: str | None = None, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(StockAdjustError):
    """Raised when no product record exists for the given identifier."""

    code: str = "not_found"
    status: int = 404
    default_message = "Product not found"


class LockAcquireTimeout(StockAdjustError):
    """
    Raised when the per-product lock cannot be acquired within the timeout.

    This typically means another adjustment of the same product is running.
    Nothing has been read or written when this is raised.
    """

    code: str = "lock_acquire_timeout"
    status: int = 409
    default_message = "Stock for this product is being updated, try again"


class InvalidOperationError(StockAdjustError):
    """
    Raised for an operation tag other than "add", "subtract" or "set".

    Answered with 500 rather than 400 to keep the status the storefront
    already handles.
    """

    code: str = "invalid_operation"
    status: int = 500
    default_message = "Invalid operation"


class StorageError(StockAdjustError):
    """Raised when the backing store fails on read or write."""

    code: str = "storage_error"
    status: int = 500
    default_message = "Backing store is unavailable"
