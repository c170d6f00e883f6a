from __future__ import annotations

from typing import Literal

from .exceptions import InvalidOperationError

Operation = Literal["add", "subtract", "set"]

OPERATIONS: tuple[str, ...] = ("add", "subtract", "set")


def compute_new_stock(current: int, quantity: int, operation: str) -> int:
    """
    Apply `operation` to the current stock level.

    - "add": current + quantity
    - "subtract": current - quantity, clamped at zero instead of failing
    - "set": quantity as given; negative values are not clamped
    """
    if operation == "add":
        return current + quantity
    if operation == "subtract":
        return max(current - quantity, 0)
    if operation == "set":
        return quantity
    raise InvalidOperationError(
        f"Invalid operation '{operation}'. Expected one of: {', '.join(OPERATIONS)}"
    )
