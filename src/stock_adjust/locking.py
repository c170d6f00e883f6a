from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator, Protocol

from django.utils.module_loading import import_string

from .conf import get_setting
from .exceptions import LockAcquireTimeout


class LockBackend(Protocol):
    """
    Minimal interface a lock backend must provide.
    """
    def acquire(self, key: str, timeout: float | None) -> bool: ...
    def release(self, key: str) -> None: ...


@lru_cache(maxsize=None)
def _load_backend(path: str) -> LockBackend:
    # One instance per dotted path; in-process backends keep their lock table
    # on the instance.
    return import_string(path)()


def get_lock_backend() -> LockBackend:
    """Return the backend named by the LOCK_BACKEND setting."""
    return _load_backend(get_setting("LOCK_BACKEND"))


@contextmanager
def lock(
    key: str,
    timeout: float | None = 3.0,
    backend: LockBackend | None = None,
) -> Iterator[None]:
    """
    Hold the lock for `key` while the block runs.

    Only one execution holding the same key may enter the block at a time,
    across every worker the backend can see.

    Parameters
    ----------
    key : str
        Lock identifier, e.g. "stock:<product id>".

    timeout : float | None, default=3.0
        Maximum time (in seconds) to wait for the lock.

        - None: block indefinitely.
        - float: raise LockAcquireTimeout if exceeded.

    backend : LockBackend | None
        Optional backend override. Defaults to the configured backend.

    Raises
    ------
    LockAcquireTimeout
        If the lock cannot be acquired within the timeout.
    """
    be = backend or get_lock_backend()

    acquired = be.acquire(key, timeout)

    if not acquired:
        raise LockAcquireTimeout(
            f"Failed to acquire lock for key='{key}' within timeout={timeout}s"
        )

    try:
        yield
    finally:
        be.release(key)
