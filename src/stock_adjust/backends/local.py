from __future__ import annotations

import threading
from collections import defaultdict


class LocalLockBackend:
    """
    In-process lock backend built on `threading.Lock`.

    Only serializes threads of the current process. Suitable for a single
    worker, for SQLite development setups, and for tests. Multi-process
    deployments need PostgresAdvisoryLockBackend.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)

    def _lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            return self._locks[key]

    def acquire(self, key: str, timeout: float | None) -> bool:
        if timeout is None:
            return self._lock_for(key).acquire()
        return self._lock_for(key).acquire(timeout=timeout)

    def release(self, key: str) -> None:
        self._lock_for(key).release()


class NullLockBackend:
    """
    Backend that never blocks.

    Adjustments run as a bare read-modify-write, so concurrent adjustments of
    the same product can lose updates.
    """

    def acquire(self, key: str, timeout: float | None) -> bool:
        return True

    def release(self, key: str) -> None:
        return None
