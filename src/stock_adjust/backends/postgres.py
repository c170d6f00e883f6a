import time

from django.db import DatabaseError, connection

from ..exceptions import StorageError
from ..hashing import key_to_int64


class PostgresAdvisoryLockBackend:
    """
    PostgreSQL advisory lock backend.

    Serializes stock adjustments of the same product across every process and
    host that shares the database. Advisory locks are identified by a 64-bit
    integer, derived from the lock key with `key_to_int64`.

    Key properties
    --------------
    - Connection-scoped: the lock belongs to the current database connection
      and is released by PostgreSQL if the connection drops.
    - Non-transactional: the lock is held across the separate read and write
      statements of an adjustment, whatever the autocommit mode.

    Timeout behavior
    ----------------
    - timeout=None: blocks in pg_advisory_lock until acquired.
    - timeout=float: polls pg_try_advisory_lock until the deadline.
    """

    poll_interval = 0.05

    def acquire(self, key: str, timeout: float | None) -> bool:
        lock_id = key_to_int64(key)

        try:
            if timeout is None:
                with connection.cursor() as cursor:
                    cursor.execute("SELECT pg_advisory_lock(%s);", [lock_id])
                return True

            deadline = time.monotonic() + timeout

            while True:
                with connection.cursor() as cursor:
                    cursor.execute("SELECT pg_try_advisory_lock(%s);", [lock_id])
                    acquired = cursor.fetchone()[0]

                if acquired:
                    return True
                if time.monotonic() >= deadline:
                    return False

                time.sleep(self.poll_interval)
        except DatabaseError as e:
            raise StorageError(f"Could not acquire stock lock for '{key}'") from e

    def release(self, key: str) -> None:
        """
        Release the advisory lock for `key`.

        PostgreSQL ignores unlock requests for locks this connection does not
        hold, so calling this from a finally block is safe.
        """
        lock_id = key_to_int64(key)

        with connection.cursor() as cursor:
            cursor.execute("SELECT pg_advisory_unlock(%s);", [lock_id])
