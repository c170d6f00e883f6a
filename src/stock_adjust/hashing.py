import hashlib

LOCK_KEY_PREFIX = "stock"


def stock_lock_key(product_id: str) -> str:
    """Lock key guarding the stock of a single product."""
    return f"{LOCK_KEY_PREFIX}:{product_id}"


def key_to_int64(key: str) -> int:
    """
    Convert a string key into a stable signed 64-bit integer.

    PostgreSQL advisory locks are identified by a BIGINT, while stock lock keys
    are strings such as "stock:3f2a...". The key is hashed with BLAKE2b using
    an 8-byte digest, which is stable across processes, Python versions and
    platforms, so every worker maps the same product to the same lock id.

    Parameters
    ----------
    key : str
        Lock key, usually built with `stock_lock_key`.

    Returns
    -------
    int
        Signed 64-bit integer suitable for pg_advisory_lock.
    """
    digest = hashlib.blake2b(
        key.encode("utf-8"),
        digest_size=8,
    ).digest()

    value = int.from_bytes(digest, byteorder="big", signed=False)

    # PostgreSQL BIGINT is signed
    if value >= 2**63:
        value -= 2**64

    return value
