"""
Settings for stock_adjust.

Projects override any of the defaults below through a ``STOCK_ADJUST`` dict in
their Django settings::

    STOCK_ADJUST = {
        "LOCK_BACKEND": "stock_adjust.backends.local.LocalLockBackend",
        "LOCK_TIMEOUT": 1.5,
    }
"""
from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "PRODUCT_MODEL": "stock_adjust.Product",
    "LOCK_BACKEND": "stock_adjust.backends.postgres.PostgresAdvisoryLockBackend",
    "LOCK_TIMEOUT": 3.0,
    "CORS_ALLOW_ORIGIN": "*",
    "CORS_ALLOW_HEADERS": "authorization, x-client-info, apikey, content-type",
    "ERROR_NOTE": "Check function logs for details",
    "CONFIGURE_LOGGING": False,
}


def get_setting(name: str) -> Any:
    """
    Return the project's value for `name`, falling back to the default.

    Raises KeyError for names that are not stock_adjust settings.
    """
    if name not in DEFAULTS:
        raise KeyError(
            f"stock_adjust: unknown setting '{name}'. "
            f"Available: {sorted(DEFAULTS)}"
        )
    overrides = getattr(settings, "STOCK_ADJUST", None) or {}
    return overrides.get(name, DEFAULTS[name])
