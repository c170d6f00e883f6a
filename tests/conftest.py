"""
Django configuration for the test run.

SQLite in memory by default. When DATABASE_URL points at PostgreSQL the same
tests run against it, and the advisory lock tests are enabled.
"""

import os
from urllib.parse import urlparse

import pytest


def _database_settings() -> dict:
    database_url = os.environ.get("DATABASE_URL")
    if database_url:
        u = urlparse(database_url)
        if u.scheme in {"postgres", "postgresql"}:
            return {
                "ENGINE": "django.db.backends.postgresql",
                "NAME": (u.path or "").lstrip("/"),
                "USER": u.username or "",
                "PASSWORD": u.password or "",
                "HOST": u.hostname or "localhost",
                "PORT": str(u.port or 5432),
                "CONN_MAX_AGE": 0,
            }
    return {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"}


def pytest_configure(config) -> None:
    from django.conf import settings

    if settings.configured:
        return

    settings.configure(
        SECRET_KEY="test",
        INSTALLED_APPS=["stock_adjust"],
        DATABASES={"default": _database_settings()},
        ROOT_URLCONF="stock_adjust.urls",
        STOCK_ADJUST={
            "LOCK_BACKEND": "stock_adjust.backends.local.LocalLockBackend",
            "LOCK_TIMEOUT": 1.0,
        },
        TIME_ZONE="UTC",
        USE_TZ=True,
    )

    import django

    django.setup()


class MemoryStore:
    """StockStore keeping records in a dict and recording every call."""

    def __init__(self, records=None):
        self.records = {pid: dict(rec) for pid, rec in (records or {}).items()}
        self.reads = []
        self.writes = []

    def get(self, product_id):
        self.reads.append(product_id)
        record = self.records.get(product_id)
        return dict(record) if record is not None else None

    def update(self, product_id, stock_quantity, current=None):
        self.writes.append((product_id, stock_quantity))
        self.records[product_id]["stock_quantity"] = stock_quantity
        return dict(self.records[product_id])


@pytest.fixture
def memory_store():
    """Factory: memory_store(stock=10) -> store holding product "p-1"."""

    def make(stock=10, product_id="p-1"):
        return MemoryStore(
            {product_id: {"id": product_id, "name": "Basmati rice 5kg", "stock_quantity": stock}}
        )

    return make


@pytest.fixture(scope="session")
def django_db():
    from django.core.management import call_command

    call_command("migrate", verbosity=0)


@pytest.fixture
def product(django_db):
    from stock_adjust.models import Product

    p = Product.objects.create(name="Basmati rice 5kg", price="12.50", stock_quantity=10)
    yield p
    Product.objects.filter(pk=p.pk).delete()
