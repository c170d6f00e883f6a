import json

import pytest
from django.test import RequestFactory

from stock_adjust import views
from stock_adjust.exceptions import StorageError
from stock_adjust.models import Product


@pytest.fixture
def rf():
    return RequestFactory()


def _post(rf, body):
    data = body if isinstance(body, (str, bytes)) else json.dumps(body)
    request = rf.post("/update-stock/", data=data, content_type="application/json")
    return views.update_stock(request)


def _stock(product):
    return Product.objects.get(pk=product.pk).stock_quantity


def test_add(rf, product):
    response = _post(rf, {"productId": product.pk, "quantity": 3, "operation": "add"})

    assert response.status_code == 200
    body = json.loads(response.content)
    assert body["success"] is True
    assert body["previous_stock"] == 10
    assert body["operation"] == "add"
    assert body["data"]["stock_quantity"] == 13
    assert body["data"]["id"] == product.pk
    assert _stock(product) == 13


def test_subtract_clamps(rf, product):
    Product.objects.filter(pk=product.pk).update(stock_quantity=2)

    response = _post(rf, {"productId": product.pk, "quantity": 5, "operation": "subtract"})

    body = json.loads(response.content)
    assert body["data"]["stock_quantity"] == 0
    assert body["previous_stock"] == 2
    assert _stock(product) == 0


def test_set(rf, product):
    response = _post(rf, {"productId": product.pk, "quantity": 20, "operation": "set"})

    assert json.loads(response.content)["data"]["stock_quantity"] == 20
    assert _stock(product) == 20


@pytest.mark.parametrize("missing", ["productId", "quantity", "operation"])
def test_missing_field_is_400(rf, product, missing):
    body = {"productId": product.pk, "quantity": 3, "operation": "add"}
    del body[missing]

    response = _post(rf, body)

    assert response.status_code == 400
    assert missing in json.loads(response.content)["error"]
    assert _stock(product) == 10


def test_unknown_product_is_404(rf, django_db):
    response = _post(rf, {"productId": "missing", "quantity": 3, "operation": "add"})

    assert response.status_code == 404
    assert json.loads(response.content) == {"error": "Product 'missing' not found"}


def test_unknown_operation_is_500(rf, product):
    response = _post(rf, {"productId": product.pk, "quantity": 3, "operation": "multiply"})

    assert response.status_code == 500
    body = json.loads(response.content)
    assert "multiply" in body["error"]
    assert body["note"] == "Check function logs for details"
    assert _stock(product) == 10


@pytest.mark.parametrize("raw", ["not json", "[1, 2]", ""])
def test_invalid_body_is_400(rf, raw):
    response = _post(rf, raw)

    assert response.status_code == 400
    assert json.loads(response.content) == {"error": "Invalid JSON body"}


def test_storage_error_is_500_with_note(rf, monkeypatch):
    def broken(*args, **kwargs):
        raise StorageError("Failed to update stock for product 'p-1'")

    monkeypatch.setattr(views, "adjust_stock", broken)

    response = _post(rf, {"productId": "p-1", "quantity": 3, "operation": "add"})

    assert response.status_code == 500
    assert json.loads(response.content) == {
        "error": "Failed to update stock for product 'p-1'",
        "note": "Check function logs for details",
    }


def test_unexpected_error_is_500(rf, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(views, "adjust_stock", broken)

    response = _post(rf, {"productId": "p-1", "quantity": 3, "operation": "add"})

    assert response.status_code == 500
    assert json.loads(response.content)["error"] == "boom"


def test_preflight(rf):
    response = views.update_stock(rf.options("/update-stock/"))

    assert response.status_code == 200
    assert response.content == b"ok"
    assert response["Access-Control-Allow-Origin"] == "*"
    assert "content-type" in response["Access-Control-Allow-Headers"]
    assert response["Access-Control-Allow-Methods"] == "POST, OPTIONS"


def test_cors_headers_on_errors(rf):
    response = _post(rf, "not json")

    assert response["Access-Control-Allow-Origin"] == "*"


def test_get_not_allowed_keeps_cors_headers(rf):
    response = views.update_stock(rf.get("/update-stock/"))

    assert response.status_code == 405
    assert response["Allow"] == "POST, OPTIONS"
    assert response["Access-Control-Allow-Origin"] == "*"
    assert response["Access-Control-Allow-Methods"] == "POST, OPTIONS"


def test_url_is_routed():
    from django.urls import resolve

    match = resolve("/update-stock/")

    assert match.func is views.update_stock
    assert match.url_name == "update_stock"


class NeverBackend:
    def acquire(self, key, timeout):
        return False

    def release(self, key):
        raise AssertionError("release should not be called")


def test_busy_product_lock_is_409_without_note(rf, product, monkeypatch):
    from stock_adjust import locking

    monkeypatch.setattr(locking, "get_lock_backend", NeverBackend)

    response = _post(rf, {"productId": product.pk, "quantity": 3, "operation": "add"})

    assert response.status_code == 409
    body = json.loads(response.content)
    assert set(body) == {"error"}
    assert "stock:" in body["error"]
    assert response["Access-Control-Allow-Origin"] == "*"
    assert _stock(product) == 10


def test_numeric_product_id_is_400(rf, django_db):
    response = _post(rf, {"productId": 0, "quantity": 3, "operation": "add"})

    assert response.status_code == 400


def test_huge_quantity_is_400(rf, product):
    response = _post(rf, {"productId": product.pk, "quantity": 10**20, "operation": "add"})

    assert response.status_code == 400
    assert _stock(product) == 10


def test_view_opts_out_of_atomic_requests():
    # The write must be committed when the product lock is released.
    assert "default" in views.update_stock._non_atomic_requests
