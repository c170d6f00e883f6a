from __future__ import annotations

import json

import structlog
from django.db import transaction
from django.http import HttpRequest, HttpResponse, HttpResponseNotAllowed, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .conf import get_setting
from .exceptions import StockAdjustError
from .service import adjust_stock

logger = structlog.get_logger(__name__)

ALLOWED_METHODS = ["POST", "OPTIONS"]


def _with_cors(response: HttpResponse) -> HttpResponse:
    response["Access-Control-Allow-Origin"] = get_setting("CORS_ALLOW_ORIGIN")
    response["Access-Control-Allow-Headers"] = get_setting("CORS_ALLOW_HEADERS")
    response["Access-Control-Allow-Methods"] = "POST, OPTIONS"
    return response


def _error(message: str, *, status: int) -> JsonResponse:
    """
    Error body shared by every failure: {"error": ..., "note"?: ...}.

    Server-side failures point the caller at the logs.
    """
    payload = {"error": message}
    if status >= 500:
        payload["note"] = get_setting("ERROR_NOTE")
    return _with_cors(JsonResponse(payload, status=status))


# The write must commit before the product lock is released.
@transaction.non_atomic_requests
@csrf_exempt  # called cross-origin by the storefront
def update_stock(request: HttpRequest) -> HttpResponse:
    """
    Adjust a product's stock level.

    Body: {"productId": str, "quantity": number, "operation": "add"|"subtract"|"set"}
    """
    if request.method not in ALLOWED_METHODS:
        return _with_cors(HttpResponseNotAllowed(ALLOWED_METHODS))
    if request.method == "OPTIONS":
        return _with_cors(HttpResponse("ok"))

    structlog.contextvars.clear_contextvars()

    try:
        payload = json.loads(request.body or b"null")
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        logger.warning("stock_adjust_rejected", reason="invalid_json")
        return _error("Invalid JSON body", status=400)

    product_id = payload.get("productId")
    operation = payload.get("operation")
    structlog.contextvars.bind_contextvars(product_id=product_id, operation=operation)

    try:
        result = adjust_stock(product_id, payload.get("quantity"), operation)
    except StockAdjustError as exc:
        if exc.status >= 500:
            logger.error("stock_adjust_failed", code=exc.code, error=str(exc))
        else:
            logger.warning("stock_adjust_rejected", code=exc.code, error=str(exc))
        return _error(str(exc), status=exc.status)
    except Exception as exc:
        logger.exception("stock_adjust_crashed")
        return _error(str(exc) or exc.__class__.__name__, status=500)
    finally:
        structlog.contextvars.clear_contextvars()

    return _with_cors(JsonResponse(result.as_response()))
