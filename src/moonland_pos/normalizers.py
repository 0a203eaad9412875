from __future__ import annotations

import json
import math
import logging
from typing import Any, Mapping

from .exceptions import DecodeError

logger = logging.getLogger(__name__)

_MONETARY_FIELDS = ("total", "profit", "total_cost")
_ROW_KEYS = ("rows", "items", "data")
_TEXT_FIELDS = ("payment_method", "cashier_name")


def normalize_rows(payload: Any) -> list[Any]:
    """Accept a bare list or an object wrapping rows; anything else is empty."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in _ROW_KEYS:
            rows = payload.get(key)
            if isinstance(rows, list):
                return rows
    return []


def decode_json_field(field: str, value: Any) -> Any:
    if not isinstance(value, (str, bytes, bytearray)):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError) as exc:
        raise DecodeError(field, value) from exc


def _decode_or_default(field: str, value: Any, default: Any, expected: type) -> Any:
    try:
        decoded = decode_json_field(field, value)
    except DecodeError as exc:
        logger.warning("sale_field_decode_failed", extra={"field": exc.field})
        return default
    if decoded is None:
        return decoded
    if not isinstance(decoded, expected):
        logger.warning("sale_field_unexpected_shape", extra={"field": field, "type": type(decoded).__name__})
        return default
    return decoded


def to_number(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _to_text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def normalize_sale_line(raw: Mapping[str, Any]) -> dict[str, Any]:
    line = dict(raw)
    line["quantity"] = int(to_number(raw.get("quantity")))
    line["price"] = to_number(raw.get("price"))
    line["name"] = _to_text(raw.get("name"))
    return line


def normalize_sale(raw: Mapping[str, Any]) -> dict[str, Any]:
    sale = dict(raw)
    for field in _MONETARY_FIELDS:
        sale[field] = to_number(raw.get(field))
    status = raw.get("status")
    sale["status"] = str(status) if status else ""

    sale["customer_info"] = _decode_or_default("customer_info", raw.get("customer_info"), {}, dict)
    items = _decode_or_default("items", raw.get("items"), [], list)
    sale["items"] = [normalize_sale_line(line) for line in items or [] if isinstance(line, Mapping)]

    for field in _TEXT_FIELDS:
        sale[field] = _to_text(raw.get(field))
    sale["timestamp"] = _to_text(raw.get("created_at") or raw.get("timestamp"))
    sale["receipt_number"] = _to_text(raw.get("receipt_number") or raw.get("receiptNumber"))
    sale.pop("receiptNumber", None)
    sale.pop("customerInfo", None)
    return sale


def normalize_sales(payload: Any) -> list[dict[str, Any]]:
    return [normalize_sale(row) for row in normalize_rows(payload) if isinstance(row, Mapping)]
