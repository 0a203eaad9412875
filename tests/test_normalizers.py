from __future__ import annotations

import pytest

from moonland_pos.exceptions import DecodeError
from moonland_pos.models import Sale
from moonland_pos.normalizers import decode_json_field, normalize_rows, normalize_sale, normalize_sales, to_number


def test_encoded_items_are_decoded() -> None:
    sale = normalize_sale({"id": 1, "items": '[{"id":1,"quantity":2}]'})
    assert [(line["id"], line["quantity"]) for line in sale["items"]] == [(1, 2)]


def test_malformed_items_degrade_to_empty_list() -> None:
    sale = normalize_sale({"id": 1, "items": "{bad"})
    assert sale["items"] == []


def test_malformed_customer_info_degrades_to_empty_mapping() -> None:
    sale = normalize_sale({"id": 1, "customer_info": "{bad"})
    assert sale["customer_info"] == {}


def test_wrong_shape_falls_back() -> None:
    sale = normalize_sale({"items": '{"id": 1}', "customer_info": "[1, 2]"})
    assert sale["items"] == []
    assert sale["customer_info"] == {}


def test_structured_fields_pass_through() -> None:
    sale = normalize_sale({"items": [{"id": "A"}], "customer_info": {"phone": "555"}})
    assert [line["id"] for line in sale["items"]] == ["A"]
    assert sale["customer_info"] == {"phone": "555"}


def test_line_items_and_text_fields_are_coerced() -> None:
    sale = normalize_sale(
        {
            "receipt_number": 1002,
            "cashier_name": 7,
            "items": '[{"id": 1, "name": 5, "quantity": null, "price": "2.5"}, {"id": 2, "quantity": "3"}]',
        }
    )
    assert sale["receipt_number"] == "1002"
    assert sale["cashier_name"] == "7"
    assert sale["items"][0] == {"id": 1, "name": "5", "quantity": 0, "price": 2.5}
    assert sale["items"][1]["quantity"] == 3
    assert sale["items"][1]["price"] == 0.0

    model = Sale.model_validate(sale)
    assert model.receipt_number == "1002"
    assert [line.quantity for line in model.items] == [0, 3]


def test_monetary_fields_and_status_defaults() -> None:
    sale = normalize_sale({"total": "12.5", "profit": None, "total_cost": "n/a"})
    assert sale["total"] == 12.5
    assert sale["profit"] == 0.0
    assert sale["total_cost"] == 0.0
    assert sale["status"] == ""
    assert normalize_sale({"status": "paid"})["status"] == "paid"


def test_display_fields_prefer_server_values() -> None:
    sale = normalize_sale(
        {
            "created_at": "2026-03-01T09:00:00Z",
            "timestamp": "client-time",
            "receiptNumber": "RCP-client",
            "receipt_number": "RCP-server",
        }
    )
    assert sale["timestamp"] == "2026-03-01T09:00:00Z"
    assert sale["receipt_number"] == "RCP-server"
    assert "receiptNumber" not in sale

    fallback = normalize_sale({"timestamp": "client-time", "receiptNumber": "RCP-client"})
    assert fallback["timestamp"] == "client-time"
    assert fallback["receipt_number"] == "RCP-client"


def test_normalized_sale_validates_as_model() -> None:
    raw = {
        "id": 3,
        "items": '[{"id": "A", "name": "Tea", "quantity": 2, "price": 10}]',
        "customer_info": '{"name": "Ana"}',
        "total": "20",
        "status": "paid",
    }
    sale = Sale.model_validate(normalize_sale(raw))
    assert sale.items[0].name == "Tea"
    assert sale.is_paid


def test_normalize_sales_skips_non_mappings() -> None:
    assert len(normalize_sales({"data": [{"id": 1}, "junk", None]})) == 1
    assert normalize_sales(None) == []


def test_normalize_rows_shapes() -> None:
    assert normalize_rows([1, 2]) == [1, 2]
    assert normalize_rows({"items": [3]}) == [3]
    assert normalize_rows({"unexpected": True}) == []
    assert normalize_rows("text") == []


def test_decode_json_field_raises_decode_error() -> None:
    with pytest.raises(DecodeError) as excinfo:
        decode_json_field("items", "{bad")
    assert excinfo.value.field == "items"


def test_to_number() -> None:
    assert to_number("3") == 3.0
    assert to_number(True) == 0.0
    assert to_number(None, default=1.5) == 1.5
    assert to_number("nan") == 0.0
    assert to_number(float("inf")) == 0.0
