from __future__ import annotations

import json

import responses

from moonland_pos.config import ClientConfig
from moonland_pos.gateway import ApiGateway

BASE = "https://api.example.com"


def _gateway(token: str | None = "token") -> ApiGateway:
    cfg = ClientConfig(env_name="test", api_base_url=BASE, retries=0, retry_backoff_seconds=0)
    return ApiGateway(config=cfg, access_token=token)


@responses.activate
def test_get_inventory_accepts_wrapped_rows_and_sends_token() -> None:
    responses.add(
        responses.GET,
        f"{BASE}/inventory",
        json={"rows": [{"id": 1, "name": "Espresso", "price": 2.5, "stock": 4, "low_stock_alert": 5}]},
        status=200,
    )
    items = _gateway().get_inventory()

    assert [item.name for item in items] == ["Espresso"]
    assert items[0].is_low_stock()
    assert responses.calls[0].request.headers["Authorization"] == "Bearer token"


@responses.activate
def test_null_list_payload_is_empty() -> None:
    responses.add(responses.GET, f"{BASE}/staff", json=None, status=200)
    assert _gateway(token=None).get_staff() == []
    assert "Authorization" not in responses.calls[0].request.headers


@responses.activate
def test_get_sales_normalizes_encoded_fields() -> None:
    responses.add(
        responses.GET,
        f"{BASE}/sales",
        json=[
            {
                "id": 7,
                "receipt_number": "RCP-1",
                "total": "20.50",
                "items": '[{"id": 1, "name": "Tea", "quantity": 2, "price": 10.25}]',
                "customer_info": '{"name": "Bo"}',
                "status": "unpaid",
                "created_at": "2026-01-01T10:00:00Z",
            }
        ],
        status=200,
    )
    sale = _gateway().get_sales()[0]

    assert sale.total == 20.5
    assert sale.profit == 0.0
    assert sale.items[0].quantity == 2
    assert sale.customer_info == {"name": "Bo"}
    assert sale.timestamp == "2026-01-01T10:00:00Z"
    assert sale.receipt_number == "RCP-1"
    assert not sale.is_paid


@responses.activate
def test_add_sale_and_pay_credit_sale() -> None:
    responses.add(
        responses.POST,
        f"{BASE}/sales",
        json={"id": 11, "receipt_number": "RCP-9", "total": 20, "status": "unpaid", "items": []},
        status=201,
    )
    responses.add(
        responses.POST,
        f"{BASE}/sales/11/pay",
        json={"id": 11, "receipt_number": "RCP-9", "total": 20, "status": "paid", "items": []},
        status=200,
    )
    gateway = _gateway()

    created = gateway.add_sale({"receipt_number": "RCP-9", "total": 20, "status": "unpaid"})
    paid = gateway.pay_credit_sale(11)

    assert created.status == "unpaid"
    assert paid.is_paid
    assert json.loads(responses.calls[0].request.body)["receipt_number"] == "RCP-9"


@responses.activate
def test_update_stock_sends_new_level() -> None:
    responses.add(responses.PATCH, f"{BASE}/inventory/A/stock", json={"ok": True}, status=200)
    responses.add(
        responses.PATCH,
        f"{BASE}/inventory/B/stock",
        json={"id": "B", "name": "Bagel", "stock": 3},
        status=200,
    )
    gateway = _gateway()

    assert gateway.update_stock("A", 8) is None
    assert gateway.update_stock("B", 3).stock == 3
    assert json.loads(responses.calls[0].request.body) == {"stock": 8}


@responses.activate
def test_inventory_and_category_writes() -> None:
    responses.add(responses.POST, f"{BASE}/inventory", json={"id": 5, "name": "Mug", "price": 8}, status=201)
    responses.add(responses.PUT, f"{BASE}/inventory/5", json={"id": 5, "name": "Mug", "price": 9}, status=200)
    responses.add(responses.DELETE, f"{BASE}/inventory/5", status=204)
    responses.add(responses.POST, f"{BASE}/categories", json={"id": 1, "name": "Drinks"}, status=201)
    responses.add(responses.PUT, f"{BASE}/categories/1", json={"id": 1, "name": "Hot drinks"}, status=200)
    responses.add(responses.DELETE, f"{BASE}/categories/1", status=204)
    responses.add(responses.POST, f"{BASE}/expenses", json={"id": 2, "amount": 12.5, "cashier_name": "Admin"}, status=201)
    gateway = _gateway()

    assert gateway.add_inventory_item({"name": "Mug", "price": 8}).id == 5
    assert gateway.update_inventory_item(5, {"price": 9}).price == 9
    gateway.delete_inventory_item(5)
    assert gateway.add_category({"name": "Drinks"}).name == "Drinks"
    assert gateway.update_category(1, {"name": "Hot drinks"}).name == "Hot drinks"
    gateway.delete_category(1)
    assert gateway.add_expense({"amount": 12.5}).cashier_name == "Admin"
    assert [call.request.method for call in responses.calls] == [
        "POST",
        "PUT",
        "DELETE",
        "POST",
        "PUT",
        "DELETE",
        "POST",
    ]


def test_set_token_resets_trace() -> None:
    gateway = _gateway(token=None)
    gateway.trace.ensure()
    gateway.set_token("fresh")

    assert gateway.access_token == "fresh"
    assert gateway.trace.trace_id is None
    assert gateway.inventory_client().access_token == "fresh"


def test_create_store_wires_http_gateway(tmp_path) -> None:
    from moonland_pos import PosStore, RecordingNotificationSink, create_store

    cfg = ClientConfig(env_name="test", api_base_url=BASE, max_workers=2, data_dir=str(tmp_path))
    sink = RecordingNotificationSink()
    store = create_store(cfg, notifier=sink)

    assert isinstance(store, PosStore)
    assert isinstance(store.gateway, ApiGateway)
    assert store.max_workers == 2
    assert store.notifier is sink
    store.start_shift("Alice", "100")
    assert (tmp_path / "shift_state.json").exists()


_MIXED_SALES = [
    {"id": 1, "receipt_number": "RCP-1", "total": 10, "status": "paid", "items": []},
    {"id": 2, "receipt_number": 1002, "total": "4", "items": '[{"id": 1, "quantity": null}]'},
    {"id": {"unexpected": "shape"}, "receipt_number": "RCP-3"},
]


@responses.activate
def test_get_sales_keeps_readable_rows_when_one_is_malformed() -> None:
    responses.add(responses.GET, f"{BASE}/sales", json=_MIXED_SALES, status=200)
    sales = _gateway().get_sales()

    assert [sale.id for sale in sales] == [1, 2]
    assert sales[1].receipt_number == "1002"
    assert sales[1].items[0].quantity == 0


@responses.activate
def test_store_load_survives_malformed_sale_row(tmp_path) -> None:
    from moonland_pos import PosStore, RecordingNotificationSink, ShiftStorage
    from moonland_pos.session_provider import InMemorySessionProvider, SessionUser

    responses.add(responses.GET, f"{BASE}/sales", json=_MIXED_SALES, status=200)
    for path in ("inventory", "expenses", "staff", "categories"):
        responses.add(responses.GET, f"{BASE}/{path}", json=[], status=200)
    store = PosStore(_gateway(token=None), shift_storage=ShiftStorage(data_dir=tmp_path), notifier=RecordingNotificationSink())
    provider = InMemorySessionProvider()
    store.attach(provider)

    provider.sign_in(SessionUser(id="u1", username="alice", access_token="tok"))

    assert [sale.id for sale in store.sales] == [1, 2]
    assert [sale.receipt_number for sale in store.unpaid_sales()] == ["1002"]
