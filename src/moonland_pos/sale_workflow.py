"""Checkout arithmetic with no I/O.

Everything here works on plain cart/inventory snapshots so the results can
be checked without a gateway. ``PosStore.process_sale`` performs the writes.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from .exceptions import CartEmptyError
from .models import (
    SALE_STATUS_PAID,
    SALE_STATUS_UNPAID,
    CREDIT_PAYMENT_METHOD,
    CartLine,
    Identifier,
    InventoryItem,
    PaymentInfo,
)

RECEIPT_PREFIX = "RCP"
UNKNOWN_CASHIER = "Unknown"


@dataclass(frozen=True)
class SaleTotals:
    total: float
    total_cost: float

    @property
    def profit(self) -> float:
        return self.total - self.total_cost


@dataclass(frozen=True)
class StockUpdate:
    item_id: Identifier
    new_stock: int


@dataclass(frozen=True)
class SaleDraft:
    receipt_number: str
    record: dict[str, Any]
    stock_updates: list[StockUpdate]


def generate_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{random.randint(0, 999)}"


def generate_receipt_number() -> str:
    return generate_id(RECEIPT_PREFIX)


def compute_totals(cart: Iterable[CartLine]) -> SaleTotals:
    total = 0.0
    total_cost = 0.0
    for line in cart:
        total += line.line_total
        total_cost += line.line_cost
    return SaleTotals(total=total, total_cost=total_cost)


def resolve_status(payment_method: str | None) -> str:
    if payment_method == CREDIT_PAYMENT_METHOD:
        return SALE_STATUS_UNPAID
    return SALE_STATUS_PAID


def build_sale_record(
    cart: Sequence[CartLine],
    payment_info: PaymentInfo,
    *,
    cashier_name: str | None,
    receipt_number: str,
) -> dict[str, Any]:
    if not cart:
        raise CartEmptyError()
    totals = compute_totals(cart)
    return {
        "receipt_number": receipt_number,
        "items": [
            {"id": line.id, "name": line.name, "quantity": line.quantity, "price": line.price}
            for line in cart
        ],
        "total": totals.total,
        "total_cost": totals.total_cost,
        "profit": totals.profit,
        "payment_method": payment_info.payment_method,
        "customer_info": payment_info.customer_info,
        "status": resolve_status(payment_info.payment_method),
        "cashier_name": cashier_name or UNKNOWN_CASHIER,
    }


def compute_stock_updates(cart: Iterable[CartLine], inventory: Iterable[InventoryItem]) -> list[StockUpdate]:
    # An item missing from the local inventory counts as zero stock.
    stock_by_id = {item.id: item.stock for item in inventory}
    return [
        StockUpdate(item_id=line.id, new_stock=stock_by_id.get(line.id, 0) - line.quantity)
        for line in cart
    ]


def draft_sale(
    cart: Sequence[CartLine],
    inventory: Sequence[InventoryItem],
    payment_info: PaymentInfo,
    *,
    cashier_name: str | None,
    receipt_number: str | None = None,
) -> SaleDraft:
    receipt = receipt_number or generate_receipt_number()
    record = build_sale_record(cart, payment_info, cashier_name=cashier_name, receipt_number=receipt)
    return SaleDraft(
        receipt_number=receipt,
        record=record,
        stock_updates=compute_stock_updates(cart, inventory),
    )
