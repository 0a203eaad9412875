from __future__ import annotations

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

Identifier = Union[int, str]

SALE_STATUS_PAID = "paid"
SALE_STATUS_UNPAID = "unpaid"
CREDIT_PAYMENT_METHOD = "credit"


class InventoryItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Identifier
    name: str
    description: str | None = None
    category: str | None = None
    price: float = 0.0
    cost_price: float | None = None
    stock: int = 0
    low_stock_alert: int | None = None

    def is_low_stock(self) -> bool:
        if self.low_stock_alert is None:
            return False
        return self.stock <= self.low_stock_alert


class CartLine(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Identifier
    name: str
    price: float = 0.0
    cost_price: float | None = None
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @property
    def line_cost(self) -> float:
        return (self.cost_price or 0.0) * self.quantity


class SaleLine(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Identifier | None = None
    name: str | None = None
    quantity: int = 0
    price: float = 0.0


class Sale(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Identifier | None = None
    receipt_number: str | None = None
    items: list[SaleLine] = Field(default_factory=list)
    total: float = 0.0
    total_cost: float = 0.0
    profit: float = 0.0
    payment_method: str | None = None
    customer_info: dict[str, Any] | None = None
    status: str = ""
    cashier_name: str | None = None
    timestamp: str | None = None

    @property
    def is_paid(self) -> bool:
        return self.status == SALE_STATUS_PAID


class PaymentInfo(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    payment_method: str = Field(alias="paymentMethod")
    customer_info: dict[str, Any] | None = Field(default=None, alias="customerInfo")


class Shift(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    cashier_name: str = Field(alias="cashierName")
    start_time: str = Field(alias="startTime")
    starting_cash: float = Field(alias="startingCash")


class Expense(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Identifier | None = None
    description: str | None = None
    amount: float = 0.0
    category: str | None = None
    cashier_name: str | None = None
    created_at: str | None = None


class StaffMember(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Identifier
    name: str | None = None
    role: str | None = None


class Category(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Identifier
    name: str
