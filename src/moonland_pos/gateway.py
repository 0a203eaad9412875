from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from .clients.categories_client import CategoriesClient
from .clients.expenses_client import ExpensesClient
from .clients.inventory_client import InventoryClient
from .clients.sales_client import SalesClient
from .clients.staff_client import StaffClient
from .config import ClientConfig
from .http_client import HttpClient
from .models import Category, Expense, Identifier, InventoryItem, Sale, StaffMember
from .tracing import TraceContext


class PosGateway(Protocol):
    """Remote capabilities the store depends on."""

    def get_inventory(self) -> list[InventoryItem]: ...

    def get_sales(self) -> list[Sale]: ...

    def get_expenses(self) -> list[Expense]: ...

    def get_staff(self) -> list[StaffMember]: ...

    def get_categories(self) -> list[Category]: ...

    def add_inventory_item(self, item: Mapping[str, Any]) -> InventoryItem: ...

    def update_inventory_item(self, item_id: Identifier, patch: Mapping[str, Any]) -> InventoryItem: ...

    def delete_inventory_item(self, item_id: Identifier) -> None: ...

    def add_sale(self, record: Mapping[str, Any]) -> Sale: ...

    def update_stock(self, item_id: Identifier, new_stock: int) -> InventoryItem | None: ...

    def pay_credit_sale(self, sale_id: Identifier) -> Sale: ...

    def add_expense(self, record: Mapping[str, Any]) -> Expense: ...

    def add_category(self, record: Mapping[str, Any]) -> Category: ...

    def update_category(self, category_id: Identifier, patch: Mapping[str, Any]) -> Category: ...

    def delete_category(self, category_id: Identifier) -> None: ...


@dataclass
class ApiGateway:
    """HTTP implementation of :class:`PosGateway`.

    One ``HttpClient`` (and so one pooled ``requests.Session``) is shared by
    every resource client, which keeps the gateway safe to fan out from a
    thread pool.
    """

    config: ClientConfig
    access_token: str | None = None
    trace: TraceContext | None = None
    http: HttpClient | None = None

    def __post_init__(self) -> None:
        self.trace = self.trace or TraceContext()
        self.http = self.http or HttpClient(config=self.config, trace=self.trace)

    def set_token(self, access_token: str | None) -> None:
        self.access_token = access_token
        if self.trace:
            self.trace.reset()

    def inventory_client(self) -> InventoryClient:
        return InventoryClient(http=self.http, access_token=self.access_token)

    def sales_client(self) -> SalesClient:
        return SalesClient(http=self.http, access_token=self.access_token)

    def expenses_client(self) -> ExpensesClient:
        return ExpensesClient(http=self.http, access_token=self.access_token)

    def staff_client(self) -> StaffClient:
        return StaffClient(http=self.http, access_token=self.access_token)

    def categories_client(self) -> CategoriesClient:
        return CategoriesClient(http=self.http, access_token=self.access_token)

    def get_inventory(self) -> list[InventoryItem]:
        return self.inventory_client().list_items()

    def get_sales(self) -> list[Sale]:
        return self.sales_client().list_sales()

    def get_expenses(self) -> list[Expense]:
        return self.expenses_client().list_expenses()

    def get_staff(self) -> list[StaffMember]:
        return self.staff_client().list_staff()

    def get_categories(self) -> list[Category]:
        return self.categories_client().list_categories()

    def add_inventory_item(self, item: Mapping[str, Any]) -> InventoryItem:
        return self.inventory_client().create_item(item)

    def update_inventory_item(self, item_id: Identifier, patch: Mapping[str, Any]) -> InventoryItem:
        return self.inventory_client().update_item(item_id, patch)

    def delete_inventory_item(self, item_id: Identifier) -> None:
        self.inventory_client().delete_item(item_id)

    def update_stock(self, item_id: Identifier, new_stock: int) -> InventoryItem | None:
        return self.inventory_client().update_stock(item_id, new_stock)

    def add_sale(self, record: Mapping[str, Any]) -> Sale:
        return self.sales_client().create_sale(record)

    def pay_credit_sale(self, sale_id: Identifier) -> Sale:
        return self.sales_client().pay_credit_sale(sale_id)

    def add_expense(self, record: Mapping[str, Any]) -> Expense:
        return self.expenses_client().create_expense(record)

    def add_category(self, record: Mapping[str, Any]) -> Category:
        return self.categories_client().create_category(record)

    def update_category(self, category_id: Identifier, patch: Mapping[str, Any]) -> Category:
        return self.categories_client().update_category(category_id, patch)

    def delete_category(self, category_id: Identifier) -> None:
        self.categories_client().delete_category(category_id)
