from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

from pydantic import BaseModel, ValidationError

from .gateway import PosGateway
from .logging_utils import log_action
from .models import (
    CartLine,
    Category,
    Expense,
    Identifier,
    InventoryItem,
    PaymentInfo,
    Sale,
    Shift,
    StaffMember,
)
from .notifications import (
    VARIANT_DEFAULT,
    VARIANT_DESTRUCTIVE,
    LoggingNotificationSink,
    Notification,
    NotificationSink,
)
from .sale_workflow import StockUpdate, draft_sale
from .session_provider import SessionProvider, SessionUser
from .shift_store import ShiftStorage
from .ui_errors import to_user_facing_error

logger = logging.getLogger(__name__)

FALLBACK_EXPENSE_CASHIER = "Admin"

_FAILED = object()


def _whole_number(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return int(number) if number.is_integer() else None


class PosStore:
    """Owns the point-of-sale state and every write that changes it.

    Collections are exposed as copies. Network work is fanned out to a thread
    pool but results are always applied on the caller's thread, so the store
    itself needs no locking.
    """

    def __init__(
        self,
        gateway: PosGateway,
        *,
        shift_storage: ShiftStorage | None = None,
        notifier: NotificationSink | None = None,
        max_workers: int = 5,
    ) -> None:
        self.gateway = gateway
        self.shift_storage = shift_storage or ShiftStorage()
        self.notifier = notifier or LoggingNotificationSink()
        self.max_workers = max(1, max_workers)
        self._inventory: list[InventoryItem] = []
        self._sales: list[Sale] = []
        self._expenses: list[Expense] = []
        self._staff: list[StaffMember] = []
        self._categories: list[Category] = []
        self._cart: list[CartLine] = []
        self._loading = True
        self._user: SessionUser | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._current_shift = self.shift_storage.load()

    # -- snapshots ---------------------------------------------------------

    @property
    def inventory(self) -> list[InventoryItem]:
        return list(self._inventory)

    @property
    def sales(self) -> list[Sale]:
        return list(self._sales)

    @property
    def expenses(self) -> list[Expense]:
        return list(self._expenses)

    @property
    def staff(self) -> list[StaffMember]:
        return list(self._staff)

    @property
    def categories(self) -> list[Category]:
        return list(self._categories)

    @property
    def cart(self) -> list[CartLine]:
        return list(self._cart)

    @property
    def current_shift(self) -> Shift | None:
        return self._current_shift

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def user(self) -> SessionUser | None:
        return self._user

    # -- lifecycle ---------------------------------------------------------

    def attach(self, session_provider: SessionProvider) -> None:
        self.detach()
        self._unsubscribe = session_provider.subscribe(self.on_session_change)
        self.on_session_change(session_provider.current_user())

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def on_session_change(self, user: SessionUser | None) -> None:
        self._user = user
        if user is None:
            self._clear_collections()
            return
        set_token = getattr(self.gateway, "set_token", None)
        if callable(set_token):
            set_token(user.access_token)
        self.load_all()

    def load_all(self) -> None:
        fetchers: dict[str, Callable[[], list[Any]]] = {
            "inventory": self.gateway.get_inventory,
            "sales": self.gateway.get_sales,
            "expenses": self.gateway.get_expenses,
            "staff": self.gateway.get_staff,
            "categories": self.gateway.get_categories,
        }
        self._loading = True
        try:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures: dict[Future, str] = {
                    executor.submit(fetch): name for name, fetch in fetchers.items()
                }
                for future in as_completed(futures):
                    name = futures[future]
                    try:
                        rows = future.result()
                    except Exception as exc:
                        logger.warning("initial_fetch_failed", extra={"collection": name, "error": str(exc)})
                        rows = []
                    setattr(self, f"_{name}", list(rows or []))
        finally:
            self._loading = False

    def _clear_collections(self) -> None:
        self._inventory = []
        self._sales = []
        self._expenses = []
        self._staff = []
        self._categories = []
        self._loading = False

    # -- cart --------------------------------------------------------------

    def add_to_cart(self, item: InventoryItem | CartLine | Mapping[str, Any]) -> None:
        data = item.model_dump() if isinstance(item, BaseModel) else dict(item)
        for index, line in enumerate(self._cart):
            if line.id == data.get("id"):
                self._cart[index] = line.model_copy(update={"quantity": line.quantity + 1})
                return
        self._cart.append(CartLine.model_validate({**data, "quantity": 1}))

    def remove_from_cart(self, item_id: Identifier) -> None:
        self._cart = [line for line in self._cart if line.id != item_id]

    def update_cart_quantity(self, item_id: Identifier, quantity: int | float) -> None:
        whole = _whole_number(quantity)
        if whole is None:
            self._notify("Cart Error", "Quantity must be a whole number", variant=VARIANT_DESTRUCTIVE)
            return
        if whole <= 0:
            self.remove_from_cart(item_id)
            return
        self._cart = [
            line.model_copy(update={"quantity": whole}) if line.id == item_id else line
            for line in self._cart
        ]

    def clear_cart(self) -> None:
        self._cart = []

    def cart_total(self) -> float:
        return sum(line.line_total for line in self._cart)

    # -- sales -------------------------------------------------------------

    def process_sale(self, payment_info: PaymentInfo | Mapping[str, Any]) -> Sale | None:
        if not self._cart:
            self._notify("Error", "Cart is empty", variant=VARIANT_DESTRUCTIVE)
            return None
        try:
            payment = (
                payment_info
                if isinstance(payment_info, PaymentInfo)
                else PaymentInfo.model_validate(payment_info)
            )
        except ValidationError as exc:
            self._notify("Sale Failed", "Payment method is required", variant=VARIANT_DESTRUCTIVE)
            logger.warning("invalid_payment_info", extra={"errors": exc.error_count()})
            return None

        cashier = self._current_shift.cashier_name if self._current_shift else None
        draft = draft_sale(self._cart, self._inventory, payment, cashier_name=cashier)

        created = self._call("sales", "create", self.gateway.add_sale, draft.record, failure_title="Sale Failed")
        if created is _FAILED:
            return None

        failed_updates = self._apply_stock_updates(draft.stock_updates)

        sale = created.model_copy(update={"receipt_number": created.receipt_number or draft.receipt_number})
        self._sales.append(sale)
        self._cart = []
        self._notify("Sale Completed", f"Receipt #{draft.receipt_number}")

        if failed_updates:
            self._reconcile_stock(failed_updates)
        return sale

    def _apply_stock_updates(self, updates: list[StockUpdate]) -> list[StockUpdate]:
        failed: list[StockUpdate] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures: dict[Future, StockUpdate] = {
                executor.submit(self.gateway.update_stock, update.item_id, update.new_stock): update
                for update in updates
            }
            for future in as_completed(futures):
                update = futures[future]
                try:
                    returned = future.result()
                except Exception as exc:
                    logger.warning(
                        "stock_update_failed",
                        extra={"item_id": update.item_id, "new_stock": update.new_stock, "error": str(exc)},
                    )
                    failed.append(update)
                    continue
                self._set_local_stock(update, returned)
        return failed

    def _set_local_stock(self, update: StockUpdate, returned: InventoryItem | None) -> None:
        for index, item in enumerate(self._inventory):
            if item.id == update.item_id:
                self._inventory[index] = returned or item.model_copy(update={"stock": update.new_stock})
                return

    def _reconcile_stock(self, failed: list[StockUpdate]) -> None:
        # The sale is already recorded server-side; there is nothing to roll back.
        item_ids = ", ".join(str(update.item_id) for update in failed)
        self._notify(
            "Stock Sync Incomplete",
            f"Stock could not be updated for: {item_ids}",
            variant=VARIANT_DESTRUCTIVE,
        )
        self.refresh_inventory()

    def pay_credit_sale(self, sale_id: Identifier) -> Sale | None:
        updated = self._call("sales", "pay_credit", self.gateway.pay_credit_sale, sale_id, failure_title="Update Failed")
        if updated is _FAILED:
            return None
        self._sales = [updated if sale.id == sale_id else sale for sale in self._sales]
        self._notify("Credit Sale Paid")
        return updated

    def unpaid_sales(self) -> list[Sale]:
        return [sale for sale in self._sales if not sale.is_paid]

    # -- expenses ----------------------------------------------------------

    def add_expense(self, expense: Expense | Mapping[str, Any]) -> Expense | None:
        data = expense.model_dump(exclude_none=True) if isinstance(expense, BaseModel) else dict(expense)
        data["cashier_name"] = (
            self._current_shift.cashier_name if self._current_shift else FALLBACK_EXPENSE_CASHIER
        )
        created = self._call("expenses", "create", self.gateway.add_expense, data, failure_title="Expense Error")
        if created is _FAILED:
            return None
        self._expenses.append(created)
        self._notify("Expense Recorded")
        return created

    # -- shift -------------------------------------------------------------

    def start_shift(self, cashier_name: str, starting_cash: float | str) -> Shift | None:
        try:
            cash = float(starting_cash)
        except (TypeError, ValueError):
            self._notify("Shift Error", "Starting cash must be a number", variant=VARIANT_DESTRUCTIVE)
            return None
        shift = Shift(
            id=str(int(time.time() * 1000)),
            cashier_name=cashier_name,
            start_time=datetime.now(timezone.utc).isoformat(),
            starting_cash=cash,
        )
        self.shift_storage.save(shift)
        self._current_shift = shift
        log_action(logger, "shift", "start", "success", cashier=cashier_name)
        self._notify("Shift Started", f"Welcome {cashier_name}!")
        return shift

    def end_shift(self) -> None:
        self._current_shift = None
        self.shift_storage.clear()
        log_action(logger, "shift", "end", "success")
        self._notify("Shift Ended")

    # -- inventory ---------------------------------------------------------

    def add_inventory_item(self, item: InventoryItem | Mapping[str, Any]) -> InventoryItem | None:
        payload = item.model_dump(exclude_none=True) if isinstance(item, BaseModel) else dict(item)
        created = self._call("inventory", "create", self.gateway.add_inventory_item, payload)
        if created is _FAILED:
            return None
        self._inventory.append(created)
        self._notify("Item Added")
        return created

    def update_inventory_item(self, item_id: Identifier, patch: Mapping[str, Any]) -> InventoryItem | None:
        updated = self._call("inventory", "update", self.gateway.update_inventory_item, item_id, dict(patch))
        if updated is _FAILED:
            return None
        self._inventory = [updated if item.id == item_id else item for item in self._inventory]
        self._notify("Item Updated")
        return updated

    def delete_inventory_item(self, item_id: Identifier) -> bool:
        if self._call("inventory", "delete", self.gateway.delete_inventory_item, item_id) is _FAILED:
            return False
        self._inventory = [item for item in self._inventory if item.id != item_id]
        self._notify("Item Deleted")
        return True

    def refresh_inventory(self) -> list[InventoryItem] | None:
        fetched = self._call("inventory", "refresh", self.gateway.get_inventory, failure_title="Refresh Failed")
        if fetched is _FAILED:
            return None
        self._inventory = list(fetched or [])
        return self.inventory

    def get_low_stock_items(self) -> list[InventoryItem]:
        return [item for item in self._inventory if item.is_low_stock()]

    def search_inventory(self, query: str) -> list[InventoryItem]:
        needle = (query or "").strip().lower()
        if not needle:
            return self.inventory
        return [
            item
            for item in self._inventory
            if needle in item.name.lower() or (item.description and needle in item.description.lower())
        ]

    # -- categories --------------------------------------------------------

    def add_category(self, name: str) -> list[Category] | None:
        def create_and_reload() -> list[Category]:
            self.gateway.add_category({"name": name})
            return list(self.gateway.get_categories() or [])

        categories = self._call("categories", "create", create_and_reload)
        if categories is _FAILED:
            return None
        self._categories = categories
        self._notify("Category Added")
        return self.categories

    def update_category(self, category_id: Identifier, patch: Mapping[str, Any]) -> Category | None:
        updated = self._call("categories", "update", self.gateway.update_category, category_id, dict(patch))
        if updated is _FAILED:
            return None
        self._categories = [updated if category.id == category_id else category for category in self._categories]
        self._notify("Category Updated")
        return updated

    def remove_category(self, category_id: Identifier) -> bool:
        if self._call("categories", "delete", self.gateway.delete_category, category_id) is _FAILED:
            return False
        self._categories = [category for category in self._categories if category.id != category_id]
        self._notify("Category Removed")
        return True

    # -- helpers -----------------------------------------------------------

    def _call(self, module: str, operation: str, fn: Callable[..., Any], *args: Any, failure_title: str = "Error") -> Any:
        try:
            result = fn(*args)
        except Exception as exc:
            user_facing = to_user_facing_error(exc)
            log_action(
                logger,
                module,
                operation,
                "error",
                trace_id=user_facing.trace_id or self._trace_id(),
                error=user_facing.technical_details or type(exc).__name__,
            )
            self._notify(failure_title, user_facing.message, variant=VARIANT_DESTRUCTIVE)
            return _FAILED
        log_action(logger, module, operation, "success", trace_id=self._trace_id())
        return result

    def _trace_id(self) -> str | None:
        trace = getattr(self.gateway, "trace", None)
        return getattr(trace, "trace_id", None)

    def _notify(self, title: str, description: str | None = None, *, variant: str = VARIANT_DEFAULT) -> None:
        self.notifier.notify(Notification(title=title, description=description, variant=variant))
