from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    CartEmptyError,
    DecodeError,
    ForbiddenError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .gateway import ApiGateway, PosGateway
from .http_client import HttpClient
from .models import (
    CartLine,
    Category,
    Expense,
    InventoryItem,
    PaymentInfo,
    Sale,
    SaleLine,
    Shift,
    StaffMember,
)
from .normalizers import normalize_sale, normalize_sales
from .notifications import (
    LoggingNotificationSink,
    Notification,
    NotificationSink,
    RecordingNotificationSink,
)
from .sale_workflow import (
    SaleDraft,
    SaleTotals,
    StockUpdate,
    build_sale_record,
    compute_stock_updates,
    compute_totals,
    draft_sale,
    generate_receipt_number,
)
from .session_provider import InMemorySessionProvider, SessionProvider, SessionUser
from .shift_store import ShiftStorage
from .store import PosStore
from .tracing import TraceContext
from .ui_errors import UserFacingError, to_user_facing_error

__version__ = "0.1.0"


def create_store(
    config: ClientConfig | None = None,
    *,
    notifier: NotificationSink | None = None,
) -> PosStore:
    """Wire a store against the HTTP gateway described by ``config``."""
    config = config or load_config()
    return PosStore(
        ApiGateway(config=config),
        shift_storage=ShiftStorage(data_dir=config.data_dir),
        notifier=notifier,
        max_workers=config.max_workers,
    )


__all__ = [
    "ApiError",
    "ApiGateway",
    "CartEmptyError",
    "CartLine",
    "Category",
    "ClientConfig",
    "ConfigError",
    "DecodeError",
    "Expense",
    "ForbiddenError",
    "HttpClient",
    "InMemorySessionProvider",
    "InventoryItem",
    "LoggingNotificationSink",
    "NotFoundError",
    "Notification",
    "NotificationSink",
    "PaymentInfo",
    "PosGateway",
    "PosStore",
    "RecordingNotificationSink",
    "Sale",
    "SaleDraft",
    "SaleLine",
    "SaleTotals",
    "SessionProvider",
    "SessionUser",
    "Shift",
    "ShiftStorage",
    "StaffMember",
    "StockUpdate",
    "TraceContext",
    "TransportError",
    "UnauthorizedError",
    "UserFacingError",
    "ValidationError",
    "build_sale_record",
    "compute_stock_updates",
    "compute_totals",
    "create_store",
    "draft_sale",
    "generate_receipt_number",
    "load_config",
    "normalize_sale",
    "normalize_sales",
    "to_user_facing_error",
]
