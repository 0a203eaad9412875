from .categories_client import CategoriesClient
from .expenses_client import ExpensesClient
from .inventory_client import InventoryClient
from .sales_client import SalesClient
from .staff_client import StaffClient

__all__ = [
    "CategoriesClient",
    "ExpensesClient",
    "InventoryClient",
    "SalesClient",
    "StaffClient",
]
