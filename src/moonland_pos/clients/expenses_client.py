from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models import Expense
from .base import BaseClient, to_payload


@dataclass
class ExpensesClient(BaseClient):
    module: str = "expenses"

    def list_expenses(self) -> list[Expense]:
        return [Expense.model_validate(row) for row in self._list("/expenses", operation="list")]

    def create_expense(self, expense: Expense | Mapping[str, Any]) -> Expense:
        data = self._object("POST", "/expenses", operation="create", json_body=to_payload(expense))
        return Expense.model_validate(data)
