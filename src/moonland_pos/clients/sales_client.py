from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError

from ..models import Identifier, Sale
from ..normalizers import normalize_sale, normalize_sales
from .base import BaseClient

logger = logging.getLogger(__name__)


@dataclass
class SalesClient(BaseClient):
    """Sales endpoints. Every sale leaving this client has been normalized."""

    module: str = "sales"

    def list_sales(self) -> list[Sale]:
        sales: list[Sale] = []
        for row in normalize_sales(self._request("GET", "/sales", operation="list")):
            try:
                sales.append(Sale.model_validate(row))
            except ValidationError as exc:
                # Skip only the unreadable row.
                logger.warning(
                    "sale_row_skipped",
                    extra={"sale_id": row.get("id"), "errors": exc.error_count()},
                )
        return sales

    def create_sale(self, record: Mapping[str, Any]) -> Sale:
        data = self._object("POST", "/sales", operation="create", json_body=dict(record))
        return Sale.model_validate(normalize_sale(data))

    def pay_credit_sale(self, sale_id: Identifier) -> Sale:
        data = self._object("POST", f"/sales/{sale_id}/pay", operation="pay_credit")
        return Sale.model_validate(normalize_sale(data))
