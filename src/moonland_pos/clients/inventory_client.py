from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models import Identifier, InventoryItem
from .base import BaseClient, to_payload


@dataclass
class InventoryClient(BaseClient):
    module: str = "inventory"

    def list_items(self) -> list[InventoryItem]:
        return [InventoryItem.model_validate(row) for row in self._list("/inventory", operation="list")]

    def create_item(self, item: InventoryItem | Mapping[str, Any]) -> InventoryItem:
        data = self._object("POST", "/inventory", operation="create", json_body=to_payload(item))
        return InventoryItem.model_validate(data)

    def update_item(self, item_id: Identifier, patch: Mapping[str, Any]) -> InventoryItem:
        data = self._object("PUT", f"/inventory/{item_id}", operation="update", json_body=dict(patch))
        return InventoryItem.model_validate(data)

    def delete_item(self, item_id: Identifier) -> None:
        self._request("DELETE", f"/inventory/{item_id}", operation="delete")

    def update_stock(self, item_id: Identifier, new_stock: int) -> InventoryItem | None:
        data = self._request(
            "PATCH",
            f"/inventory/{item_id}/stock",
            operation="update_stock",
            json_body={"stock": new_stock},
        )
        if isinstance(data, dict) and "id" in data:
            return InventoryItem.model_validate(data)
        return None
