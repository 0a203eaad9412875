from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models import Category, Identifier
from .base import BaseClient


@dataclass
class CategoriesClient(BaseClient):
    module: str = "categories"

    def list_categories(self) -> list[Category]:
        return [Category.model_validate(row) for row in self._list("/categories", operation="list")]

    def create_category(self, payload: Mapping[str, Any]) -> Category:
        data = self._object("POST", "/categories", operation="create", json_body=dict(payload))
        return Category.model_validate(data)

    def update_category(self, category_id: Identifier, patch: Mapping[str, Any]) -> Category:
        data = self._object("PUT", f"/categories/{category_id}", operation="update", json_body=dict(patch))
        return Category.model_validate(data)

    def delete_category(self, category_id: Identifier) -> None:
        self._request("DELETE", f"/categories/{category_id}", operation="delete")
