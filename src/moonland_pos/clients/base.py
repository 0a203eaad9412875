from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from ..http_client import HttpClient
from ..normalizers import normalize_rows


@dataclass
class BaseClient:
    http: HttpClient
    access_token: str | None = None
    module: str = "unknown"

    def _auth_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(self, method: str, path: str, **kwargs):
        headers = kwargs.pop("headers", {})
        merged = {**self._auth_headers(), **headers}
        kwargs.setdefault("module", self.module)
        return self.http.request(method, path, headers=merged, **kwargs)

    def _list(self, path: str, *, operation: str) -> list[Any]:
        return normalize_rows(self._request("GET", path, operation=operation))

    def _object(self, method: str, path: str, *, operation: str, **kwargs) -> dict[str, Any]:
        data = self._request(method, path, operation=operation, **kwargs)
        if not isinstance(data, dict):
            raise ValueError(f"Expected {operation} response to be a JSON object")
        return data


def to_payload(value: BaseModel | dict[str, Any]) -> dict[str, Any]:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    return dict(value)
