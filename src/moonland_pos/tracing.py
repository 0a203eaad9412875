from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Mapping

TRACE_HEADER = "X-Trace-ID"
# Servers behind some proxies echo the correlation id as a request id instead.
_INBOUND_HEADERS = (TRACE_HEADER, "X-Request-ID")


@dataclass
class TraceContext:
    """Correlation id shared by every request a gateway issues.

    A fresh id is minted lazily and replaced by whatever id the server reports
    back, so log lines on both sides can be joined. Signing in as another user
    resets it.
    """

    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = uuid.uuid4().hex
        return self.trace_id

    def reset(self) -> None:
        self.trace_id = None

    def _adopt(self, candidate: object) -> None:
        if isinstance(candidate, str) and candidate:
            self.trace_id = candidate

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        # requests exposes headers case-insensitively.
        for name in _INBOUND_HEADERS:
            if headers.get(name):
                self._adopt(headers.get(name))
                return

    def update_from_payload(self, payload: Mapping[str, object]) -> None:
        self._adopt(payload.get("trace_id"))
