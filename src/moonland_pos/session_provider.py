from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)

SessionListener = Callable[["SessionUser | None"], None]


@dataclass(frozen=True)
class SessionUser:
    id: str
    username: str
    access_token: str | None = None
    role: str | None = None
    profile: dict[str, Any] = field(default_factory=dict)


class SessionProvider(Protocol):
    def current_user(self) -> SessionUser | None: ...

    def subscribe(self, listener: SessionListener) -> Callable[[], None]: ...


@dataclass
class InMemorySessionProvider:
    """Holds the signed-in user and tells subscribers when it changes.

    Authentication itself happens elsewhere; callers hand over the user once
    they have one.
    """

    user: SessionUser | None = None
    _listeners: list[SessionListener] = field(default_factory=list)

    def current_user(self) -> SessionUser | None:
        return self.user

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, user: SessionUser) -> None:
        self.user = user
        logger.info("session_signed_in", extra={"user_id": user.id})
        self._publish()

    def sign_out(self) -> None:
        if self.user is None:
            return
        self.user = None
        logger.info("session_signed_out")
        self._publish()

    def _publish(self) -> None:
        for listener in list(self._listeners):
            listener(self.user)
