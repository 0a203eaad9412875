from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

VARIANT_DEFAULT = "default"
VARIANT_DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    title: str
    description: str | None = None
    variant: str = VARIANT_DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant == VARIANT_DESTRUCTIVE


class NotificationSink(Protocol):
    def notify(self, notification: Notification) -> None: ...


@dataclass
class RecordingNotificationSink:
    notifications: list[Notification] = field(default_factory=list)

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def last(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None

    def titles(self) -> list[str]:
        return [item.title for item in self.notifications]


@dataclass
class LoggingNotificationSink:
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("moonland_pos.notifications"))

    def notify(self, notification: Notification) -> None:
        level = logging.WARNING if notification.is_error else logging.INFO
        self.logger.log(
            level,
            notification.title,
            extra={"description": notification.description, "variant": notification.variant},
        )
