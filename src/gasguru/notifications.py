"""User-facing notifications.

Every failed remote call and every rejected form surfaces one short
notification naming the attempted operation. The library never renders
them; it hands them to an ``on_notification`` callback supplied by the
application.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

_logger = logging.getLogger(__name__)


class NotificationVariant(StrEnum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True, slots=True)
class Notification:
    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant == NotificationVariant.DESTRUCTIVE


NotificationCallback = Callable[[Notification], None]


def error(description: str, *, title: str = "Erreur") -> Notification:
    return Notification(title=title, description=description, variant=NotificationVariant.DESTRUCTIVE)


def info(description: str, *, title: str) -> Notification:
    return Notification(title=title, description=description)


def log_notification(notification: Notification) -> None:
    """Default callback: route notifications to the library logger."""
    level = logging.WARNING if notification.is_error else logging.INFO
    _logger.log(level, "%s: %s", notification.title, notification.description)
