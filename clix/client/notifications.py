"""One-shot user notifications (the UI drains and shows them once)."""
import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    level: str  # info, error
    message: str


class Notifier:
    """Queue of messages for the UI; an optional callback sees each one as it is raised."""

    def __init__(self, on_notify: Optional[Callable[[Notification], None]] = None):
        self._pending: list[Notification] = []
        self._on_notify = on_notify

    def info(self, message: str) -> None:
        self._push(Notification("info", message))

    def error(self, message: str) -> None:
        logger.warning("User-facing error: %s", message)
        self._push(Notification("error", message))

    def _push(self, notification: Notification) -> None:
        self._pending.append(notification)
        if self._on_notify:
            self._on_notify(notification)

    def drain(self) -> list[Notification]:
        """Return and forget every pending notification."""
        pending, self._pending = self._pending, []
        return pending
