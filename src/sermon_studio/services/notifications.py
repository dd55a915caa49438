"""Transient user notifications (toasts)."""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Literal, Protocol

_logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Interface for short user-facing notifications."""

    def success(self, message: str) -> None:
        """Report a completed action."""

    def error(self, message: str) -> None:
        """Report a failed action."""


@dataclass(frozen=True)
class Toast:
    """A single notification."""

    level: Literal["success", "error"]
    message: str


@dataclass
class ToastFeed(Notifier):
    """Bounded in-memory feed of recent toasts."""

    max_items: int = 50
    _items: deque[Toast] = field(init=False)

    def __post_init__(self) -> None:
        self._items = deque(maxlen=self.max_items)

    def success(self, message: str) -> None:
        """Record a success toast."""
        self._items.append(Toast(level="success", message=message))

    def error(self, message: str) -> None:
        """Record an error toast."""
        _logger.info("Toast error: %s", message)
        self._items.append(Toast(level="error", message=message))

    def drain(self) -> list[Toast]:
        """Return and forget all pending toasts."""
        items = list(self._items)
        self._items.clear()
        return items
