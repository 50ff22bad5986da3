"""User-facing notifications for pipeline operations."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Literal

import pendulum
import structlog

NotificationLevel = Literal["success", "error"]


@dataclass(slots=True)
class Notification:
    """A discrete, human-readable outcome of one operation."""

    level: NotificationLevel
    operation: str
    message: str
    timestamp: str


class NotificationCenter:
    """Collect notifications and optionally append them to a JSON lines file."""

    def __init__(self, path: Path | None = None):
        self._items: list[Notification] = []
        self._path = path
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        self._logger = structlog.get_logger(__name__)

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    def drain(self) -> list[Notification]:
        items, self._items = self._items, []
        return items

    def success(self, operation: str, message: str) -> Notification:
        return self._notify("success", operation, message)

    def error(self, operation: str, message: str) -> Notification:
        return self._notify("error", operation, message)

    def _notify(self, level: NotificationLevel, operation: str, message: str) -> Notification:
        notification = Notification(
            level=level,
            operation=operation,
            message=message,
            timestamp=pendulum.now("UTC").to_iso8601_string(),
        )
        self._items.append(notification)
        log = self._logger.error if level == "error" else self._logger.info
        log("notification", level=level, operation=operation, message=message)
        if self._path is not None:
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(asdict(notification), ensure_ascii=False))
                handle.write("\n")
        return notification


__all__ = ["Notification", "NotificationCenter", "NotificationLevel"]
