"""User-facing notifications raised at operation boundaries"""

from dataclasses import dataclass, field
from enum import Enum

import structlog


logger = structlog.get_logger()


class Level(str, Enum):
    success = "success"
    error = "error"
    info = "info"


@dataclass(frozen=True)
class Notification:
    level: Level
    message: str


@dataclass
class Notifier:
    """Collects notifications for display and mirrors them to the log."""
    items: list[Notification] = field(default_factory=list)

    def _push(self, level: Level, message: str, **context) -> None:
        self.items.append(Notification(level, message))
        log = logger.error if level is Level.error else logger.info
        log("notification", kind=level.value, message=message, **context)

    def success(self, message: str, **context) -> None:
        self._push(Level.success, message, **context)

    def error(self, message: str, **context) -> None:
        self._push(Level.error, message, **context)

    def info(self, message: str, **context) -> None:
        self._push(Level.info, message, **context)

    @property
    def last(self) -> Notification | None:
        return self.items[-1] if self.items else None

    def messages(self, level: Level | None = None) -> list[str]:
        return [n.message for n in self.items if level is None or n.level is level]
