"""Admin-facing notices for failed update checks.

Created: 2026-10-13
"""

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notice:
    """A short message shown to administrators about one package."""

    slug: str
    message: str
    level: str = "error"

    def render(self) -> str:
        return f"Update checker ({self.slug}) - Update failed: {self.message}"


class NoticeSink(Protocol):
    def add(self, notice: Notice) -> None: ...


class NoticeBoard:
    """Collects notices until the host displays them.

    Each notice is handed out once: ``drain()`` empties the board.
    """

    def __init__(self) -> None:
        self._pending: list[Notice] = []

    def add(self, notice: Notice) -> None:
        logger.debug("Queued notice for %s: %s", notice.slug, notice.message)
        self._pending.append(notice)

    def pending(self) -> list[Notice]:
        return list(self._pending)

    def drain(self) -> list[Notice]:
        notices, self._pending = self._pending, []
        return notices

    def __len__(self) -> int:
        return len(self._pending)
