"""TTL key-value stores for raw manifest bodies.

Created: 2026-10-12
Changes:
  - 2026-10-14: FileCache removes expired entries on read.

The checker only talks to the ``CacheStore`` protocol. Two stores ship
with the package: ``MemoryCache`` for a single process and ``FileCache``
which persists bodies as JSON under a directory so the result is shared
between CLI runs.
"""

from __future__ import annotations

import json
import logging
import re
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

DAY_IN_SECONDS = 86400

_UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9_\-]")


def sanitize_key(key: str) -> str:
    """Lowercase ``key`` and drop everything outside ``[a-z0-9_-]``."""
    return _UNSAFE_KEY_CHARS.sub("", key.lower())


class CacheStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ttl: int) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryCache:
    """In-process store. ``clock`` is injectable so tests can move time."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: str, ttl: int) -> None:
        self._entries[key] = (self._clock() + ttl, value)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class FileCache:
    """One JSON file per key: ``{"expires": <epoch>, "value": <body>}``."""

    def __init__(self, directory: Path, clock: Callable[[], float] = time.time):
        self._dir = Path(directory)
        self._clock = clock

    def _path(self, key: str) -> Path:
        return self._dir / f"{sanitize_key(key)}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
            expires = float(entry["expires"])
            value = entry["value"]
        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.debug("Ignoring unreadable cache file %s", path)
            return None
        if not isinstance(value, str):
            return None
        if self._clock() >= expires:
            self.delete(key)
            return None
        return value

    def set(self, key: str, value: str, ttl: int) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        entry = {"expires": self._clock() + ttl, "value": value}
        self._path(key).write_text(json.dumps(entry), encoding="utf-8")

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass
