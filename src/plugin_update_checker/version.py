"""Version comparison for the update gate.

Created: 2026-10-12

Versions are compared with ``packaging.version``. Manifest authors are not
always strict, so a leading ``v`` is dropped and a version that does not
parse falls back to its leading numeric release (``8.1.2-1ubuntu`` ->
``8.1.2``). Anything still unparseable never satisfies a comparison.
"""

import logging
import re

from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)

_RELEASE_PREFIX = re.compile(r"\d+(?:\.\d+)*")


def parse_version(value: str | None) -> Version | None:
    """Parse ``value`` leniently. Returns None when nothing usable is left."""
    if not value:
        return None
    value = value.strip()
    if value[:1] in ("v", "V"):
        value = value[1:]
    try:
        return Version(value)
    except InvalidVersion:
        match = _RELEASE_PREFIX.match(value)
        if not match:
            return None
        return Version(match.group(0))


def is_newer(current: str, candidate: str | None) -> bool:
    """True if ``candidate`` is strictly newer than ``current``."""
    cur = parse_version(current)
    if cur is None:
        logger.error("Cannot parse current version: %s", current)
        return False
    cand = parse_version(candidate)
    if cand is None:
        return False
    return cur < cand


def requirement_met(required: str | None, actual: str | None) -> bool:
    """True if the host version ``actual`` satisfies the minimum ``required``.

    A manifest that states no minimum is satisfied by any host.
    """
    if not required or not required.strip():
        return True
    req = parse_version(required)
    act = parse_version(actual)
    if req is None or act is None:
        return False
    return req <= act
