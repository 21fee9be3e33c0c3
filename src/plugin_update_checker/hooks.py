"""In-process hook registry mirroring a plugin host's filters and actions.

Created: 2026-10-13

Filters receive a value plus extra arguments and return the (possibly
replaced) value. Actions receive arguments and return nothing. Callbacks
run in ascending priority; equal priorities run in registration order.

Usage:
    hooks = HookRegistry()
    register_hooks(checker, hooks)

    info = hooks.apply_filters(PLUGIN_INFO_HOOK, None, "plugin_information", "my-plugin")
    state = hooks.apply_filters(UPDATE_CHECK_HOOK, state)
    hooks.do_action(INSTALL_COMPLETE_HOOK, upgrader, {"action": "update", "type": "plugin"})
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from plugin_update_checker.checker import UpdateChecker

logger = logging.getLogger(__name__)

PLUGIN_INFO_HOOK = "plugins_api"
UPDATE_CHECK_HOOK = "site_transient_update_plugins"
INSTALL_COMPLETE_HOOK = "upgrader_process_complete"
CACHE_ALLOWED_FILTER = "update_checker_cache_allowed"

DEFAULT_PRIORITY = 10


class HookRegistry:
    def __init__(self) -> None:
        self._filters: dict[str, list[tuple[int, int, Callable[..., Any]]]] = {}
        self._actions: dict[str, list[tuple[int, int, Callable[..., Any]]]] = {}
        self._seq = 0

    def _add(self, table: dict, name: str, callback: Callable[..., Any], priority: int) -> None:
        self._seq += 1
        table.setdefault(name, []).append((priority, self._seq, callback))
        table[name].sort(key=lambda entry: (entry[0], entry[1]))

    # =========================================================================
    # Filters
    # =========================================================================

    def add_filter(
        self, name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> None:
        self._add(self._filters, name, callback, priority)
        logger.debug("Filter %s: added %s (priority %d)", name, callback, priority)

    def remove_filter(self, name: str, callback: Callable[..., Any]) -> bool:
        entries = self._filters.get(name, [])
        for entry in entries:
            if entry[2] == callback:
                entries.remove(entry)
                return True
        return False

    def has_filter(self, name: str) -> bool:
        return bool(self._filters.get(name))

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        for _, _, callback in list(self._filters.get(name, [])):
            value = callback(value, *args)
        return value

    # =========================================================================
    # Actions
    # =========================================================================

    def add_action(
        self, name: str, callback: Callable[..., Any], priority: int = DEFAULT_PRIORITY
    ) -> None:
        self._add(self._actions, name, callback, priority)
        logger.debug("Action %s: added %s (priority %d)", name, callback, priority)

    def do_action(self, name: str, *args: Any) -> None:
        for _, _, callback in list(self._actions.get(name, [])):
            callback(*args)


def register_hooks(checker: UpdateChecker, hooks: HookRegistry) -> None:
    """Attach ``checker`` to the host's plugin-info, update-check and install events."""
    hooks.add_filter(PLUGIN_INFO_HOOK, checker.describe, priority=20)
    hooks.add_filter(UPDATE_CHECK_HOOK, checker.check_for_update, priority=10)
    hooks.add_action(INSTALL_COMPLETE_HOOK, checker.on_install_complete, priority=10)
    logger.info("Registered update checker for %s", checker.identity.slug)
