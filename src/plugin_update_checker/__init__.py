"""Self-hosted plugin update checker.

Created: 2026-10-12
"""

from plugin_update_checker.checker import PLUGIN_INFORMATION, UpdateChecker
from plugin_update_checker.hooks import HookRegistry, register_hooks
from plugin_update_checker.models import (
    HostEnvironment,
    HostUpdateState,
    ManifestRecord,
    PackageIdentity,
    PluginUpdate,
    ResponseRecord,
)

__version__ = "0.3.0"

__all__ = [
    "PLUGIN_INFORMATION",
    "HookRegistry",
    "HostEnvironment",
    "HostUpdateState",
    "ManifestRecord",
    "PackageIdentity",
    "PluginUpdate",
    "ResponseRecord",
    "UpdateChecker",
    "register_hooks",
    "__version__",
]
