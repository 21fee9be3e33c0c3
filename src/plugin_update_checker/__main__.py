"""plugin-update-checker entry point.

Created: 2026-10-14
Changes:
  - 2026-10-17: Added --purge to simulate a completed plugin update.
  - 2026-10-16: Print queued admin notices after each run.

Runs one checker the way a plugin host would: as an authorized admin, with
the configured cache, printing the result with Rich.
"""

import argparse
import platform
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from plugin_update_checker.checker import PLUGIN_INFORMATION, UpdateChecker
from plugin_update_checker.config import get_settings
from plugin_update_checker.hooks import (
    INSTALL_COMPLETE_HOOK,
    PLUGIN_INFO_HOOK,
    UPDATE_CHECK_HOOK,
    HookRegistry,
    register_hooks,
)
from plugin_update_checker.logging_setup import setup_logging
from plugin_update_checker.models import (
    HostEnvironment,
    HostUpdateState,
    PackageIdentity,
    ResponseRecord,
)
from plugin_update_checker.notices import NoticeBoard
from plugin_update_checker.transport import HttpxClient


def _package_version() -> str:
    try:
        return get_version("plugin-update-checker")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plugin-update-checker",
        description="Check a self-hosted plugin manifest for updates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  plugin-update-checker my-plugin 1.0.0 https://example.com/p.json --platform-version 6.5
  plugin-update-checker my-plugin 1.0.0 https://example.com/p.json --platform-version 6.5 --info
  plugin-update-checker my-plugin 1.0.0 https://example.com/p.json --platform-version 6.5 --purge
""",
    )
    parser.add_argument("slug", help="Package slug")
    parser.add_argument("current_version", metavar="version", help="Installed version")
    parser.add_argument("url", help="Manifest URL")
    parser.add_argument(
        "--platform-version", required=True, help="Host platform version the update must support"
    )
    parser.add_argument(
        "--runtime-version",
        default=platform.python_version(),
        help="Host runtime version (default: running Python version)",
    )
    parser.add_argument(
        "--info", action="store_true", help="Print the plugin information record"
    )
    parser.add_argument(
        "--purge", action="store_true", help="Purge the cached manifest before checking"
    )
    parser.add_argument("--no-cache", action="store_true", help="Always fetch the manifest")
    parser.add_argument("--debug", action="store_true", help="Log fetch diagnostics")
    parser.add_argument(
        "--version", "-v", action="version", version=f"%(prog)s {_package_version()}"
    )
    return parser


def _print_info(console: Console, info: ResponseRecord) -> None:
    table = Table(title=f"{info.name} {info.version}", show_header=False)
    table.add_column("field", style="bold", no_wrap=True)
    table.add_column("value", overflow="fold")
    for key, value in info.to_dict().items():
        if isinstance(value, dict):
            value = ", ".join(f"{k}={v}" for k, v in value.items() if v)
        table.add_row(key, escape(str(value)) if value is not None else "-")
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    settings = get_settings()
    if args.no_cache:
        settings = settings.model_copy(update={"cache_allowed": False})
    if args.debug:
        settings = settings.model_copy(update={"debug_log": True, "log_level": "DEBUG"})
    setup_logging(level=settings.log_level)

    console = Console()
    try:
        identity = PackageIdentity(args.slug, args.current_version, args.url)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        return 2

    environment = HostEnvironment(
        platform_version=args.platform_version,
        runtime_version=args.runtime_version,
        can_update_plugins=lambda: True,
    )
    notices = NoticeBoard()
    hooks = HookRegistry()

    with HttpxClient(user_agent=settings.user_agent) as http:
        checker = UpdateChecker.from_settings(
            identity, environment, settings, http=http, notices=notices, hooks=hooks
        )
        register_hooks(checker, hooks)

        if args.purge:
            hooks.do_action(INSTALL_COMPLETE_HOOK, None, {"action": "update", "type": "plugin"})
            if checker.cache_allowed:
                console.print(f"Purged cached manifest for [bold]{identity.slug}[/bold]")

        if args.info:
            info = hooks.apply_filters(PLUGIN_INFO_HOOK, None, PLUGIN_INFORMATION, identity.slug)
            available = isinstance(info, ResponseRecord)
            if available:
                _print_info(console, info)
        else:
            state = hooks.apply_filters(
                UPDATE_CHECK_HOOK,
                HostUpdateState(checked={identity.plugin_path: identity.version}),
            )
            update = state.response.get(identity.plugin_path)
            if update is not None:
                available = True
                console.print(
                    f"[yellow]Update available:[/yellow] {identity.slug} "
                    f"{identity.version} → [bold]{update.new_version}[/bold]"
                )
                console.print(f"  Package: {update.package}")
            elif notices:
                available = False
            else:
                # No update proposed: tell "up to date" apart from an invalid manifest
                available = checker.fetch_manifest() is not None
                if available:
                    console.print(
                        f"[green]{identity.slug} {identity.version} is up to date.[/green]"
                    )
        if not available:
            console.print(f"[red]No update information available for {identity.slug}.[/red]")

    for notice in notices.drain():
        console.print(f"[red]{notice.render()}[/red]")

    return 0 if available else 1


if __name__ == "__main__":
    sys.exit(main())
