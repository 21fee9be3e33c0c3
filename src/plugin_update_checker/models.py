"""Typed records exchanged between the checker, the manifest and the host.

Created: 2026-10-12
Changes:
  - 2026-10-15: HostEnvironment carries the authorization callable.
"""

from __future__ import annotations

import platform
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

from plugin_update_checker.errors import SchemaValidationError

REQUIRED_FIELDS = ("name", "slug", "version", "download_url")


def _text(value: Any) -> str | None:
    """Manifest scalars as strings; ``None`` for absent or structured values."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


@dataclass(frozen=True)
class PackageIdentity:
    """The package a checker instance is responsible for."""

    slug: str
    version: str
    manifest_url: str

    def __post_init__(self) -> None:
        for name in ("slug", "version", "manifest_url"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{name} must be a non-empty string")

    @property
    def plugin_path(self) -> str:
        """Host plugin path, e.g. ``my-plugin/my-plugin.php``."""
        return f"{self.slug}/{self.slug}.php"


@dataclass
class Sections:
    description: str | None = None
    installation: str | None = None
    changelog: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Sections:
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            description=_text(data.get("description")),
            installation=_text(data.get("installation")),
            changelog=_text(data.get("changelog")),
        )


@dataclass
class Banners:
    low: str | None = None
    high: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Banners | None:
        if not isinstance(data, Mapping) or not data:
            return None
        return cls(low=_text(data.get("low")), high=_text(data.get("high")))


@dataclass
class ManifestRecord:
    """Parsed remote manifest. Only the four required fields are guaranteed."""

    name: str
    slug: str
    version: str
    download_url: str
    tested: str | None = None
    requires: str | None = None
    requires_php: str | None = None
    author: str | None = None
    author_profile: str | None = None
    last_updated: str | None = None
    sections: Sections = field(default_factory=Sections)
    banners: Banners | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ManifestRecord:
        """Build a record from decoded JSON.

        Raises:
            SchemaValidationError: ``data`` is not an object or lacks a
                required field.
        """
        if not isinstance(data, Mapping):
            raise SchemaValidationError(
                REQUIRED_FIELDS, f"Expected a JSON object, got {type(data).__name__}"
            )
        missing = tuple(name for name in REQUIRED_FIELDS if _text(data.get(name)) is None)
        if missing:
            raise SchemaValidationError(missing)

        return cls(
            name=_text(data["name"]),
            slug=_text(data["slug"]),
            version=_text(data["version"]),
            download_url=_text(data["download_url"]),
            tested=_text(data.get("tested")),
            requires=_text(data.get("requires")),
            requires_php=_text(data.get("requires_php")),
            author=_text(data.get("author")),
            author_profile=_text(data.get("author_profile")),
            last_updated=_text(data.get("last_updated")),
            sections=Sections.from_dict(data.get("sections")),
            banners=Banners.from_dict(data.get("banners")),
        )


@dataclass
class ResponseRecord:
    """Plugin-information answer handed back to the host."""

    name: str
    slug: str
    version: str
    download_link: str
    trunk: str
    tested: str | None = None
    requires: str | None = None
    requires_php: str | None = None
    author: str | None = None
    author_profile: str | None = None
    last_updated: str | None = None
    sections: dict[str, str | None] = field(default_factory=dict)
    banners: dict[str, str | None] | None = None

    @classmethod
    def from_manifest(cls, remote: ManifestRecord) -> ResponseRecord:
        record = cls(
            name=remote.name,
            slug=remote.slug,
            version=remote.version,
            download_link=remote.download_url,
            trunk=remote.download_url,
            tested=remote.tested,
            requires=remote.requires,
            requires_php=remote.requires_php,
            author=remote.author,
            author_profile=remote.author_profile,
            last_updated=remote.last_updated,
            sections={
                "description": remote.sections.description,
                "installation": remote.sections.installation,
                "changelog": remote.sections.changelog,
            },
        )
        if remote.banners is not None:
            record.banners = {"low": remote.banners.low, "high": remote.banners.high}
        return record

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.banners is None:
            del data["banners"]
        return data


@dataclass
class PluginUpdate:
    """One entry in the host's pending-updates map."""

    slug: str
    plugin: str
    new_version: str
    package: str
    tested: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class HostUpdateState:
    """The host's bulk "what needs updating" state.

    ``checked`` maps plugin paths to installed versions; ``response`` maps
    plugin paths to proposed updates.
    """

    checked: dict[str, str] = field(default_factory=dict)
    response: dict[str, PluginUpdate] = field(default_factory=dict)


@dataclass
class HostEnvironment:
    """Facts about the host the update gate depends on."""

    platform_version: str
    runtime_version: str = field(default_factory=platform.python_version)
    can_update_plugins: Callable[[], bool] | None = None

    def is_authorized(self) -> bool:
        """True when the current caller may install plugin updates."""
        if self.can_update_plugins is None:
            return False
        return bool(self.can_update_plugins())
