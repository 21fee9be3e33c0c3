"""Update checker for one self-hosted plugin.

Created: 2026-10-12
Changes:
  - 2026-10-15: Authorization moved into HostEnvironment.
  - 2026-10-14: Fetch failures queue an admin notice instead of raising.

Fetches a JSON manifest describing the latest release, caches the raw body
for a day, and answers the host's plugin-information and bulk update-check
queries. Every failure degrades to "no information available": the host
always gets its own value back untouched.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from plugin_update_checker.cache import (
    DAY_IN_SECONDS,
    CacheStore,
    FileCache,
    MemoryCache,
    sanitize_key,
)
from plugin_update_checker.config import Settings
from plugin_update_checker.errors import (
    EmptyBodyError,
    FetchError,
    HttpStatusError,
    ManifestDecodeError,
    SchemaValidationError,
)
from plugin_update_checker.hooks import CACHE_ALLOWED_FILTER, HookRegistry
from plugin_update_checker.models import (
    HostEnvironment,
    HostUpdateState,
    ManifestRecord,
    PackageIdentity,
    PluginUpdate,
    ResponseRecord,
)
from plugin_update_checker.notices import Notice, NoticeBoard, NoticeSink
from plugin_update_checker.transport import HttpClient, HttpxClient
from plugin_update_checker.version import is_newer, requirement_met

logger = logging.getLogger(__name__)

PLUGIN_INFORMATION = "plugin_information"
REQUEST_TIMEOUT = 10  # seconds
ACCEPT_HEADERS = {"Accept": "application/json"}


class UpdateChecker:
    """Answers the host's update questions for a single package.

    Collaborators are injected: ``cache`` stores raw manifest bodies,
    ``http`` performs the GET, ``environment`` supplies host versions and
    the authorization check, ``notices`` receives admin-facing failures.
    Nothing touches the network or the cache until a query arrives.
    """

    def __init__(
        self,
        identity: PackageIdentity,
        *,
        cache: CacheStore,
        http: HttpClient,
        environment: HostEnvironment,
        notices: NoticeSink | None = None,
        hooks: HookRegistry | None = None,
        cache_allowed: bool = True,
        cache_ttl: int = DAY_IN_SECONDS,
        cache_key_prefix: str = "update_",
        timeout: float = REQUEST_TIMEOUT,
        debug_log: bool = False,
        log: logging.Logger | None = None,
    ):
        self.identity = identity
        self.cache = cache
        self.http = http
        self.environment = environment
        self.notices = notices if notices is not None else NoticeBoard()
        self.cache_key = cache_key_prefix + sanitize_key(identity.slug)
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self.debug_log = debug_log
        self.log = log or logger
        self._owns_http = False
        if hooks is not None:
            cache_allowed = hooks.apply_filters(CACHE_ALLOWED_FILTER, cache_allowed)
        self.cache_allowed = bool(cache_allowed)

    @classmethod
    def from_settings(
        cls,
        identity: PackageIdentity,
        environment: HostEnvironment,
        settings: Settings,
        **kwargs: Any,
    ) -> UpdateChecker:
        """Build a checker with the configured cache backend and an httpx client.

        A client created here is owned by the checker; release it with
        ``close()`` or by using the checker as a context manager.
        """
        if "cache" not in kwargs:
            if settings.cache_backend == "memory":
                kwargs["cache"] = MemoryCache()
            else:
                kwargs["cache"] = FileCache(settings.resolved_cache_dir())
        owns_http = "http" not in kwargs
        if owns_http:
            kwargs["http"] = HttpxClient(user_agent=settings.user_agent)
        checker = cls(
            identity,
            environment=environment,
            cache_allowed=settings.cache_allowed,
            cache_ttl=settings.cache_ttl,
            cache_key_prefix=settings.cache_key_prefix,
            timeout=settings.request_timeout,
            debug_log=settings.debug_log,
            **kwargs,
        )
        checker._owns_http = owns_http
        return checker

    def close(self) -> None:
        """Close the HTTP client if this checker created it."""
        if self._owns_http:
            self.http.close()
            self._owns_http = False

    def __enter__(self) -> UpdateChecker:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def slug(self) -> str:
        return self.identity.slug

    def _debug(self, msg: str, *args: Any) -> None:
        if self.debug_log:
            self.log.debug("Update checker (%s) - " + msg, self.slug, *args)

    # =========================================================================
    # Manifest retrieval
    # =========================================================================

    def _download(self) -> str:
        """GET the manifest and return its body, caching it on success."""
        resp = self.http.get(self.identity.manifest_url, ACCEPT_HEADERS, self.timeout)
        self._debug("GET %s returned %d (%d bytes)", self.identity.manifest_url,
                    resp.status, len(resp.body))
        if resp.status != 200:
            raise HttpStatusError(resp.status)
        if not resp.body:
            raise EmptyBodyError()
        # Stored even when caching is disallowed; the flag only gates reads
        try:
            self.cache.set(self.cache_key, resp.body, self.cache_ttl)
        except Exception as exc:
            self.log.warning("Could not cache manifest for %s: %s", self.slug, exc)
        return resp.body

    def _cached_body(self) -> str | None:
        try:
            return self.cache.get(self.cache_key)
        except Exception as exc:
            self.log.warning("Could not read cached manifest for %s: %s", self.slug, exc)
            return None

    def _retrieve_body(self) -> str:
        if self.cache_allowed:
            cached = self._cached_body()
            if cached is not None:
                return cached
        return self._download()

    def fetch_manifest(self) -> ManifestRecord | None:
        """Return the remote manifest, or None when it is not available.

        Never raises for network, HTTP or manifest problems. Fetch failures
        queue an admin notice; an invalid manifest is always logged.
        """
        try:
            body = self._retrieve_body()
        except FetchError as exc:
            self._debug("Update failed: %s", exc)
            self.notices.add(Notice(slug=self.slug, message=str(exc)))
            return None

        try:
            return self.parse_manifest(body)
        except ManifestDecodeError as exc:
            self._debug("JSON decode failed (%s). Raw response: %s", exc, body)
            return None
        except SchemaValidationError as exc:
            self.log.error("Update checker (%s) - Invalid structure: %s", self.slug, exc)
            return None

    def parse_manifest(self, body: str) -> ManifestRecord:
        """Decode and validate ``body`` without any caching or fallbacks.

        Raises:
            ManifestDecodeError: ``body`` is not JSON.
            SchemaValidationError: required fields are missing.
        """
        try:
            data = json.loads(body)
        except ValueError as exc:
            raise ManifestDecodeError(str(exc)) from exc
        if data is None:
            raise ManifestDecodeError("document is null")
        return ManifestRecord.from_dict(data)

    # =========================================================================
    # Host queries
    # =========================================================================

    def describe(
        self, response: Any, action: str = PLUGIN_INFORMATION, slug: str | None = None
    ) -> Any:
        """Answer the host's plugin-information query for this package.

        Returns ``response`` unchanged unless ``action`` is a
        plugin-information request for this checker's slug and the manifest
        is available.
        """
        if action != PLUGIN_INFORMATION or slug != self.slug:
            return response

        remote = self.fetch_manifest()
        if remote is None:
            return response
        return ResponseRecord.from_manifest(remote)

    def check_for_update(self, state: HostUpdateState | None) -> HostUpdateState | None:
        """Add this package to ``state.response`` when a usable update exists."""
        if not self.environment.is_authorized():
            return state
        if state is None or not getattr(state, "checked", None):
            return state

        remote = self.fetch_manifest()
        if remote is None or not self.update_available(remote):
            return state

        plugin = self.identity.plugin_path
        state.response[plugin] = PluginUpdate(
            slug=self.slug,
            plugin=plugin,
            new_version=remote.version,
            tested=remote.tested,
            package=remote.download_url,
        )
        self.log.info("Update available for %s: %s -> %s", self.slug,
                    self.identity.version, remote.version)
        return state

    def update_available(self, remote: ManifestRecord) -> bool:
        """Newer than what is installed and installable on this host."""
        return (
            is_newer(self.identity.version, remote.version)
            and requirement_met(remote.requires, self.environment.platform_version)
            and requirement_met(remote.requires_php, self.environment.runtime_version)
        )

    # =========================================================================
    # Host events
    # =========================================================================

    def purge_cache(self) -> None:
        self.cache.delete(self.cache_key)

    def on_install_complete(self, upgrader: Any, options: Any) -> None:
        """Drop the cached manifest once the host finished a plugin update."""
        if not self.cache_allowed or not isinstance(options, Mapping):
            return
        if options.get("action") == "update" and options.get("type") == "plugin":
            try:
                self.purge_cache()
            except Exception as exc:
                self.log.warning("Could not purge cached manifest for %s: %s", self.slug, exc)
                return
            self._debug("Cache purged after plugin update")
