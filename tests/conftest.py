"""Pytest configuration."""

import json

import pytest

from plugin_update_checker import config
from plugin_update_checker.cache import MemoryCache
from plugin_update_checker.checker import UpdateChecker
from plugin_update_checker.errors import TransportError
from plugin_update_checker.models import HostEnvironment, PackageIdentity
from plugin_update_checker.notices import NoticeBoard
from plugin_update_checker.transport import HttpResponse

MANIFEST_URL = "https://updates.example.com/my-plugin/info.json"


def make_manifest(**overrides) -> dict:
    manifest = {
        "name": "My Plugin",
        "slug": "my-plugin",
        "version": "2.0.0",
        "tested": "6.5",
        "requires": "6.0",
        "requires_php": "3.10",
        "author": "Example Co",
        "author_profile": "https://example.com",
        "last_updated": "2026-10-01 12:00:00",
        "download_url": "https://updates.example.com/my-plugin/my-plugin-2.0.0.zip",
        "sections": {
            "description": "Does things.",
            "installation": "Upload and activate.",
            "changelog": "<h4>2.0.0</h4><ul><li>New things</li></ul>",
        },
        "banners": {
            "low": "https://updates.example.com/my-plugin/banner-772x250.png",
            "high": "https://updates.example.com/my-plugin/banner-1544x500.png",
        },
    }
    manifest.update(overrides)
    return manifest


class FakeHttpClient:
    """Scripted HttpClient that records every request."""

    def __init__(self):
        self.calls: list[tuple[str, dict, float]] = []
        self._responses: list = []

    def queue(self, status: int = 200, body: str = "") -> None:
        self._responses.append(HttpResponse(status=status, body=body))

    def queue_json(self, data, status: int = 200) -> None:
        self.queue(status=status, body=json.dumps(data))

    def queue_error(self, message: str) -> None:
        self._responses.append(TransportError(message))

    def get(self, url, headers, timeout):
        self.calls.append((url, dict(headers), timeout))
        if not self._responses:
            raise AssertionError(f"unexpected request to {url}")
        # The last scripted response repeats
        result = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path, monkeypatch):
    """Keep tests away from the real ~/.plugin-update-checker."""
    monkeypatch.setenv("PLUGIN_UPDATE_CHECKER_HOME", str(tmp_path / "home"))
    monkeypatch.setattr(config, "_settings", None)


@pytest.fixture
def http():
    return FakeHttpClient()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MemoryCache(clock=clock)


@pytest.fixture
def notices():
    return NoticeBoard()


@pytest.fixture
def environment():
    return HostEnvironment(
        platform_version="6.5",
        runtime_version="3.12.1",
        can_update_plugins=lambda: True,
    )


@pytest.fixture
def identity():
    return PackageIdentity(slug="my-plugin", version="1.0.0", manifest_url=MANIFEST_URL)


@pytest.fixture
def make_checker(identity, cache, http, environment, notices):
    def _make(**kwargs) -> UpdateChecker:
        kwargs.setdefault("cache", cache)
        kwargs.setdefault("http", http)
        kwargs.setdefault("environment", environment)
        kwargs.setdefault("notices", notices)
        return UpdateChecker(kwargs.pop("identity", identity), **kwargs)

    return _make


@pytest.fixture
def checker(make_checker):
    return make_checker()
