"""Blocking HTTP GET for manifest retrieval.

Created: 2026-10-12
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

import httpx

from plugin_update_checker.errors import TransportError

DEFAULT_USER_AGENT = "plugin-update-checker"


@dataclass(frozen=True)
class HttpResponse:
    status: int
    body: str


class HttpClient(Protocol):
    def get(self, url: str, headers: Mapping[str, str], timeout: float) -> HttpResponse:
        """Fetch ``url``. Raises TransportError when no response was received."""
        ...


class HttpxClient:
    """``HttpClient`` backed by a synchronous ``httpx.Client``.

    Usage:
        with HttpxClient() as http:
            response = http.get(url, {"Accept": "application/json"}, timeout=10)
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(
            headers={"User-Agent": user_agent},
            follow_redirects=True,
            transport=transport,
        )

    def get(self, url: str, headers: Mapping[str, str], timeout: float) -> HttpResponse:
        try:
            resp = self._client.get(url, headers=dict(headers), timeout=timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        return HttpResponse(status=resp.status_code, body=resp.text)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
