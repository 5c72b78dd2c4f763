"""Shared fixtures: an in-memory site served through a fake fetcher."""

from __future__ import annotations

from collections import Counter
import threading
from typing import Callable

import pytest

from linkcheck import CheckConfig, FetchResult


ROOT = "http://site.test/"


def html_page(body: str, *, content_type: str = "text/html; charset=utf-8") -> Callable[[str], FetchResult]:
    def respond(url: str) -> FetchResult:
        return FetchResult(
            requested_url=url,
            status_code=200,
            reason="OK",
            content_type=content_type,
            body=body.encode("utf-8"),
        )

    return respond


def status(code: int, reason: str, **kwargs) -> Callable[[str], FetchResult]:
    def respond(url: str) -> FetchResult:
        return FetchResult(requested_url=url, status_code=code, reason=reason, **kwargs)

    return respond


def redirect(location: str | None, code: int = 301) -> Callable[[str], FetchResult]:
    return status(code, "Moved Permanently", location=location)


def transport_error(message: str) -> Callable[[str], FetchResult]:
    def respond(url: str) -> FetchResult:
        return FetchResult(requested_url=url, status_code=None, error=message)

    return respond


class FakeFetcher:
    """Serves canned responses by URL and counts every fetch."""

    def __init__(self, routes: dict[str, Callable[[str], FetchResult]]) -> None:
        self.routes = routes
        self.calls: Counter[str] = Counter()
        self.order: list[str] = []
        self.read_body: dict[str, bool] = {}
        self.closed = False
        self._lock = threading.Lock()

    def fetch(self, url: str, *, read_body: bool = True) -> FetchResult:
        with self._lock:
            self.calls[url] += 1
            self.order.append(url)
            self.read_body[url] = read_body

        handler = self.routes.get(url, status(404, "Not Found"))
        result = handler(url)
        if not read_body:
            result.body = None
        return result

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def config() -> CheckConfig:
    return CheckConfig(root=ROOT)


@pytest.fixture
def make_fetcher() -> Callable[[dict[str, Callable[[str], FetchResult]]], FakeFetcher]:
    return FakeFetcher
