"""Core type definitions for the link checker.

This module is intentionally dependency-light so other linkcheck modules can
import shared records without introducing cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONDict = dict[str, JSONValue]


def utc_now_iso() -> str:
    """Return an RFC3339-like UTC timestamp string."""

    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class FetchOutcome(str, Enum):
    """How one fetched URL was classified by the dispatcher."""

    TRANSPORT_ERROR = "transport_error"
    REDIRECT = "redirect"
    REDIRECT_OFF_ROOT = "redirect_off_root"
    BAD_REDIRECT = "bad_redirect"
    HTTP_ERROR = "http_error"
    OFF_ROOT_OK = "off_root_ok"
    MISSING_CONTENT_TYPE = "missing_content_type"
    NON_HTML = "non_html"
    HTML = "html"

    @property
    def is_problem(self) -> bool:
        return self in {
            FetchOutcome.TRANSPORT_ERROR,
            FetchOutcome.BAD_REDIRECT,
            FetchOutcome.HTTP_ERROR,
            FetchOutcome.MISSING_CONTENT_TYPE,
        }


@dataclass(frozen=True, slots=True)
class UrlFragment:
    """A page URL (normalized, no fragment) paired with an anchor name."""

    url: str
    fragment: str

    def __str__(self) -> str:
        return f"{self.url}#{self.fragment}"


@dataclass(slots=True)
class FetchResult:
    """Result of one non-redirect-following GET."""

    requested_url: str
    status_code: int | None
    reason: str | None = None
    content_type: str | None = None
    location: str | None = None
    body: bytes | None = None
    fetched_at: str = field(default_factory=utc_now_iso)
    elapsed_ms: int | None = None
    error: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.status_code is not None and 300 <= self.status_code < 400

    @property
    def ok(self) -> bool:
        return (
            self.error is None
            and self.status_code is not None
            and 200 <= self.status_code < 300
        )

    @property
    def status_text(self) -> str:
        if self.status_code is None:
            return "no status"
        if self.reason:
            return f"{self.status_code} {self.reason}"
        return str(self.status_code)

    @property
    def content_length(self) -> int | None:
        return None if self.body is None else len(self.body)


@dataclass(slots=True)
class ParseResult:
    """Links and element ids found on one HTML page."""

    links: list[str] = field(default_factory=list)
    ids: list[str] = field(default_factory=list)


@dataclass(slots=True)
class CheckStats:
    """Simple mutable counters used for run summary reporting."""

    admitted: int = 0
    skipped_seen: int = 0
    fetched: int = 0
    fetch_problems: int = 0
    links_found: int = 0
    ids_found: int = 0
    problems: int = 0

    started_at: str = field(default_factory=utc_now_iso)
    finished_at: str | None = None

    def finish(self) -> None:
        self.finished_at = utc_now_iso()

    def to_json(self) -> JSONDict:
        return {
            "admitted": self.admitted,
            "skipped_seen": self.skipped_seen,
            "fetched": self.fetched,
            "fetch_problems": self.fetch_problems,
            "links_found": self.links_found,
            "ids_found": self.ids_found,
            "problems": self.problems,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
        }


__all__ = [
    "CheckStats",
    "FetchOutcome",
    "FetchResult",
    "JSONDict",
    "JSONPrimitive",
    "JSONValue",
    "ParseResult",
    "UrlFragment",
    "utc_now_iso",
]
