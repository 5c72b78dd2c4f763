"""Single-request HTTP fetching and response classification."""

from __future__ import annotations

import time
from urllib.parse import urljoin

import requests

from .config import CheckConfig
from .constants import HTML_CONTENT_TYPE_PREFIX
from .types import FetchOutcome, FetchResult
from .url import in_root, normalize_url


class Fetcher:
    """Issue one GET per call, never following redirects.

    The body is only downloaded when the caller asks for it and the response
    is a 2xx HTML page; everything else is closed after the headers arrive.
    """

    def __init__(self, config: CheckConfig, *, session: requests.Session | None = None) -> None:
        self.config = config
        self._session = session or requests.Session()
        self._owns_session = session is None

    def fetch(self, url: str, *, read_body: bool = True) -> FetchResult:
        """Fetch one URL. Transport failures are returned, not raised."""

        started = time.perf_counter()
        try:
            response = self._session.get(
                url,
                headers=self.config.headers_for(url),
                timeout=self.config.timeout_seconds,
                allow_redirects=False,
                stream=True,
            )
        except requests.RequestException as exc:
            return FetchResult(
                requested_url=url,
                status_code=None,
                elapsed_ms=int((time.perf_counter() - started) * 1000),
                error=f"{exc.__class__.__name__}: {exc}",
            )

        try:
            content_type = response.headers.get("Content-Type") or None
            body = None
            if (
                read_body
                and 200 <= response.status_code < 300
                and is_html_content_type(content_type)
            ):
                body = response.content
            return FetchResult(
                requested_url=url,
                status_code=response.status_code,
                reason=response.reason,
                content_type=content_type,
                location=response.headers.get("Location"),
                body=body,
                elapsed_ms=int((time.perf_counter() - started) * 1000),
            )
        except requests.RequestException as exc:
            return FetchResult(
                requested_url=url,
                status_code=response.status_code,
                reason=response.reason,
                elapsed_ms=int((time.perf_counter() - started) * 1000),
                error=f"{exc.__class__.__name__}: {exc}",
            )
        finally:
            response.close()

    def close(self) -> None:
        """Close the HTTP session if this fetcher created it."""

        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def is_html_content_type(content_type: str | None) -> bool:
    return bool(content_type) and content_type.strip().lower().startswith(HTML_CONTENT_TYPE_PREFIX)


def resolve_redirect(result: FetchResult) -> str:
    """Return the normalized absolute target of a 3xx response.

    Raises ValueError when the Location header is missing or unusable.
    """

    if not result.location:
        raise ValueError("no Location header in response")

    target = normalize_url(urljoin(result.requested_url, result.location.strip()))
    if target is None:
        raise ValueError(f"invalid Location {result.location!r}")
    return target


def classify_fetch(
    result: FetchResult,
    *,
    root: str,
    in_scope: bool,
) -> tuple[FetchOutcome, str | None]:
    """Classify a fetch result.

    Returns (outcome, detail). For `REDIRECT` the detail is the normalized
    target to admit; for problem outcomes it is the message to report;
    otherwise it is None.
    """

    if result.error is not None:
        return FetchOutcome.TRANSPORT_ERROR, result.error

    if result.is_redirect:
        try:
            target = resolve_redirect(result)
        except ValueError as exc:
            return FetchOutcome.BAD_REDIRECT, f"resolving redirect: {exc}"
        if not in_root(target, root):
            return FetchOutcome.REDIRECT_OFF_ROOT, None
        return FetchOutcome.REDIRECT, target

    if not result.ok:
        return FetchOutcome.HTTP_ERROR, result.status_text

    # Off-root URLs are only checked for existence.
    if not in_scope:
        return FetchOutcome.OFF_ROOT_OK, None

    if not result.content_type:
        return FetchOutcome.MISSING_CONTENT_TYPE, "No Content-Type set"

    if not is_html_content_type(result.content_type):
        return FetchOutcome.NON_HTML, None

    return FetchOutcome.HTML, None


__all__ = [
    "Fetcher",
    "classify_fetch",
    "is_html_content_type",
    "resolve_redirect",
]
