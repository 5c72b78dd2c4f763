"""URL normalization, fragment splitting, and root-scope helpers."""

from __future__ import annotations

import re
from urllib.parse import urljoin, urlsplit, urlunsplit


HTTP_SCHEMES = ("http", "https")

_DEFAULT_PORTS = {"http": 80, "https": 443}
_PERCENT_ESCAPE = re.compile(r"%([0-9a-fA-F]{2})")
_UNRESERVED = frozenset(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-._~"
)


def _has_default_port(scheme: str, port: int | None) -> bool:
    return port is not None and _DEFAULT_PORTS.get(scheme) == port


def _normalize_netloc(parsed_url) -> str | None:  # urllib.parse.SplitResult
    host = (parsed_url.hostname or "").lower()
    if not host:
        return None
    if ":" in host:
        host = f"[{host}]"

    userinfo = ""
    if "@" in parsed_url.netloc:
        userinfo = parsed_url.netloc.rsplit("@", 1)[0] + "@"

    try:
        port = parsed_url.port
    except ValueError:
        return None

    if port is not None and not _has_default_port(parsed_url.scheme.lower(), port):
        return f"{userinfo}{host}:{port}"
    return f"{userinfo}{host}"


def _normalize_escapes(value: str) -> str:
    """Uppercase percent-escapes and decode the ones for unreserved characters."""

    def _fix(match: re.Match[str]) -> str:
        char = chr(int(match.group(1), 16))
        if char in _UNRESERVED:
            return char
        return "%" + match.group(1).upper()

    return _PERCENT_ESCAPE.sub(_fix, value)


def _remove_dot_segments(path: str) -> str:
    """Resolve `.` and `..` segments (RFC 3986 section 5.2.4)."""

    if not path:
        return path

    leading = path.startswith("/")
    segments = path.split("/")
    if leading:
        segments = segments[1:]

    output: list[str] = []
    for segment in segments:
        if segment == "..":
            if output:
                output.pop()
        elif segment != ".":
            output.append(segment)

    # "/a/b/.." names the directory "/a/", keep its trailing slash.
    if segments and segments[-1] in {".", ".."}:
        output.append("")

    joined = "/".join(output)
    return "/" + joined if leading else joined


def normalize_url(url: str | None) -> str | None:
    """Canonicalize an absolute URL so equivalent URLs compare equal.

    Only semantics-preserving rewrites are applied: scheme/host case, default
    port removal, dot-segment removal, percent-escape case, and an empty path
    becoming `/`. Query order and the fragment are kept as-is.

    Returns `None` for strings that are not absolute URLs with a host.
    """

    if not url:
        return None

    raw = url.strip()
    if not raw:
        return None

    try:
        parsed = urlsplit(raw)
    except ValueError:
        return None

    if not parsed.scheme or not parsed.netloc:
        return None

    scheme = parsed.scheme.lower()
    netloc = _normalize_netloc(parsed)
    if netloc is None:
        return None

    path = _remove_dot_segments(_normalize_escapes(parsed.path)) or "/"
    query = _normalize_escapes(parsed.query)

    return urlunsplit((scheme, netloc, path, query, parsed.fragment))


def split_fragment(url: str) -> tuple[str, str]:
    """Split `url` at the first `#` into (url without fragment, fragment)."""

    base, _, fragment = url.partition("#")
    return base, fragment


def is_special_scheme(ref: str) -> bool:
    """Return True for hrefs with a scheme other than http(s) (mailto:, sms:, ftp:, ...)."""

    try:
        scheme = urlsplit(ref.strip()).scheme
    except ValueError:
        return False
    return bool(scheme) and scheme.lower() not in HTTP_SCHEMES


def is_absolute_http(ref: str) -> bool:
    lowered = ref.strip().lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def resolve_link(root: str, ref: str) -> str:
    """Resolve an href found on any page of the site.

    Absolute http(s) links are used as-is; everything else is root-relative.
    """

    candidate = ref.strip()
    if is_absolute_http(candidate):
        return candidate
    return urljoin(root, candidate)


def in_root(url: str, root: str) -> bool:
    """Return True when normalized `url` lies under normalized `root`."""

    return url.startswith(root)


__all__ = [
    "HTTP_SCHEMES",
    "in_root",
    "is_absolute_http",
    "is_special_scheme",
    "normalize_url",
    "resolve_link",
    "split_fragment",
]
