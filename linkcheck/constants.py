"""Default values shared by config, fetcher, and CLI."""

from __future__ import annotations

DEFAULT_VERBOSE = True
DEFAULT_DEBUG = False
DEFAULT_EXTERNAL_LINKS = True

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_USER_AGENT = "linkcheck/1.0"
DEFAULT_HTTP_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
}

HTML_CONTENT_TYPE_PREFIX = "text/html"

# Dispatcher wakes up this often to notice a closed frontier.
FRONTIER_POLL_SECONDS = 0.5
DISPATCHER_JOIN_TIMEOUT_SECONDS = 5.0

JSON_INDENT = 2
SUPPORTED_CONFIG_SUFFIXES = (".json", ".yaml", ".yml")

EXIT_OK = 0
EXIT_PROBLEMS = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130
