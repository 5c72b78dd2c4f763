"""linkcheck package: site-scoped broken-link and anchor checking."""

from .config import CheckConfig, load_config, normalize_root, save_config
from .fetcher import Fetcher, classify_fetch
from .frontier import EnqueueResult, EnqueueStatus, Frontier
from .parsers import PageExtractor, PageExtractorConfig
from .pipeline import CheckResult, LinkChecker, check_site
from .reporter import ProblemReporter
from .session import CrawlSession
from .stats import StatsCollector
from .types import (
    CheckStats,
    FetchOutcome,
    FetchResult,
    ParseResult,
    UrlFragment,
    utc_now_iso,
)
from .url import (
    in_root,
    is_absolute_http,
    is_special_scheme,
    normalize_url,
    resolve_link,
    split_fragment,
)

__version__ = "1.0.0"

__all__ = [
    "CheckConfig",
    "CheckResult",
    "CheckStats",
    "CrawlSession",
    "EnqueueResult",
    "EnqueueStatus",
    "FetchOutcome",
    "FetchResult",
    "Fetcher",
    "Frontier",
    "LinkChecker",
    "PageExtractor",
    "PageExtractorConfig",
    "ParseResult",
    "ProblemReporter",
    "StatsCollector",
    "UrlFragment",
    "check_site",
    "classify_fetch",
    "in_root",
    "is_absolute_http",
    "is_special_scheme",
    "load_config",
    "normalize_root",
    "normalize_url",
    "resolve_link",
    "save_config",
    "split_fragment",
    "utc_now_iso",
]
