"""Per-run crawl state."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

from .frontier import Frontier
from .reporter import ProblemReporter
from .types import UrlFragment


@dataclass(slots=True)
class CrawlSession:
    """Everything one link-check run knows, created fresh for each run.

    `frontier` is shared with any thread that admits URLs and guards its own
    state. The remaining fields are written only by the dispatcher thread
    while the crawl runs, and read by the caller after `frontier.join()`.
    """

    root: str
    frontier: Frontier = field(default_factory=Frontier)
    reporter: ProblemReporter = field(default_factory=ProblemReporter)

    link_sources: dict[str, list[str]] = field(default_factory=lambda: defaultdict(list))
    fragment_exists: set[UrlFragment] = field(default_factory=set)

    def add_source(self, url: str, referrer: str) -> None:
        self.link_sources[url].append(referrer)

    def sources_for(self, url: str) -> list[str]:
        return list(self.link_sources.get(url, ()))

    def mark_fragment(self, url: str, fragment: str) -> None:
        self.fragment_exists.add(UrlFragment(url, fragment))

    def add_problem(self, url: str, message: str) -> str:
        return self.reporter.add(url, message, self.sources_for(url))

    def reconcile(self) -> int:
        """Append missing-fragment problems; call once the frontier has drained."""

        return self.reporter.reconcile_fragments(
            self.frontier.needed_fragments(),
            self.fragment_exists,
        )


__all__ = ["CrawlSession"]
