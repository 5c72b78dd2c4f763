"""Link-check orchestration: dispatcher loop and the fetch-and-extract cycle."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import sys
import threading
from typing import Any, Protocol, TextIO

from .config import CheckConfig
from .constants import (
    DISPATCHER_JOIN_TIMEOUT_SECONDS,
    EXIT_OK,
    EXIT_PROBLEMS,
    FRONTIER_POLL_SECONDS,
)
from .fetcher import Fetcher, classify_fetch
from .frontier import EnqueueResult
from .parsers import PageExtractor
from .session import CrawlSession
from .stats import StatsCollector
from .types import FetchOutcome, FetchResult
from .url import is_special_scheme, normalize_url, resolve_link, split_fragment

logger = logging.getLogger(__name__)


class FetcherLike(Protocol):
    def fetch(self, url: str, *, read_body: bool = True) -> FetchResult: ...

    def close(self) -> None: ...


@dataclass(slots=True)
class CheckResult:
    """What a finished run hands back to its caller."""

    root: str
    problems: list[str]
    crawled_urls: set[str]
    stats: dict[str, Any]

    @property
    def ok(self) -> bool:
        return not self.problems

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.ok else EXIT_PROBLEMS

    def emit(self, stream: TextIO | None = None) -> None:
        """Print every problem, one per line, in the order recorded."""

        out = stream or sys.stdout
        for line in self.problems:
            print(line, file=out)


class LinkChecker:
    """Crawl everything reachable under the root and check links and anchors.

    A single dispatcher thread drains the frontier, so fetches never overlap.
    Pages it fetches admit new URLs back into the same frontier; the run is
    over when every admitted URL has been processed.
    """

    def __init__(
        self,
        config: CheckConfig,
        *,
        fetcher: FetcherLike | None = None,
        extractor: PageExtractor | None = None,
        stats: StatsCollector | None = None,
    ) -> None:
        self.config = config

        self.fetcher = fetcher or Fetcher(config)
        self.extractor = extractor or PageExtractor()
        self.stats = stats or StatsCollector()

        self._owns_fetcher = fetcher is None
        self._owns_stats = stats is None

    def run(self) -> CheckResult:
        """Check the whole site and return the accumulated problems."""

        # An injected collector accumulates across runs; an owned one is per run.
        if self._owns_stats:
            self.stats = StatsCollector()

        session = CrawlSession(root=self.config.root)

        try:
            self._crawl(session)
        finally:
            if self._owns_fetcher:
                self.fetcher.close()

        session.reconcile()

        self.stats.record_problems(len(session.reporter))
        self.stats.finish()

        return CheckResult(
            root=session.root,
            problems=session.reporter.problems,
            crawled_urls=session.frontier.crawled_urls(),
            stats=self.stats.to_json(),
        )

    def _crawl(self, session: CrawlSession) -> None:
        frontier = session.frontier

        dispatcher = threading.Thread(
            target=self._dispatch_loop,
            args=(session,),
            name="linkcheck-dispatcher",
            daemon=True,
        )
        dispatcher.start()

        self._admit(session, session.root, "")

        frontier.join()
        frontier.close()
        dispatcher.join(timeout=DISPATCHER_JOIN_TIMEOUT_SECONDS)

        self.stats.record_frontier_snapshot(frontier.snapshot())

    def _admit(self, session: CrawlSession, url: str, referrer: str) -> EnqueueResult:
        result = session.frontier.admit(url, referrer)
        self.stats.record_admission(result)
        return result

    def _dispatch_loop(self, session: CrawlSession) -> None:
        frontier = session.frontier
        while True:
            url = frontier.pop(block=True, timeout=FRONTIER_POLL_SECONDS)
            if url is None:
                if frontier.closed and frontier.empty():
                    return
                continue

            try:
                self._process(session, url)
            except Exception as exc:
                logger.exception("Unexpected failure while checking %s", url)
                session.add_problem(url, f"{exc.__class__.__name__}: {exc}")
            finally:
                frontier.task_done()

    def _process(self, session: CrawlSession, url: str) -> None:
        logger.info("  Crawling %s", url)

        in_scope = self.config.in_root(url)
        result = self.fetcher.fetch(url, read_body=in_scope)
        outcome, detail = classify_fetch(result, root=session.root, in_scope=in_scope)
        self.stats.record_fetch(result, outcome)

        if outcome == FetchOutcome.REDIRECT:
            logger.debug("  %s redirects to %s", url, detail)
            session.add_source(split_fragment(detail)[0], url)
            self._admit(session, detail, url)
            return

        if outcome == FetchOutcome.REDIRECT_OFF_ROOT:
            logger.debug("  %s redirects off-site to %s, skipping", url, result.location)
            return

        if outcome.is_problem:
            session.add_problem(url, detail or outcome.value)
            return

        if outcome == FetchOutcome.HTML:
            self._extract(session, url, result.body or b"")

    def _extract(self, session: CrawlSession, url: str, body: bytes) -> None:
        page = self.extractor.parse(body)
        self.stats.record_parse(page)

        for ref in page.links:
            logger.debug("  links to %s", ref)
            if is_special_scheme(ref):
                continue

            dest = normalize_url(resolve_link(session.root, ref))
            if dest is None:
                session.add_problem(url, f"malformed link {ref!r}")
                continue

            if not self.config.external_links and not self.config.in_root(dest):
                continue

            base, _ = split_fragment(dest)
            session.add_source(base, url)
            self._admit(session, dest, url)

        for element_id in page.ids:
            logger.debug(" url %s has #%s", url, element_id)
            session.mark_fragment(url, element_id)


def check_site(config: CheckConfig, **kwargs: Any) -> CheckResult:
    """Convenience wrapper: build a LinkChecker and run it once."""

    return LinkChecker(config, **kwargs).run()


__all__ = [
    "CheckResult",
    "FetcherLike",
    "LinkChecker",
    "check_site",
]
