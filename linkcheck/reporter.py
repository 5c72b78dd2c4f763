"""Problem accumulation, fragment reconciliation, and final reporting."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .constants import EXIT_OK, EXIT_PROBLEMS
from .types import UrlFragment

logger = logging.getLogger(__name__)


def format_sources(sources: Iterable[str]) -> str:
    return "[" + ", ".join(sources) + "]"


class ProblemReporter:
    """Ordered, append-only log of human-readable failures for one run.

    Fetch-time problems are added by the dispatcher as they happen. Missing
    fragments are appended once by `reconcile_fragments` after the crawl has
    drained, so they always come last.
    """

    def __init__(self) -> None:
        self._problems: list[str] = []
        self._reconciled = False

    def add(self, url: str, message: str, sources: Iterable[str] = ()) -> str:
        """Record a fetch-time problem for `url`."""

        line = f"Error on {url}: {message} (from {format_sources(sources)})"
        logger.info(line)
        self._problems.append(line)
        return line

    def add_missing_fragment(self, key: UrlFragment, referrers: Iterable[str]) -> str:
        line = f"Missing fragment #{key.fragment} on {key.url} (from {format_sources(referrers)})"
        logger.info(line)
        self._problems.append(line)
        return line

    def reconcile_fragments(
        self,
        needed: Mapping[UrlFragment, list[str]],
        exists: set[UrlFragment] | frozenset[UrlFragment],
    ) -> int:
        """Report every needed fragment that no fetched page exposed.

        Returns the number of missing fragments found.
        """

        if self._reconciled:
            raise RuntimeError("Fragments have already been reconciled for this run")
        self._reconciled = True

        missing = 0
        for key, referrers in needed.items():
            if key in exists:
                continue
            self.add_missing_fragment(key, referrers)
            missing += 1
        return missing

    @property
    def problems(self) -> list[str]:
        return list(self._problems)

    @property
    def ok(self) -> bool:
        return not self._problems

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.ok else EXIT_PROBLEMS

    def __len__(self) -> int:
        return len(self._problems)


__all__ = [
    "ProblemReporter",
    "format_sources",
]
