"""Thread-safe link-check statistics aggregation utilities."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
import threading
from typing import Any, Mapping

from .frontier import EnqueueResult, EnqueueStatus
from .types import CheckStats, FetchOutcome, FetchResult, ParseResult


class StatsCollector:
    """Collect and summarize runtime statistics for one run.

    Admissions are recorded from whichever thread admits; fetch and parse
    results come from the dispatcher. A lock keeps both safe.
    """

    def __init__(self, base: CheckStats | None = None) -> None:
        self._lock = threading.Lock()
        self._core = base or CheckStats()

        self._frontier_snapshot: dict[str, int | bool] = {}

        self._outcome_counts: dict[str, int] = defaultdict(int)
        self._status_code_counts: dict[str, int] = defaultdict(int)
        self._error_type_counts: dict[str, int] = defaultdict(int)
        self._elapsed_ms_total = 0
        self._elapsed_samples = 0
        self._bytes_total = 0

    def record_admission(self, result: EnqueueResult) -> None:
        """Record one frontier admission outcome."""

        with self._lock:
            if result.status == EnqueueStatus.ENQUEUED:
                self._core.admitted += 1
            elif result.status == EnqueueStatus.SKIPPED_SEEN:
                self._core.skipped_seen += 1

    def record_frontier_snapshot(self, snapshot: Mapping[str, int | bool]) -> None:
        """Attach latest frontier snapshot for diagnostics."""

        with self._lock:
            self._frontier_snapshot = dict(snapshot)

    def record_fetch(self, result: FetchResult, outcome: FetchOutcome) -> None:
        """Record one fetch result and how it was classified."""

        with self._lock:
            self._core.fetched += 1
            self._outcome_counts[outcome.value] += 1
            if outcome.is_problem:
                self._core.fetch_problems += 1

            if result.status_code is not None:
                self._status_code_counts[str(result.status_code)] += 1

            if result.error:
                err_type = result.error.split(":", maxsplit=1)[0].strip() or "Unknown"
                self._error_type_counts[err_type] += 1

            if result.elapsed_ms is not None:
                self._elapsed_ms_total += int(result.elapsed_ms)
                self._elapsed_samples += 1

            if result.content_length is not None:
                self._bytes_total += int(result.content_length)

    def record_parse(self, result: ParseResult) -> None:
        with self._lock:
            self._core.links_found += len(result.links)
            self._core.ids_found += len(result.ids)

    def record_problems(self, count: int) -> None:
        with self._lock:
            self._core.problems = count

    def finish(self) -> None:
        """Mark run as finished."""

        with self._lock:
            self._core.finish()

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-serializable summary payload."""

        with self._lock:
            core = self._core.to_json()

            start = _parse_iso_utc(self._core.started_at)
            end = _parse_iso_utc(self._core.finished_at) if self._core.finished_at else datetime.now(
                timezone.utc
            )
            duration_seconds = max(0.0, (end - start).total_seconds())

            elapsed_avg = (
                self._elapsed_ms_total / self._elapsed_samples
                if self._elapsed_samples > 0
                else 0.0
            )

            return {
                **core,
                "duration_seconds": duration_seconds,
                "fetched_per_second": (
                    self._core.fetched / duration_seconds if duration_seconds > 0 else 0.0
                ),
                "frontier": dict(self._frontier_snapshot),
                "fetch": {
                    "outcome_counts": dict(self._outcome_counts),
                    "status_code_counts": dict(self._status_code_counts),
                    "error_type_counts": dict(self._error_type_counts),
                    "elapsed_ms_total": self._elapsed_ms_total,
                    "elapsed_ms_avg": elapsed_avg,
                    "bytes_total": self._bytes_total,
                },
            }


def _parse_iso_utc(value: str | None) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


__all__ = ["StatsCollector"]
