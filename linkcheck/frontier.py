"""Thread-safe frontier queue with admission-time deduplication."""

from __future__ import annotations

import queue
import threading
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum

from .types import UrlFragment
from .url import split_fragment


class EnqueueStatus(str, Enum):
    """Result status for frontier admission attempts."""

    ENQUEUED = "enqueued"
    SKIPPED_SEEN = "skipped_seen"
    SKIPPED_CLOSED = "skipped_closed"


@dataclass(frozen=True, slots=True)
class EnqueueResult:
    """Outcome of one admission attempt."""

    status: EnqueueStatus
    url: str
    fragment: str = ""

    @property
    def accepted(self) -> bool:
        return self.status == EnqueueStatus.ENQUEUED


class Frontier:
    """Work queue of URLs awaiting fetch, fed by `admit`.

    - A URL (fragment stripped) is admitted at most once per run; it is marked
      crawled at admission time, before its fetch starts or completes.
    - Needed fragments are recorded on every admission, including repeats.
    - The queue is unbounded, so `admit` never blocks even when called from
      the thread that drains the queue.
    - The outstanding count covers queued plus in-flight URLs; `join` returns
      once every admitted URL has been marked `task_done`.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[str] = queue.Queue()
        self._lock = threading.Lock()

        self._crawled: set[str] = set()
        self._needed_fragments: dict[UrlFragment, list[str]] = defaultdict(list)
        self._outstanding = 0

        self._enqueued_count = 0
        self._dequeued_count = 0
        self._skipped_seen_count = 0
        self._skipped_closed_count = 0

        self._closed = False

    def admit(self, url: str, referrer: str = "") -> EnqueueResult:
        """Admit `url` (which may carry a #fragment) on behalf of `referrer`."""

        base, fragment = split_fragment(url)

        with self._lock:
            if fragment:
                self._needed_fragments[UrlFragment(base, fragment)].append(referrer)

            if base in self._crawled:
                self._skipped_seen_count += 1
                return EnqueueResult(EnqueueStatus.SKIPPED_SEEN, base, fragment)

            if self._closed:
                self._skipped_closed_count += 1
                return EnqueueResult(EnqueueStatus.SKIPPED_CLOSED, base, fragment)

            self._crawled.add(base)
            self._outstanding += 1
            self._queue.put(base)
            self._enqueued_count += 1

        return EnqueueResult(EnqueueStatus.ENQUEUED, base, fragment)

    def pop(self, *, block: bool = True, timeout: float | None = None) -> str | None:
        """Pop the next URL to fetch.

        Returns `None` when no item is available under the requested blocking mode.
        """

        try:
            if block:
                url = self._queue.get(block=True, timeout=timeout)
            else:
                url = self._queue.get(block=False)
        except queue.Empty:
            return None

        with self._lock:
            self._dequeued_count += 1
        return url

    def task_done(self) -> None:
        """Mark one popped URL as fully processed."""

        with self._lock:
            if self._outstanding <= 0:
                raise ValueError("task_done() called more times than URLs were admitted")
            self._outstanding -= 1
        self._queue.task_done()

    def join(self) -> None:
        """Block until every admitted URL has been processed."""

        self._queue.join()

    def close(self) -> None:
        """Close frontier to future admissions."""

        with self._lock:
            self._closed = True

    @property
    def closed(self) -> bool:
        """Whether frontier has been closed for new admissions."""

        with self._lock:
            return self._closed

    @property
    def outstanding(self) -> int:
        """Admitted URLs not yet marked done (queued plus in flight)."""

        with self._lock:
            return self._outstanding

    def qsize(self) -> int:
        """Approximate queue size."""

        return self._queue.qsize()

    def empty(self) -> bool:
        """Return True if queue is currently empty."""

        return self._queue.empty()

    def crawled_urls(self) -> set[str]:
        """Return snapshot of admitted URLs."""

        with self._lock:
            return set(self._crawled)

    def needed_fragments(self) -> dict[UrlFragment, list[str]]:
        """Return snapshot of fragment references, in first-reference order."""

        with self._lock:
            return {key: list(referrers) for key, referrers in self._needed_fragments.items()}

    def snapshot(self) -> dict[str, int | bool]:
        """Return frontier counters for logs/stats reporting."""

        with self._lock:
            return {
                "closed": self._closed,
                "queue_size": self._queue.qsize(),
                "crawled_urls": len(self._crawled),
                "needed_fragments": len(self._needed_fragments),
                "outstanding": self._outstanding,
                "enqueued": self._enqueued_count,
                "dequeued": self._dequeued_count,
                "skipped_seen": self._skipped_seen_count,
                "skipped_closed": self._skipped_closed_count,
            }


__all__ = [
    "EnqueueResult",
    "EnqueueStatus",
    "Frontier",
]
