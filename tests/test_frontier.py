import threading

import pytest

from linkcheck.frontier import EnqueueStatus, Frontier
from linkcheck.types import UrlFragment


def test_first_admission_enqueues_and_marks_crawled():
    frontier = Frontier()

    result = frontier.admit("http://site.test/a", "http://site.test/")

    assert result.accepted
    assert result.url == "http://site.test/a"
    assert frontier.crawled_urls() == {"http://site.test/a"}
    assert frontier.outstanding == 1
    assert frontier.pop(block=False) == "http://site.test/a"


def test_repeat_admission_is_a_no_op_even_with_other_fragment():
    frontier = Frontier()
    frontier.admit("http://site.test/a", "r1")

    again = frontier.admit("http://site.test/a#top", "r2")

    assert again.status == EnqueueStatus.SKIPPED_SEEN
    assert again.fragment == "top"
    assert frontier.qsize() == 1
    assert frontier.outstanding == 1


def test_needed_fragments_accumulate_every_referrer():
    frontier = Frontier()
    frontier.admit("http://site.test/a#top", "r1")
    frontier.admit("http://site.test/a#top", "r2")
    frontier.admit("http://site.test/a#", "r3")
    frontier.admit("http://site.test/a", "r4")

    assert frontier.needed_fragments() == {
        UrlFragment("http://site.test/a", "top"): ["r1", "r2"],
    }


def test_concurrent_admissions_enqueue_once():
    frontier = Frontier()
    barrier = threading.Barrier(16)
    results = []
    lock = threading.Lock()

    def worker(idx: int) -> None:
        barrier.wait()
        result = frontier.admit(f"http://site.test/page#f{idx}", f"ref{idx}")
        with lock:
            results.append(result)

    threads = [threading.Thread(target=worker, args=(idx,)) for idx in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sum(1 for result in results if result.accepted) == 1
    assert frontier.qsize() == 1
    assert frontier.outstanding == 1
    assert len(frontier.needed_fragments()) == 16


def test_task_done_drains_outstanding_and_unblocks_join():
    frontier = Frontier()
    frontier.admit("http://site.test/", "")
    frontier.admit("http://site.test/a", "http://site.test/")

    joined = threading.Event()

    def waiter() -> None:
        frontier.join()
        joined.set()

    thread = threading.Thread(target=waiter)
    thread.start()

    for _ in range(2):
        assert frontier.pop(timeout=1.0) is not None
        frontier.task_done()

    thread.join(timeout=5.0)
    assert joined.is_set()
    assert frontier.outstanding == 0


def test_task_done_without_admission_raises():
    with pytest.raises(ValueError):
        Frontier().task_done()


def test_closed_frontier_rejects_new_urls():
    frontier = Frontier()
    frontier.close()

    result = frontier.admit("http://site.test/late", "x")

    assert result.status == EnqueueStatus.SKIPPED_CLOSED
    assert frontier.closed
    assert frontier.empty()


def test_pop_returns_none_when_empty():
    frontier = Frontier()

    assert frontier.pop(block=False) is None
    assert frontier.pop(block=True, timeout=0.01) is None


def test_snapshot_counters():
    frontier = Frontier()
    frontier.admit("http://site.test/", "")
    frontier.admit("http://site.test/", "")
    frontier.pop(block=False)

    snapshot = frontier.snapshot()

    assert snapshot["enqueued"] == 1
    assert snapshot["dequeued"] == 1
    assert snapshot["skipped_seen"] == 1
    assert snapshot["outstanding"] == 1
