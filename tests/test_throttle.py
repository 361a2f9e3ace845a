from __future__ import annotations

import random
import threading
import time

import pytest

from services.throttle import AdaptiveThrottle


def test_budget_starts_at_ceiling():
    t = AdaptiveThrottle(50)
    assert t.budget == 50
    assert t.consecutive_errors == 0


def test_budget_shrinks_by_one_once_errors_pass_threshold():
    t = AdaptiveThrottle(10, error_threshold=5)
    for _ in range(5):
        t.acquire()
        t.release(False)
    assert t.budget == 10
    assert t.consecutive_errors == 5

    t.acquire()
    t.release(False)
    assert t.budget == 9
    assert t.consecutive_errors == 0


def test_success_grows_budget_only_with_clean_counter():
    t = AdaptiveThrottle(3, error_threshold=1)
    for _ in range(2):
        t.acquire()
        t.release(False)
    assert t.budget == 2

    t.acquire()
    t.release(True)
    assert t.budget == 3

    t.acquire()
    t.release(False)
    t.acquire()
    t.release(True)
    # counter is 1, so success does not grow
    assert t.budget == 3
    assert t.consecutive_errors == 1


def test_budget_stays_within_bounds_for_random_sequences():
    rng = random.Random(1234)
    for ceiling in (1, 2, 5, 50):
        t = AdaptiveThrottle(ceiling, error_threshold=5)
        for _ in range(2000):
            t.acquire()
            t.release(rng.random() < 0.3)
            assert 1 <= t.budget <= ceiling


def test_budget_never_drops_below_one():
    t = AdaptiveThrottle(2, error_threshold=0)
    for _ in range(50):
        t.acquire()
        t.release(False)
    assert t.budget == 1


def test_acquire_blocks_until_release():
    t = AdaptiveThrottle(1)
    t.acquire()
    admitted = threading.Event()

    def _second():
        t.acquire()
        admitted.set()
        t.release(True)

    th = threading.Thread(target=_second)
    th.start()
    time.sleep(0.05)
    assert not admitted.is_set()
    t.release(True)
    assert admitted.wait(2)
    th.join(2)
    assert t.admitted == 0


def test_slot_reports_failure_on_exception():
    t = AdaptiveThrottle(5, error_threshold=5)
    with pytest.raises(RuntimeError):
        with t.slot():
            raise RuntimeError("boom")
    assert t.consecutive_errors == 1
    assert t.admitted == 0

    with t.slot() as slot:
        slot.failed()
    assert t.consecutive_errors == 2


def test_invalid_ceiling():
    with pytest.raises(ValueError):
        AdaptiveThrottle(0)
