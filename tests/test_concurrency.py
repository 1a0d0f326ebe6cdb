"""Tests for bounded fan-out helpers."""

from __future__ import annotations

import threading
import time

import pytest

from tsdocgen.concurrency import resolve_workers, run_concurrently


@pytest.mark.parametrize(
    ("concurrency", "count", "expected"),
    [("inherit", 5, None), ("unbounded", 5, 5), ("unbounded", 0, 1), (3, 10, 3)],
)
def test_resolve_workers(concurrency, count, expected) -> None:
    assert resolve_workers(concurrency, count) == expected


@pytest.mark.parametrize("concurrency", ["inherit", "unbounded", 1, 2])
def test_run_concurrently_preserves_input_order(concurrency) -> None:
    def slow_square(value: int) -> int:
        time.sleep(0.001 * (5 - value))
        return value * value

    assert run_concurrently(slow_square, range(5), concurrency) == [0, 1, 4, 9, 16]


def test_run_concurrently_respects_bound() -> None:
    lock = threading.Lock()
    active = 0
    peak = 0

    def track(_: int) -> None:
        nonlocal active, peak
        with lock:
            active += 1
            peak = max(peak, active)
        time.sleep(0.01)
        with lock:
            active -= 1

    run_concurrently(track, range(8), 2)

    assert peak <= 2


def test_run_concurrently_propagates_errors() -> None:
    def fail_on_three(value: int) -> int:
        if value == 3:
            raise ValueError("boom")
        return value

    with pytest.raises(ValueError, match="boom"):
        run_concurrently(fail_on_three, range(5), 2)


def test_run_concurrently_empty() -> None:
    assert run_concurrently(lambda value: value, [], "unbounded") == []
