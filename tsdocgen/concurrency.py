"""Bounded fan-out for per-file operations."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, TypeVar

from .config import INHERIT, UNBOUNDED, Concurrency, parse_concurrency

T = TypeVar("T")
R = TypeVar("R")


def resolve_workers(concurrency: Concurrency, item_count: int) -> Optional[int]:
    """Translate a concurrency setting into a ``max_workers`` value.

    ``None`` lets the executor pick its default parallelism.
    """
    setting = parse_concurrency(concurrency)
    if setting == INHERIT:
        return None
    if setting == UNBOUNDED:
        return max(item_count, 1)
    return int(setting)


def run_concurrently(
    func: Callable[[T], R],
    items: Iterable[T],
    concurrency: Concurrency = INHERIT,
) -> List[R]:
    """Apply *func* to every item and return the results in input order.

    The first exception raised by *func* propagates once the pool shuts down.
    """
    materialised = list(items)
    if not materialised:
        return []
    workers = resolve_workers(concurrency, len(materialised))
    if workers == 1:
        return [func(item) for item in materialised]
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tsdocgen-io") as executor:
        return list(executor.map(func, materialised))


__all__ = ["resolve_workers", "run_concurrently"]
