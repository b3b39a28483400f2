"""
Worker pools for the data-parallel phases of a generational step.

Per-individual work (fitness evaluation, recombination of one slot) runs on
a single process-wide slot pool. Island-level work gets its own pool owned
by the ensemble, so an island task never blocks waiting on a pool that it
is itself occupying.
"""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor

from loguru import logger

_slot_executor: ThreadPoolExecutor | None = None
_slot_lock = threading.Lock()


def default_workers() -> int:
    return max(2, os.cpu_count() or 2)


def shared_executor() -> ThreadPoolExecutor:
    """Return the shared slot pool, creating it on first use."""
    global _slot_executor

    with _slot_lock:
        if _slot_executor is None:
            _slot_executor = ThreadPoolExecutor(
                max_workers=default_workers(),
                thread_name_prefix="mosaic-slot",
            )
            logger.debug(
                f"Created shared slot pool with {_slot_executor._max_workers} workers"  # type: ignore[attr-defined]
            )
        return _slot_executor


def shutdown_shared_executor() -> None:
    """Shut the shared slot pool down; the next call to shared_executor() recreates it."""
    global _slot_executor

    with _slot_lock:
        if _slot_executor is not None:
            _slot_executor.shutdown(wait=True)
            _slot_executor = None


__all__ = [
    "default_workers",
    "shared_executor",
    "shutdown_shared_executor",
]
