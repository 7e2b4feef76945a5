"""Bounded-concurrency batch processing with progress reporting.

Per-test work (one export, one upload) runs on a fixed-size thread pool.
Units are independent and may finish in any order. The progress counter
is the only state shared between workers.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Iterable, Optional, TypeVar

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

logger = logging.getLogger(__name__)

__all__ = ["THREADS", "ProgressCounter", "process_batch"]

THREADS = 32

T = TypeVar("T")


class ProgressCounter:
    """Thread-safe, monotonically increasing count of finished units.

    Attributes:
        total: Number of units in the batch
    """

    def __init__(
        self,
        total: int,
        progress: Optional[Progress] = None,
        task_id: Optional[TaskID] = None,
    ) -> None:
        self.total = total
        self._progress = progress
        self._task_id = task_id
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def increment(self) -> int:
        """Record one finished unit and return the new count."""
        with self._lock:
            self._count += 1
            if self._progress is not None and self._task_id is not None:
                self._progress.advance(self._task_id)
            return self._count


def _make_progress(show: bool) -> Progress:
    return Progress(
        TimeElapsedColumn(),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("{task.description}"),
        console=Console(stderr=True),
        disable=not show,
    )


def process_batch(
    items: Iterable[T],
    worker: Callable[[T], object],
    title: str = "Rows",
    threads: int = THREADS,
    show_progress: bool = True,
) -> int:
    """Run worker over every item on a bounded thread pool.

    The counter advances once per unit that finishes, whether it succeeded
    or raised. The first failure is re-raised after in-flight units have
    finished; units still queued at that point are cancelled and never run.

    Args:
        items: Units of work
        worker: Callable applied to each unit
        title: Label shown next to the progress bar
        threads: Pool size
        show_progress: Render a progress bar on stderr

    Returns:
        Number of finished units
    """
    items = list(items)

    with _make_progress(show_progress) as progress:
        task_id = progress.add_task(title, total=len(items))
        counter = ProgressCounter(len(items), progress, task_id)

        def on_done(future: Future) -> None:
            if not future.cancelled():
                counter.increment()

        executor = ThreadPoolExecutor(max_workers=threads)
        futures = []
        for item in items:
            future = executor.submit(worker, item)
            future.add_done_callback(on_done)
            futures.append(future)

        try:
            for future in as_completed(futures):
                future.result()
        except BaseException:
            executor.shutdown(wait=True, cancel_futures=True)
            logger.debug(f"Batch '{title}' stopped after {counter.count}/{counter.total} units")
            raise
        executor.shutdown(wait=True)

    return counter.count
