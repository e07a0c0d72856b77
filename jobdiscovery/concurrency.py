"""
Thread-pool helpers: a timeout race for one call and a settle-all barrier.

A task that runs past its deadline is abandoned, not killed; its thread
finishes in the background and the result is discarded.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence


@dataclass
class Task:
    name: str
    func: Callable[[], Any]
    timeout: Optional[float] = None


@dataclass
class Settled:
    name: str
    value: Any = None
    error: Optional[BaseException] = None
    timed_out: bool = False
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None and not self.timed_out


def run_with_timeout(func: Callable[..., Any], timeout: float, *args, **kwargs) -> Any:
    """Run func on a worker thread; raise TimeoutError if it misses the deadline."""
    pool = ThreadPoolExecutor(max_workers=1)
    try:
        future = pool.submit(func, *args, **kwargs)
        try:
            return future.result(timeout=timeout)
        except FutureTimeout:
            future.cancel()
            raise TimeoutError(f"Timed out after {timeout:g}s")
    finally:
        pool.shutdown(wait=False)


def settle_all(tasks: Sequence[Task]) -> List[Settled]:
    """
    Start every task at once and wait for each up to its own timeout.

    Results come back in task order regardless of completion order. A task
    that raises or times out yields a Settled with error/timed_out set; it
    never affects its siblings.
    """
    if not tasks:
        return []

    pool = ThreadPoolExecutor(max_workers=len(tasks))
    started = time.monotonic()
    try:
        futures = [pool.submit(t.func) for t in tasks]
        results: List[Settled] = []
        for task, future in zip(tasks, futures):
            remaining = None
            if task.timeout is not None:
                remaining = max(0.0, started + task.timeout - time.monotonic())
            try:
                value = future.result(timeout=remaining)
                results.append(Settled(task.name, value=value, elapsed=time.monotonic() - started))
            except FutureTimeout:
                future.cancel()
                results.append(Settled(task.name, timed_out=True, elapsed=time.monotonic() - started))
            except Exception as e:
                results.append(Settled(task.name, error=e, elapsed=time.monotonic() - started))
        return results
    finally:
        pool.shutdown(wait=False, cancel_futures=True)
