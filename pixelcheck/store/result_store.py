"""In-memory result store with time-based eviction."""

from __future__ import annotations

import asyncio
import logging
import random
import threading
import time
from typing import Callable

from pixelcheck.errors import ResultNotFoundError
from pixelcheck.models.comparison import ComparisonResult

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def new_result_id() -> str:
    """Millisecond timestamp prefix plus a random suffix, both base-36.

    Unique enough within the retention window; not a security token.
    """
    suffix = "".join(random.choice(_BASE36) for _ in range(10))
    return _to_base36(int(time.time() * 1000)) + suffix


class ResultStore:
    """Holds comparison results for a fixed retention window.

    Pure TTL: reads never extend an entry's life. A background sweep removes
    expired entries; ``get`` also refuses entries past retention that the
    sweep has not reached yet.
    """

    def __init__(
        self,
        retention_seconds: float = 30 * 60,
        sweep_interval_seconds: float = 30 * 60,
        clock: Callable[[], float] = time.time,
    ):
        self.retention_seconds = retention_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._entries: dict[str, tuple[ComparisonResult, float]] = {}
        self._lock = threading.Lock()
        self._sweep_task: asyncio.Task | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def put(self, result: ComparisonResult) -> str:
        with self._lock:
            self._entries[result.id] = (result, self._clock())
        logger.debug("Stored result %s", result.id)
        return result.id

    def get(self, result_id: str) -> ComparisonResult:
        with self._lock:
            entry = self._entries.get(result_id)
        if entry is None:
            raise ResultNotFoundError(result_id)
        result, inserted_at = entry
        if self._clock() - inserted_at > self.retention_seconds:
            raise ResultNotFoundError(result_id)
        return result

    def sweep(self) -> int:
        """Evict every entry older than the retention window."""
        now = self._clock()
        with self._lock:
            expired = [
                key for key, (_, inserted_at) in self._entries.items()
                if now - inserted_at > self.retention_seconds
            ]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info("Evicted %d expired results", len(expired))
        return len(expired)

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval_seconds)
            self.sweep()

    def start(self) -> None:
        """Schedule the periodic sweep on the running event loop."""
        if self._sweep_task is None or self._sweep_task.done():
            self._sweep_task = asyncio.get_running_loop().create_task(self._sweep_loop())

    async def stop(self) -> None:
        if self._sweep_task is None:
            return
        self._sweep_task.cancel()
        try:
            await self._sweep_task
        except asyncio.CancelledError:
            pass
        self._sweep_task = None

    async def __aenter__(self) -> "ResultStore":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
