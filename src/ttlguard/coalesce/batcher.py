from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, Set, Tuple, TypeVar

from ttlguard.core.errors import require_positive_int

R = TypeVar("R")
T = TypeVar("T")

_logger = logging.getLogger(__name__)


class RequestBatcher(Generic[R, T]):
    """Collect individual requests and process them in batches.

    A batch is dispatched as soon as ``batch_size`` requests are queued, or
    ``delay_ms`` after the first request of a partial batch arrived.
    ``process_batch`` receives the requests in arrival order and must return
    one result per request, in the same order. If it raises, every caller in
    that batch gets the exception.
    """

    def __init__(
        self,
        process_batch: Callable[[List[R]], Awaitable[Sequence[T]]],
        batch_size: int = 10,
        delay_ms: int = 50,
    ) -> None:
        self._process_batch = process_batch
        self._batch_size = require_positive_int(batch_size, "batch_size")
        self._delay_ms = require_positive_int(delay_ms, "delay_ms")
        self._queue: List[Tuple[R, asyncio.Future]] = []
        self._timer: Optional[asyncio.TimerHandle] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Requests queued but not yet dispatched."""
        return len(self._queue)

    async def add(self, request: R) -> T:
        loop = asyncio.get_running_loop()
        future: asyncio.Future = loop.create_future()
        self._queue.append((request, future))
        if len(self._queue) >= self._batch_size:
            self._dispatch()
        elif self._timer is None:
            self._timer = loop.call_later(self._delay_ms / 1000.0, self._dispatch)
        return await future

    async def flush(self) -> None:
        """Dispatch everything queued and wait for all in-flight batches."""
        while self._queue:
            self._dispatch()
        if self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    def _dispatch(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if not self._queue:
            return
        batch = self._queue[: self._batch_size]
        del self._queue[: self._batch_size]
        task = asyncio.get_running_loop().create_task(self._run(batch))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        if self._queue:
            self._timer = asyncio.get_running_loop().call_later(self._delay_ms / 1000.0, self._dispatch)

    async def _run(self, batch: List[Tuple[R, asyncio.Future]]) -> None:
        _logger.debug("RequestBatcher: processing batch of %d", len(batch))
        try:
            results = list(await self._process_batch([request for request, _ in batch]))
            if len(results) != len(batch):
                raise ValueError(f"process_batch returned {len(results)} results for {len(batch)} requests")
        except asyncio.CancelledError:
            for _, future in batch:
                future.cancel()
            raise
        except Exception as exc:
            _logger.warning("RequestBatcher: batch of %d failed: %s", len(batch), exc)
            for _, future in batch:
                if not future.done():
                    future.set_exception(exc)
            return
        for (_, future), result in zip(batch, results):
            # a caller may have given up waiting
            if not future.done():
                future.set_result(result)
