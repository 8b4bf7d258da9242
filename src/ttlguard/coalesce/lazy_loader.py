from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Optional, TypeVar

T = TypeVar("T")

_logger = logging.getLogger(__name__)


class LazyLoader(Generic[T]):
    """Load a value once and share it between concurrent callers.

    While a load is in flight, further ``get()`` calls await the same result
    instead of starting another load. A successful result is kept until
    ``invalidate()``; a failed load is raised to every waiter and the next
    ``get()`` tries again.

    ``invalidate()`` during a load detaches that load: its callers still get
    its result, but the result is not kept and the next ``get()`` loads anew.
    """

    def __init__(self, loader: Callable[[], Awaitable[T]]) -> None:
        self._loader = loader
        self._value: Optional[T] = None
        self._loaded = False
        self._pending: Optional[asyncio.Future] = None
        self._generation = 0

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def get(self) -> T:
        if self._loaded:
            return self._value  # type: ignore[return-value]
        if self._pending is not None:
            _logger.debug("LazyLoader: joining in-flight load")
            return await asyncio.shield(self._pending)

        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending = future
        generation = self._generation
        try:
            value = await self._loader()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # mark retrieved so an unobserved failure is not reported by the loop
            future.exception()
            raise
        else:
            if generation == self._generation:
                self._value = value
                self._loaded = True
            else:
                _logger.debug("LazyLoader: discarding result invalidated mid-load")
            future.set_result(value)
            return value
        finally:
            if self._pending is future:
                self._pending = None

    def invalidate(self) -> None:
        self._generation += 1
        self._value = None
        self._loaded = False
        self._pending = None
