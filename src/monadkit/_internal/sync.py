"""aiologic-backed run-once awaitable.

Python coroutines can only be awaited once, while every consumer of an
AsyncResult must observe the same eventual Result. `SharedAwaitable` builds
its source from a factory on the first await and replays the outcome
afterwards. No coroutine exists before that first await.

aiologic provides synchronization primitives that work across asyncio,
trio and threads, so the replay is safe regardless of which backend awaits.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Generator
from typing import Any, cast

import aiologic

__all__ = ['SharedAwaitable']


class SharedAwaitable[T]:
    """An awaitable whose outcome is produced at most once.

    Concurrent awaiters wait on an aiologic.Lock while the first one drives
    `factory()`; later awaiters get the cached outcome without suspending on
    the source again. A raised `Exception` is cached and re-raised the same way.

    If the driving awaiter is cancelled, nothing is cached: the cancellation
    reaches that awaiter only, and the next awaiter calls `factory` again.

    Examples:
        >>> async def compute() -> int:
        ...     return 42
        >>>
        >>> shared = SharedAwaitable(compute)
        >>> await shared
        42
        >>> await shared  # no second run
        42
    """

    __slots__ = ('_error', '_factory', '_is_set', '_lock', '_value')

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        self._lock = aiologic.Lock()
        self._factory = factory
        self._value: T | None = None
        self._error: Exception | None = None
        self._is_set = False

    def is_set(self) -> bool:
        """Check if the source has produced its outcome."""
        return self._is_set

    async def get(self) -> T:
        """Return the outcome, driving the source on first use."""
        if not self._is_set:
            async with self._lock:
                if not self._is_set:
                    try:
                        self._value = await self._factory()
                    except Exception as exc:
                        self._error = exc
                    self._is_set = True

        if self._error is not None:
            raise self._error
        return cast('T', self._value)

    def __await__(self) -> Generator[Any, Any, T]:
        return self.get().__await__()

    def __repr__(self) -> str:
        if not self._is_set:
            return 'SharedAwaitable(<pending>)'
        if self._error is not None:
            return f'SharedAwaitable(error={self._error!r})'
        return f'SharedAwaitable({self._value!r})'
