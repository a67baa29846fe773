"""AsyncResult: a deferred Result that never raises.

AsyncResult wraps an awaitable producing a Result and re-exposes the Result
combinators, so async chains compose without intermediate awaits. Every
combinator returns a new AsyncResult; the receiver is never mutated.

Any exception raised while producing the Result, or inside a continuation
passed to a combinator, is caught at that boundary and becomes a Fail.
Awaiting an AsyncResult therefore always yields a Result.

The computation is lazy: nothing runs until the first await. It is also
memoised, so every consumer awaiting the same AsyncResult observes the same
Result and the underlying work runs once.

Example:
    ```python
    async def fetch_user(user_id: int) -> Result[User, str]:
        ...

    result = await (
        AsyncResult(fetch_user(1))
        .flat_map(validate_user)
        .map_async(render_profile)
    )
    ```
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Awaitable, Callable, Generator, Iterable
from typing import TYPE_CHECKING, Any, cast

import anyio

from monadkit._internal.lift import lift_result, lift_value, resolve
from monadkit._internal.sync import SharedAwaitable
from monadkit.errors import InvalidState
from monadkit.observable import first_result
from monadkit.result import Fail, Ok, Result

if TYPE_CHECKING:
    from monadkit.maybe import Maybe
    from monadkit.observable import Observable

__all__ = ['AsyncResult']

type ResultLike[T, E] = Result[T, E] | Awaitable[Result[T, E]]

_INTERRUPTED = 'AsyncResult source was cancelled before it resolved'


def _single_use[R: Result[Any, Any]](drive: Callable[[], Awaitable[R]]) -> Callable[[], Awaitable[R]]:
    """Guard a factory whose source can only be awaited once.

    A second call means the first drive was cancelled midway and the source
    cannot be resumed; it resolves to Fail(InvalidState) instead.
    """
    started = False

    async def run() -> R:
        nonlocal started
        if started:
            return Fail(InvalidState(_INTERRUPTED))  # type: ignore[return-value]
        started = True
        return await drive()

    return run


class AsyncResult[T, E]:
    """Deferred, non-throwing Result.

    Note:
        Only `Exception` subclasses are turned into Fail. Cancellation,
        `KeyboardInterrupt` and `SystemExit` propagate to the awaiter.

    Example:
        ```python
        async def main():
            result = await AsyncResult.ok(21).map(lambda x: x * 2)
            assert result == Ok(42)
        ```
    """

    __slots__ = ('_shared',)

    def __init__(self, awaitable: Awaitable[Result[T, E]]) -> None:
        """Create an AsyncResult from an awaitable producing a Result.

        Args:
            awaitable: Any awaitable (coroutine, task, future, AsyncResult)
                producing a Result[T, E]. If it raises, the AsyncResult
                resolves to Fail(exception). If the first await is
                cancelled while it runs, the AsyncResult resolves to
                Fail(InvalidState) from then on.
        """

        def drive() -> Awaitable[Result[T, E]]:
            return lift_result('AsyncResult', lambda: awaitable)

        # another AsyncResult can be awaited again, anything else only once
        factory = drive if isinstance(awaitable, AsyncResult) else _single_use(drive)
        self._shared: SharedAwaitable[Result[T, E]] = SharedAwaitable(factory)

    @classmethod
    def _deferred(cls, factory: Callable[[], Awaitable[Result[T, E]]]) -> AsyncResult[T, E]:
        """Build from a factory of a non-raising awaitable, called on first await."""
        instance = cls.__new__(cls)
        instance._shared = SharedAwaitable(factory)
        return instance

    def __await__(self) -> Generator[Any, Any, Result[T, E]]:
        """Await the underlying Result."""
        return self._shared.__await__()

    # -----------------------------------------------------------------
    # Constructors and aggregation
    # -----------------------------------------------------------------

    @classmethod
    def ok(cls, value: T) -> AsyncResult[T, E]:
        """Create an AsyncResult resolving to Ok(value)."""
        return cls.from_result(Ok(value))

    @classmethod
    def fail(cls, error: E) -> AsyncResult[T, E]:
        """Create an AsyncResult resolving to Fail(error)."""
        return cls.from_result(Fail(error))

    @classmethod
    def from_result(cls, result: ResultLike[T, E]) -> AsyncResult[T, E]:
        """Lift a Result (or an awaitable of one) into an AsyncResult."""
        if isinstance(result, Result):
            return cls._deferred(lambda: resolve(result))
        return cls(result)

    @classmethod
    def from_result_awaitable(cls, awaitable: Awaitable[Result[T, E]]) -> AsyncResult[T, E]:
        """Wrap an awaitable that produces a Result; a raise becomes Fail."""
        return cls(awaitable)

    @classmethod
    def from_awaitable(cls, awaitable: Awaitable[T]) -> AsyncResult[T, Any]:
        """Wrap an awaitable of a plain value.

        Resolution becomes Ok(value); a raise becomes Fail(exception).

        Example:
            ```python
            user = await AsyncResult.from_awaitable(client.get_user(1))
            ```
        """
        return cls._deferred(_single_use(lambda: lift_value('from_awaitable', lambda: awaitable)))

    @classmethod
    def from_call(cls, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> AsyncResult[T, Any]:
        """Call `fn(*args, **kwargs)` on the first await and wrap its outcome.

        The awaited return value becomes Ok; a raise, synchronous or from the
        awaitable, becomes Fail. Nothing is called until the AsyncResult is
        awaited. If that await is cancelled, the next one calls `fn` again.

        Example:
            ```python
            pending = AsyncResult.from_call(client.get_user, 1)  # not started yet
            user = await pending
            ```
        """
        name = getattr(fn, '__name__', 'from_call')
        return cls._deferred(lambda: lift_value(name, lambda: fn(*args, **kwargs)))

    @classmethod
    def from_observable(cls, source: Observable[T] | AsyncIterable[T], default_error: E) -> AsyncResult[T, E]:
        """Take the first event of `source`, subscribing on the first await.

        First emission -> Ok, stream error -> Fail(error), empty completion ->
        Fail(default_error).
        """
        return cls._deferred(
            _single_use(lambda: lift_result('from_observable', lambda: first_result(source, default_error)))
        )

    @staticmethod
    def all[U, F](items: Iterable[AsyncResult[U, F] | ResultLike[U, F]]) -> AsyncResult[list[U], F]:
        """Fold items into a single AsyncResult of list, in order.

        Items are awaited one after another. On the first Fail the result
        resolves to it immediately; later items are never awaited, so any
        work they hold is left unstarted rather than cancelled.

        Args:
            items: AsyncResults, Results or awaitables of Results.

        Returns:
            AsyncResult of Ok(list of values) or the first Fail.

        Example:
            ```python
            result = await AsyncResult.all([AsyncResult.ok(1), AsyncResult.ok(2)])
            assert result == Ok([1, 2])
            ```
        """

        async def _all() -> Result[list[U], F]:
            values: list[U] = []
            for item in items:
                current = await resolve(item)
                if isinstance(current, Fail):
                    return current  # type: ignore[return-value]
                values.append(current.value)  # type: ignore[union-attr]
            return Ok(values)

        return AsyncResult._deferred(_single_use(lambda: lift_result('all', _all)))

    @staticmethod
    def sequence[U, F](items: Iterable[AsyncResult[U, F] | ResultLike[U, F]]) -> AsyncResult[list[U], F]:
        """Alias for `AsyncResult.all`."""
        return AsyncResult.all(items)

    # -----------------------------------------------------------------
    # Lifted combinators
    # -----------------------------------------------------------------

    def _then[M, F](
        self,
        combinator: str,
        step: Callable[[Result[T, E]], ResultLike[M, F] | AsyncResult[M, F]],
    ) -> AsyncResult[M, F]:
        """Chain `step` on the resolved Result; anything it raises becomes Fail."""

        async def _step() -> Result[M, F]:
            return await resolve(step(await self._shared))

        return AsyncResult._deferred(lambda: lift_result(combinator, _step))

    def map[M](self, fn: Callable[[T], M]) -> AsyncResult[M, E]:
        """Transform the Ok value; a raise inside `fn` becomes Fail."""
        return self._then('map', lambda r: r.map(fn))

    def map_fail[M](self, fn: Callable[[E], M]) -> AsyncResult[T, M]:
        return self._then('map_fail', lambda r: r.map_fail(fn))

    def flat_map[M](self, fn: Callable[[T], Result[M, E]]) -> AsyncResult[M, E]:
        return self._then('flat_map', lambda r: r.flat_map(fn))

    def flat_map_maybe[M](self, fn: Callable[[T], Maybe[M]], err: E) -> AsyncResult[M, E]:
        return self._then('flat_map_maybe', lambda r: r.flat_map_maybe(fn, err))

    def to_fail_when_ok(self, fn: Callable[[T], E]) -> AsyncResult[T, E]:
        return self._then('to_fail_when_ok', lambda r: r.to_fail_when_ok(fn))

    def to_fail_when_ok_from(self, val: E) -> AsyncResult[T, E]:
        return self._then('to_fail_when_ok_from', lambda r: r.to_fail_when_ok_from(val))

    def recover(self, fn: Callable[[E], T]) -> AsyncResult[T, E]:
        return self._then('recover', lambda r: r.recover(fn))

    def recover_with(self, fn: Callable[[E], ResultLike[T, E] | AsyncResult[T, E]]) -> AsyncResult[T, E]:
        """Replace a Fail with fn(error), which may be a Result or anything awaitable to one."""
        return self._then('recover_with', lambda r: r.recover_with(fn))  # type: ignore[arg-type]

    def or_else(self, fallback: Result[T, E] | AsyncResult[T, E]) -> AsyncResult[T, E]:
        """Resolve to self if Ok, else to `fallback` (awaited only when needed)."""
        return self._then('or_else', lambda r: r.or_else(fallback))  # type: ignore[arg-type]

    def swap(self) -> AsyncResult[E, T]:
        return self._then('swap', lambda r: r.swap())

    def tap_thru(
        self, ok: Callable[[T], Any] | None = None, fail: Callable[[E], Any] | None = None
    ) -> AsyncResult[T, E]:
        """Run the matching handler for its side effect and pass the Result through."""
        return self._then('tap_thru', lambda r: r.tap_thru(ok, fail))

    def tap_ok_thru(self, fn: Callable[[T], Any]) -> AsyncResult[T, E]:
        return self._then('tap_ok_thru', lambda r: r.tap_ok_thru(fn))

    def tap_fail_thru(self, fn: Callable[[E], Any]) -> AsyncResult[T, E]:
        return self._then('tap_fail_thru', lambda r: r.tap_fail_thru(fn))

    def zip_with[U, R](
        self, other: AsyncResult[U, E] | Result[U, E], fn: Callable[[T, U], R]
    ) -> AsyncResult[R, E]:
        """Combine with another (Async)Result.

        Both sides are awaited concurrently. If both are Ok, resolves to
        Ok(fn(a, b)); otherwise to the first Fail by position (self first).

        Args:
            other: An AsyncResult or a Result.
            fn: Combines the two Ok values.

        Returns:
            AsyncResult containing the combined value or the first Fail.
        """
        right_source = other if isinstance(other, AsyncResult) else AsyncResult.from_result(other)

        async def _zipped() -> Result[R, E]:
            left: Result[T, E] | None = None
            right: Result[U, E] | None = None

            async with anyio.create_task_group() as tg:

                async def run_left() -> None:
                    nonlocal left
                    left = await self

                async def run_right() -> None:
                    nonlocal right
                    right = await right_source

                tg.start_soon(run_left)
                tg.start_soon(run_right)

            # the task group only exits once both sides have been assigned
            return cast('Result[T, E]', left).zip_with(cast('Result[U, E]', right), fn)

        return AsyncResult._deferred(lambda: lift_result('zip_with', _zipped))

    def map_async[M](self, fn: Callable[[T], Awaitable[M]]) -> AsyncResult[M, E]:
        """Transform the Ok value with an async function.

        A synchronous raise inside `fn` or a raising awaitable becomes Fail.
        """

        async def _wrap_ok(awaitable: Awaitable[M]) -> Result[M, E]:
            return Ok(await awaitable)

        return self.flat_map_async(lambda value: _wrap_ok(fn(value)))

    def flat_map_async[M](self, fn: Callable[[T], Awaitable[Result[M, E]]]) -> AsyncResult[M, E]:
        """Bind the Ok value to an async function returning a Result.

        A Fail input short-circuits without calling `fn`. A synchronous raise
        inside `fn` or a raising awaitable becomes Fail.

        Example:
            ```python
            async def load(user_id: int) -> Result[User, str]:
                ...

            result = await AsyncResult.ok(1).flat_map_async(load)
            ```
        """
        return self._then('flat_map_async', lambda r: fn(r.value) if isinstance(r, Ok) else r)

    def chain[M](self, fn: Callable[[T], AsyncResult[M, E]]) -> AsyncResult[M, E]:
        """Bind the Ok value to a function returning another AsyncResult.

        A synchronous raise inside `fn` becomes Fail without escaping.
        """
        return self._then('chain', lambda r: fn(r.value) if isinstance(r, Ok) else r)

    def flat_map_observable[M](
        self, fn: Callable[[T], Observable[M] | AsyncIterable[M]], default_error: E
    ) -> AsyncResult[M, E]:
        """Take the first emission of fn(value) as the next Result.

        First emission -> Ok, stream error -> Fail(error), empty completion ->
        Fail(default_error).
        """
        return self._then('flat_map_observable', lambda r: r.flat_map_observable(fn, default_error))

    # -----------------------------------------------------------------
    # Terminators
    # -----------------------------------------------------------------

    async def match[M](self, ok: Callable[[T], M], fail: Callable[[E], M]) -> M:
        """Await the Result and dispatch to the matching handler."""
        return (await self._shared).match(ok, fail)

    async def match_async[M](self, ok: Callable[[T], Awaitable[M]], fail: Callable[[E], Awaitable[M]]) -> M:
        """Like `match`, with handlers returning awaitables."""
        return await (await self._shared).match(ok, fail)

    async def tap(self, ok: Callable[[T], Any] | None = None, fail: Callable[[E], Any] | None = None) -> None:
        (await self._shared).tap(ok, fail)

    async def tap_ok(self, fn: Callable[[T], Any]) -> None:
        (await self._shared).tap_ok(fn)

    async def tap_fail(self, fn: Callable[[E], Any]) -> None:
        (await self._shared).tap_fail(fn)

    async def to_awaitable(self) -> Result[T, E]:
        """Return the underlying Result. Same as `await self`."""
        return await self._shared

    def __repr__(self) -> str:
        return f'AsyncResult({self._shared!r})'
