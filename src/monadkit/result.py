"""Result type: Ok | Fail for explicit, non-throwing error handling.

A Result holds exactly one of a success value (`Ok`) or an error value
(`Fail`). Every combinator returns a new Result; nothing is mutated. Errors
propagate through `map`/`flat_map` chains by short-circuiting: on a Fail,
the continuation is never invoked.

Example:
    ```python
    from monadkit import Fail, Ok, ok

    ok(2).map(lambda n: n + 1).flat_map(lambda x: ok(str(x)))
    # Ok('3')

    match parse(raw):
        case Ok(value):
            use(value)
        case Fail(error):
            report(error)
    ```

The `*_awaitable` and `*_observable` methods are coroutines: they cross an
asynchronous boundary and convert any exception raised by the caller's
continuation into a Fail instead of letting it escape.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, NoReturn

from monadkit.errors import InvalidStateError

if TYPE_CHECKING:
    from monadkit.maybe import Maybe
    from monadkit.observable import Observable

__all__ = ['Fail', 'Ok', 'Result', 'fail', 'ok', 'result']


class Result[T, E](ABC):
    """Base of the closed `Ok | Fail` sum type.

    `Result` cannot be subclassed outside this module; the only variants are
    `Ok` and `Fail`. It also hosts the static constructors and aggregation
    helpers.
    """

    __slots__ = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            msg = f'Result is sealed: cannot subclass it as {cls.__qualname__}'
            raise TypeError(msg)

    # -----------------------------------------------------------------
    # Constructors and aggregation
    # -----------------------------------------------------------------

    @staticmethod
    def ok[U, F](value: U) -> Result[U, F]:
        """Create an Ok holding `value`."""
        return Ok(value)

    @staticmethod
    def fail[U, F](error: F) -> Result[U, F]:
        """Create a Fail holding `error`."""
        return Fail(error)

    @staticmethod
    async def from_awaitable[U](awaitable: Awaitable[U]) -> Result[U, Any]:
        """Await `awaitable`: its value becomes Ok, a raised exception becomes Fail.

        Never raises (except for cancellation).

        Example:
            ```python
            result = await Result.from_awaitable(fetch_user(1))
            ```
        """
        from monadkit._internal.lift import lift_value

        return await lift_value('from_awaitable', lambda: awaitable)

    @staticmethod
    async def from_observable[U, F](
        source: Observable[U] | AsyncIterable[U],
        default_error: F,
    ) -> Result[U, F]:
        """Take the first emission of `source` as a Result.

        The first emission becomes Ok, a stream error becomes Fail(error), and
        completion without any emission becomes Fail(default_error). The
        subscription is cancelled after the first emission.

        Args:
            source: An Observable or any async iterable (async generator,
                anyio memory object receive stream, ...).
            default_error: Error used when the stream completes empty.
        """
        from monadkit._internal.lift import lift_result
        from monadkit.observable import first_result

        return await lift_result('from_observable', lambda: first_result(source, default_error))

    @staticmethod
    def sequence[U, F](results: Iterable[Result[U, F]]) -> Result[list[U], F]:
        """Fold Results into a Result of list.

        Short-circuits on the first Fail in iteration order and returns that
        Fail unchanged; later items are not inspected.

        Examples:
            >>> Result.sequence([Ok(1), Ok(2), Ok(3)])
            Ok([1, 2, 3])
            >>> Result.sequence([Ok(1), Fail('boom'), Fail('later')])
            Fail('boom')
            >>> Result.sequence([])
            Ok([])
        """
        values: list[U] = []
        for item in results:
            if isinstance(item, Fail):
                return item  # type: ignore[return-value]
            values.append(item.value)  # type: ignore[union-attr]
        return Ok(values)

    @staticmethod
    def all[U, F](results: Iterable[Result[U, F]]) -> Result[list[U], F]:
        """Alias for `Result.sequence`."""
        return Result.sequence(results)

    # -----------------------------------------------------------------
    # Variant interface
    # -----------------------------------------------------------------

    @abstractmethod
    def is_ok(self) -> bool:
        """Return True for Ok."""

    @abstractmethod
    def is_fail(self) -> bool:
        """Return True for Fail."""

    @abstractmethod
    def unwrap(self) -> T:
        """Return the Ok value; raise InvalidStateError on Fail."""

    @abstractmethod
    def unwrap_or(self, default: T) -> T:
        """Return the Ok value, else `default`."""

    @abstractmethod
    def unwrap_fail(self) -> E:
        """Return the Fail value; raise InvalidStateError on Ok."""

    @abstractmethod
    def maybe_ok(self) -> Maybe[T]:
        """Project the Ok value into a Maybe."""

    @abstractmethod
    def maybe_fail(self) -> Maybe[E]:
        """Project the Fail value into a Maybe."""

    @abstractmethod
    def match[M](self, ok: Callable[[T], M], fail: Callable[[E], M]) -> M:
        """Dispatch to `ok` or `fail` and return the handler's result."""

    @abstractmethod
    def map[M](self, fn: Callable[[T], M]) -> Result[M, E]:
        """Transform the Ok value."""

    @abstractmethod
    def map_fail[M](self, fn: Callable[[E], M]) -> Result[T, M]:
        """Transform the Fail value."""

    @abstractmethod
    def flat_map[M](self, fn: Callable[[T], Result[M, E]]) -> Result[M, E]:
        """Bind the Ok value to a Result-returning function."""

    @abstractmethod
    def flat_map_maybe[M](self, fn: Callable[[T], Maybe[M]], err: E) -> Result[M, E]:
        """Bind the Ok value to a Maybe-returning function; Nothing becomes Fail(err)."""

    @abstractmethod
    def to_fail_when_ok(self, fn: Callable[[T], E]) -> Result[T, E]:
        """Turn an Ok into a Fail built from its value."""

    @abstractmethod
    def to_fail_when_ok_from(self, val: E) -> Result[T, E]:
        """Turn an Ok into Fail(val)."""

    @abstractmethod
    def tap(self, ok: Callable[[T], Any] | None = None, fail: Callable[[E], Any] | None = None) -> None:
        """Run the handler matching the variant for its side effect."""

    @abstractmethod
    def tap_ok(self, fn: Callable[[T], Any]) -> None:
        """Run `fn` on the Ok value for its side effect."""

    @abstractmethod
    def tap_fail(self, fn: Callable[[E], Any]) -> None:
        """Run `fn` on the Fail value for its side effect."""

    @abstractmethod
    def tap_thru(
        self, ok: Callable[[T], Any] | None = None, fail: Callable[[E], Any] | None = None
    ) -> Result[T, E]:
        """Like `tap`, but return self to keep chaining."""

    @abstractmethod
    def tap_ok_thru(self, fn: Callable[[T], Any]) -> Result[T, E]:
        """Like `tap_ok`, but return self to keep chaining."""

    @abstractmethod
    def tap_fail_thru(self, fn: Callable[[E], Any]) -> Result[T, E]:
        """Like `tap_fail`, but return self to keep chaining."""

    @abstractmethod
    def recover(self, fn: Callable[[E], T]) -> Result[T, E]:
        """Replace a Fail with Ok(fn(error))."""

    @abstractmethod
    def recover_with(self, fn: Callable[[E], Result[T, E]]) -> Result[T, E]:
        """Replace a Fail with the Result returned by fn(error)."""

    @abstractmethod
    def or_else(self, fallback: Result[T, E]) -> Result[T, E]:
        """Return self if Ok, else `fallback`."""

    @abstractmethod
    def swap(self) -> Result[E, T]:
        """Flip the variant, keeping the held value."""

    @abstractmethod
    def zip_with[U, R](self, other: Result[U, E], fn: Callable[[T, U], R]) -> Result[R, E]:
        """Combine two Oks with `fn`; otherwise the first Fail (self first)."""

    @abstractmethod
    async def flat_map_awaitable[M](self, fn: Callable[[T], Awaitable[M]]) -> Result[M, E]:
        """Await fn(value) into an Ok; raises inside fn become Fail."""

    @abstractmethod
    async def flat_map_observable[M](
        self, fn: Callable[[T], Observable[M] | AsyncIterable[M]], default_error: E
    ) -> Result[M, E]:
        """Take the first emission of fn(value) as a Result."""


@dataclass(slots=True, frozen=True, repr=False)
class Ok[T, E](Result[T, E]):
    """Success variant of Result containing a value of type T.

    Attributes:
        value: The successful result value.

    Examples:
        >>> Ok(42).unwrap()
        42
        >>> Ok(42).map(lambda x: x * 2)
        Ok(84)
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_fail(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self.value

    def unwrap_fail(self) -> NoReturn:
        """Raise since this is Ok.

        Raises:
            InvalidStateError: Always, carrying the Ok value.
        """
        raise InvalidStateError(f'Cannot unwrap a success as a failure: Ok({self.value!r})', self.value)

    def maybe_ok(self) -> Maybe[T]:
        """Some(value), or Nothing when the value is None."""
        from monadkit.maybe import maybe

        return maybe(self.value)

    def maybe_fail(self) -> Maybe[E]:
        from monadkit.maybe import Nothing

        return Nothing

    def match[M](self, ok: Callable[[T], M], fail: Callable[[E], M]) -> M:  # noqa: ARG002
        return ok(self.value)

    def map[M](self, fn: Callable[[T], M]) -> Result[M, E]:
        return Ok(fn(self.value))

    def map_fail[M](self, fn: Callable[[E], M]) -> Result[T, M]:  # noqa: ARG002
        return self  # type: ignore[return-value]

    def flat_map[M](self, fn: Callable[[T], Result[M, E]]) -> Result[M, E]:
        return fn(self.value)

    def flat_map_maybe[M](self, fn: Callable[[T], Maybe[M]], err: E) -> Result[M, E]:
        return fn(self.value).to_result(err)

    def to_fail_when_ok(self, fn: Callable[[T], E]) -> Result[T, E]:
        return Fail(fn(self.value))

    def to_fail_when_ok_from(self, val: E) -> Result[T, E]:
        return Fail(val)

    def tap(self, ok: Callable[[T], Any] | None = None, fail: Callable[[E], Any] | None = None) -> None:  # noqa: ARG002
        if ok is not None:
            ok(self.value)

    def tap_ok(self, fn: Callable[[T], Any]) -> None:
        fn(self.value)

    def tap_fail(self, fn: Callable[[E], Any]) -> None:
        pass

    def tap_thru(
        self, ok: Callable[[T], Any] | None = None, fail: Callable[[E], Any] | None = None
    ) -> Result[T, E]:
        self.tap(ok, fail)
        return self

    def tap_ok_thru(self, fn: Callable[[T], Any]) -> Result[T, E]:
        fn(self.value)
        return self

    def tap_fail_thru(self, fn: Callable[[E], Any]) -> Result[T, E]:  # noqa: ARG002
        return self

    def recover(self, fn: Callable[[E], T]) -> Result[T, E]:  # noqa: ARG002
        return self

    def recover_with(self, fn: Callable[[E], Result[T, E]]) -> Result[T, E]:  # noqa: ARG002
        return self

    def or_else(self, fallback: Result[T, E]) -> Result[T, E]:  # noqa: ARG002
        return self

    def swap(self) -> Result[E, T]:
        return Fail(self.value)

    def zip_with[U, R](self, other: Result[U, E], fn: Callable[[T, U], R]) -> Result[R, E]:
        """Apply `fn` to both values if `other` is Ok, else return `other`."""
        return other.map(lambda b: fn(self.value, b))

    async def flat_map_awaitable[M](self, fn: Callable[[T], Awaitable[M]]) -> Result[M, E]:
        """Await fn(value) and wrap it in Ok.

        A synchronous raise inside `fn` or a raising awaitable becomes
        Fail(exception); nothing escapes.
        """
        from monadkit._internal.lift import lift_value

        return await lift_value('flat_map_awaitable', lambda: fn(self.value))

    async def flat_map_observable[M](
        self, fn: Callable[[T], Observable[M] | AsyncIterable[M]], default_error: E
    ) -> Result[M, E]:
        """Subscribe to fn(value) and take its first emission.

        First emission -> Ok, stream error -> Fail(error), empty completion ->
        Fail(default_error), raise inside `fn` -> Fail(exception).
        """
        from monadkit._internal.lift import lift_result
        from monadkit.observable import first_result

        return await lift_result('flat_map_observable', lambda: first_result(fn(self.value), default_error))

    def __repr__(self) -> str:
        return f'Ok({self.value!r})'


@dataclass(slots=True, frozen=True, repr=False)
class Fail[T, E](Result[T, E]):
    """Failure variant of Result containing an error of type E.

    The error is ordinary data: it is carried, transformed and recovered
    from, never raised by the combinators.

    Attributes:
        error: The failure value.

    Examples:
        >>> Fail('boom').is_fail()
        True
        >>> Fail('boom').unwrap_or(0)
        0
    """

    error: E

    def is_ok(self) -> bool:
        return False

    def is_fail(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raise since this is Fail.

        Raises:
            InvalidStateError: Always, carrying the Fail value.
        """
        raise InvalidStateError(f'Cannot unwrap a failure: Fail({self.error!r})', self.error)

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_fail(self) -> E:
        return self.error

    def maybe_ok(self) -> Maybe[T]:
        from monadkit.maybe import Nothing

        return Nothing

    def maybe_fail(self) -> Maybe[E]:
        """Some(error), or Nothing when the error is None."""
        from monadkit.maybe import maybe

        return maybe(self.error)

    def match[M](self, ok: Callable[[T], M], fail: Callable[[E], M]) -> M:  # noqa: ARG002
        return fail(self.error)

    def map[M](self, fn: Callable[[T], M]) -> Result[M, E]:  # noqa: ARG002
        return self  # type: ignore[return-value]

    def map_fail[M](self, fn: Callable[[E], M]) -> Result[T, M]:
        return Fail(fn(self.error))

    def flat_map[M](self, fn: Callable[[T], Result[M, E]]) -> Result[M, E]:  # noqa: ARG002
        return self  # type: ignore[return-value]

    def flat_map_maybe[M](self, fn: Callable[[T], Maybe[M]], err: E) -> Result[M, E]:  # noqa: ARG002
        return self  # type: ignore[return-value]

    def to_fail_when_ok(self, fn: Callable[[T], E]) -> Result[T, E]:  # noqa: ARG002
        return self

    def to_fail_when_ok_from(self, val: E) -> Result[T, E]:  # noqa: ARG002
        return self

    def tap(self, ok: Callable[[T], Any] | None = None, fail: Callable[[E], Any] | None = None) -> None:  # noqa: ARG002
        if fail is not None:
            fail(self.error)

    def tap_ok(self, fn: Callable[[T], Any]) -> None:
        pass

    def tap_fail(self, fn: Callable[[E], Any]) -> None:
        fn(self.error)

    def tap_thru(
        self, ok: Callable[[T], Any] | None = None, fail: Callable[[E], Any] | None = None
    ) -> Result[T, E]:
        self.tap(ok, fail)
        return self

    def tap_ok_thru(self, fn: Callable[[T], Any]) -> Result[T, E]:  # noqa: ARG002
        return self

    def tap_fail_thru(self, fn: Callable[[E], Any]) -> Result[T, E]:
        fn(self.error)
        return self

    def recover(self, fn: Callable[[E], T]) -> Result[T, E]:
        return Ok(fn(self.error))

    def recover_with(self, fn: Callable[[E], Result[T, E]]) -> Result[T, E]:
        return fn(self.error)

    def or_else(self, fallback: Result[T, E]) -> Result[T, E]:
        return fallback

    def swap(self) -> Result[E, T]:
        return Ok(self.error)

    def zip_with[U, R](self, other: Result[U, E], fn: Callable[[T, U], R]) -> Result[R, E]:  # noqa: ARG002
        return self  # type: ignore[return-value]

    async def flat_map_awaitable[M](self, fn: Callable[[T], Awaitable[M]]) -> Result[M, E]:  # noqa: ARG002
        return self  # type: ignore[return-value]

    async def flat_map_observable[M](
        self, fn: Callable[[T], Observable[M] | AsyncIterable[M]], default_error: E  # noqa: ARG002
    ) -> Result[M, E]:
        return self  # type: ignore[return-value]

    def __repr__(self) -> str:
        return f'Fail({self.error!r})'


def ok[T, E](value: T) -> Result[T, E]:
    """Create an Ok holding `value`."""
    return Ok(value)


def fail[T, E](error: E) -> Result[T, E]:
    """Create a Fail holding `error`."""
    return Fail(error)


def result[T, E](predicate: Callable[[], bool], ok_value: T, fail_value: E) -> Result[T, E]:
    """Build Ok(ok_value) when `predicate()` is true, else Fail(fail_value).

    Example:
        ```python
        result(lambda: user.is_admin, user, 'forbidden')
        ```
    """
    return Ok(ok_value) if predicate() else Fail(fail_value)
