"""Bridges between Result and awaitables or push streams.

Each bridge has a fixed failure-mapping policy:

- awaitable -> Result: resolution is Ok, a raise is Fail.
- Result -> awaitable: Ok resolves, Fail raises.
- stream -> Result: first emission is Ok, stream error is Fail, empty
  completion is Fail(default_error).
- Result -> stream: Ok emits once and completes, Fail errors.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Awaitable, Callable
from typing import Any

from monadkit._internal.lift import lift_sync, resolve
from monadkit.async_.result import AsyncResult
from monadkit.errors import RejectedError
from monadkit.observable import Observable, Stream, Subscriber, relay
from monadkit.result import Ok, Result

__all__ = [
    'awaitable_to_result',
    'catch_result',
    'observable_to_result',
    'result_to_awaitable',
    'result_to_observable',
    'try_awaitable_to_result',
    'unwrap_result_as_observable',
]


def awaitable_to_result[T](awaitable: Awaitable[T]) -> AsyncResult[T, Any]:
    """Wrap an awaitable: resolution -> Ok(value), raise -> Fail(exception).

    Never raises. A RejectedError is unwrapped to its reason.

    Example:
        ```python
        result = await awaitable_to_result(client.get('/users/1'))
        ```
    """
    return AsyncResult.from_awaitable(awaitable)


def try_awaitable_to_result[T, E](
    awaitable: Awaitable[T],
    error_mapper: Callable[[Any], E],
) -> AsyncResult[T, E]:
    """Like `awaitable_to_result`, with the failure mapped through `error_mapper`.

    Args:
        awaitable: The awaitable to run.
        error_mapper: Turns the raised exception into a domain error.

    Example:
        ```python
        result = await try_awaitable_to_result(fetch(), lambda exc: ApiError(str(exc)))
        ```
    """
    return AsyncResult.from_awaitable(awaitable).map_fail(error_mapper)


async def result_to_awaitable[T, E](result: Result[T, E] | Awaitable[Result[T, E]]) -> T:
    """Leave the Result world: return the Ok value or raise the failure.

    Accepts a Result, an AsyncResult or any awaitable of a Result.

    Raises:
        Exception: The Fail payload itself when it is an exception.
        RejectedError: Wrapping any other Fail payload (see `.reason`).
    """
    current = await resolve(result)
    if isinstance(current, Ok):
        return current.value
    payload = current.unwrap_fail()
    if isinstance(payload, Exception):
        raise payload
    raise RejectedError(payload)


def observable_to_result[T, E](
    source: Observable[T] | AsyncIterable[T],
    default_error: E,
) -> AsyncResult[T, E]:
    """Take the first event of a stream as a Result.

    First emission -> Ok, stream error -> Fail(error), completion without
    emissions -> Fail(default_error). The subscription is released right
    after the first event; async iterators are closed.

    Example:
        ```python
        send, receive = anyio.create_memory_object_stream[int](1)
        await send.send(5)
        assert await observable_to_result(receive, 'closed') == Ok(5)
        ```
    """
    return AsyncResult.from_observable(source, default_error)


def result_to_observable[T, E](result: Result[T, E]) -> Stream[T]:
    """Ok -> emit the value once and complete; Fail -> error with the payload."""
    if isinstance(result, Ok):
        return Stream.of(result.value)
    return Stream.throw(result.unwrap_fail())


def unwrap_result_as_observable[T, E](source: Observable[Result[T, E]]) -> Stream[T]:
    """Map a stream of Results to a stream of Ok values.

    The first Fail errors the output stream with its payload.
    """

    def forward(item: Result[T, E], subscriber: Subscriber[T]) -> None:
        if isinstance(item, Ok):
            subscriber.next(item.value)
        else:
            subscriber.error(item.unwrap_fail())

    return relay(source, forward)


def catch_result[T](fn: Callable[[], T]) -> Result[T, Exception]:
    """Call `fn`; return Ok(value), or Fail(exception) if it raised.

    Examples:
        >>> catch_result(lambda: int('42'))
        Ok(42)
        >>> catch_result(lambda: int('x')).is_fail()
        True
    """
    return lift_sync('catch_result', fn)
