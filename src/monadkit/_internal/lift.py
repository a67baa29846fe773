"""Boundary helpers that run caller-supplied continuations and lift raises into Fail.

Every combinator that crosses an asynchronous boundary goes through
`lift_value` or `lift_result`, so the conversion of a raised exception into a
Fail lives in exactly one place.

Only `Exception` subclasses are converted. `BaseException` subclasses such as
task cancellation, `KeyboardInterrupt` and `SystemExit` always propagate.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from monadkit._config import get_config
from monadkit._logging import get_logger
from monadkit.errors import RejectedError
from monadkit.result import Fail, Ok, Result

__all__ = ['failure_payload', 'lift_result', 'lift_sync', 'lift_value', 'resolve', 'trace_conversion']


def trace_conversion(combinator: str, exc: BaseException) -> None:
    """Log an exception that was converted into a Fail, when tracing is enabled."""
    if get_config().trace_conversions:
        get_logger(__name__).debug(
            'continuation_raised',
            combinator=combinator,
            error=repr(exc),
            error_type=type(exc).__name__,
        )


def failure_payload(exc: Exception) -> Any:
    """Fail payload for a caught exception.

    A RejectedError is unwrapped to its reason, so a Fail that was turned into
    a raising awaitable comes back with the original payload.
    """
    if isinstance(exc, RejectedError):
        return exc.reason
    return exc


async def resolve[T](value: T | Awaitable[T]) -> T:
    """Await `value` when it is awaitable, otherwise return it as-is."""
    if inspect.isawaitable(value):
        return await value
    return value


async def lift_value[T](combinator: str, thunk: Callable[[], T | Awaitable[T]]) -> Result[T, Any]:
    """Run `thunk`, await its outcome and wrap it in Ok; any raise becomes Fail.

    Args:
        combinator: Name reported in the conversion trace.
        thunk: Zero-argument callable producing a value or an awaitable of one.

    Returns:
        Ok(value) on success, Fail(payload) if the thunk or its awaitable raised (see failure_payload).
    """
    try:
        value = await resolve(thunk())
    except Exception as exc:
        trace_conversion(combinator, exc)
        return Fail(failure_payload(exc))
    return Ok(value)


async def lift_result[T, E](
    combinator: str,
    thunk: Callable[[], Result[T, E] | Awaitable[Result[T, E]]],
) -> Result[T, E]:
    """Run `thunk` producing a Result (or an awaitable of one); any raise becomes Fail.

    Args:
        combinator: Name reported in the conversion trace.
        thunk: Zero-argument callable producing a Result, an awaitable of a
            Result, or an AsyncResult.

    Returns:
        The produced Result, or Fail(payload) if anything raised.
    """
    try:
        return await resolve(thunk())
    except Exception as exc:
        trace_conversion(combinator, exc)
        return Fail(failure_payload(exc))


def lift_sync[T](combinator: str, thunk: Callable[[], T]) -> Result[T, Exception]:
    """Synchronous counterpart of `lift_value`."""
    try:
        value = thunk()
    except Exception as exc:
        trace_conversion(combinator, exc)
        return Fail(failure_payload(exc))
    return Ok(value)
