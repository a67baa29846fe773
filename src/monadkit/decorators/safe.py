"""@safe and @safe_async: turn raising functions into Result-returning ones."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, overload

import wrapt

from monadkit._internal.lift import lift_sync, trace_conversion
from monadkit.async_.result import AsyncResult
from monadkit.result import Fail, Ok, Result

__all__ = ['safe', 'safe_async']


@overload
def safe[**P, T](func: Callable[P, T]) -> Callable[P, Result[T, Exception]]: ...


@overload
def safe[**P, T, X: Exception](
    func: None = None,
    *,
    exceptions: tuple[type[X], ...],
) -> Callable[[Callable[P, T]], Callable[P, Result[T, X]]]: ...


def safe[**P, T](
    func: Callable[P, T] | None = None,
    *,
    exceptions: tuple[type[Exception], ...] | None = None,
) -> Any:
    """Decorator that returns Ok(value) or Fail(exception) instead of raising.

    Usable bare or with an exception filter:
        @safe
        def parse(raw): ...

        @safe(exceptions=(ValueError, KeyError))
        def lookup(key): ...

    With `exceptions`, only the listed types become Fail; anything else
    propagates unchanged.

    Args:
        func: The function to wrap (when used without parentheses).
        exceptions: Exception types to convert. Defaults to (Exception,).

    Example:
        ```python
        @safe
        def ratio(a: int, b: int) -> float:
            return a / b

        ratio(1, 0)
        # Fail(ZeroDivisionError('division by zero'))
        ```
    """

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[..., T],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Result[T, Any]:
        if exceptions is None:
            return lift_sync(wrapped.__name__, lambda: wrapped(*args, **kwargs))
        try:
            value = wrapped(*args, **kwargs)
        except exceptions as exc:
            trace_conversion(wrapped.__name__, exc)
            return Fail(exc)
        return Ok(value)

    if func is not None:
        return wrapper(func)
    return wrapper


@wrapt.decorator
def safe_async(
    wrapped: Callable[..., Awaitable[Any]],
    instance: Any,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> AsyncResult[Any, Exception]:
    """Decorator that makes an async function return an AsyncResult.

    Calling the decorated function does not start it: the coroutine runs on
    the first await of the returned AsyncResult. Its return value becomes Ok
    and any exception becomes Fail.

    Example:
        ```python
        @safe_async
        async def fetch(url: str) -> bytes:
            return await http_get(url)

        result = await fetch('https://example.com').map(len)
        ```
    """
    return AsyncResult.from_call(wrapped, *args, **kwargs)
