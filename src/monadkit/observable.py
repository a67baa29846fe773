"""Push-stream capability used by the observable bridges.

Python has no built-in push-stream type, so anything with a
`subscribe(on_next, on_error, on_complete) -> Unsubscribe` method counts as
an Observable. Two small implementations are provided:

- `Stream`: a cold observable driven by a producer function.
- `Subject`: a hot, multicast observable fed by `next`/`error`/`complete`.

`first_result` is the take-one bridge: it resolves with the first emission,
the stream error, or a default error if the stream completes empty. It also
accepts any async iterable (async generators, anyio memory object streams).

Example:
    ```python
    from monadkit.observable import Stream, first_result

    result = await first_result(Stream.of(1, 2, 3), 'empty')
    # Ok(1)
    ```
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Callable
from typing import Any, Protocol, cast, runtime_checkable

import aiologic

from monadkit._config import get_config
from monadkit._logging import get_logger
from monadkit.result import Fail, Ok, Result

__all__ = [
    'Observable',
    'Observer',
    'Stream',
    'Subject',
    'Subscriber',
    'Unsubscribe',
    'connect',
    'first_result',
    'relay',
]

type Unsubscribe = Callable[[], None]


@runtime_checkable
class Observable[T](Protocol):
    """Anything that can be subscribed to with push callbacks."""

    def subscribe(
        self,
        on_next: Callable[[T], Any],
        on_error: Callable[[Any], Any] | None = None,
        on_complete: Callable[[], Any] | None = None,
    ) -> Unsubscribe:
        """Register callbacks and return a function that cancels the subscription."""
        ...


class Observer[T](Protocol):
    """The receiving side handed to a Stream producer."""

    def next(self, value: T) -> None: ...

    def error(self, error: Any) -> None: ...

    def complete(self) -> None: ...


class Subscriber[T]:
    """Observer that enforces the stream grammar for one subscription.

    After `error`, `complete` or `unsubscribe` the subscriber is closed and
    ignores every further event. Attached teardowns run exactly once, in
    the order they were attached.
    """

    __slots__ = ('_closed', '_lock', '_on_complete', '_on_error', '_on_next', '_teardowns')

    def __init__(
        self,
        on_next: Callable[[T], Any],
        on_error: Callable[[Any], Any] | None = None,
        on_complete: Callable[[], Any] | None = None,
    ) -> None:
        self._on_next = on_next
        self._on_error = on_error
        self._on_complete = on_complete
        self._closed = False
        self._teardowns: list[Unsubscribe] = []
        self._lock = aiologic.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def next(self, value: T) -> None:
        if not self._closed:
            self._on_next(value)

    def error(self, error: Any) -> None:
        if not self._close():
            return
        try:
            if self._on_error is not None:
                self._on_error(error)
            else:
                get_logger(__name__).warning('unhandled_stream_error', error=repr(error))
        finally:
            self._release()

    def complete(self) -> None:
        if not self._close():
            return
        try:
            if self._on_complete is not None:
                self._on_complete()
        finally:
            self._release()

    def attach(self, teardown: Unsubscribe | None) -> None:
        """Register a teardown; run it now if already closed."""
        if teardown is None:
            return
        with self._lock:
            if not self._closed:
                self._teardowns.append(teardown)
                return
        teardown()

    def unsubscribe(self) -> None:
        self._close()
        self._release()

    def _close(self) -> bool:
        with self._lock:
            if self._closed:
                return False
            self._closed = True
            return True

    def _release(self) -> None:
        with self._lock:
            teardowns, self._teardowns = self._teardowns, []
        for teardown in teardowns:
            teardown()


class Stream[T]:
    """Cold observable: every subscription runs the producer anew.

    The producer receives a `Subscriber` and may return a teardown callable,
    which runs once when the subscription ends (terminal event or
    unsubscribe). A producer that raises errors the subscription instead.

    A synchronous producer should stop once `subscriber.closed` is true;
    that is how a consumer that unsubscribes mid-emission halts it.

    Examples:
        >>> seen = []
        >>> _ = Stream.of(1, 2).map(lambda x: x * 10).subscribe(seen.append)
        >>> seen
        [10, 20]
    """

    __slots__ = ('_producer',)

    def __init__(self, producer: Callable[[Subscriber[T]], Unsubscribe | None]) -> None:
        self._producer = producer

    def subscribe(
        self,
        on_next: Callable[[T], Any],
        on_error: Callable[[Any], Any] | None = None,
        on_complete: Callable[[], Any] | None = None,
    ) -> Unsubscribe:
        return self.subscribe_with(Subscriber(on_next, on_error, on_complete))

    def subscribe_with(self, subscriber: Subscriber[T]) -> Unsubscribe:
        """Run the producer against an existing Subscriber.

        Teardowns attached to `subscriber` beforehand already apply while the
        producer runs, so unsubscribing from inside `on_next` closes it before
        the next emission.
        """
        try:
            teardown = self._producer(subscriber)
        except Exception as exc:
            subscriber.error(exc)
        else:
            subscriber.attach(teardown)
        return subscriber.unsubscribe

    @classmethod
    def of(cls, *values: T) -> Stream[T]:
        """Emit `values` in order, then complete."""

        def produce(subscriber: Subscriber[T]) -> None:
            for value in values:
                if subscriber.closed:
                    return
                subscriber.next(value)
            subscriber.complete()

        return cls(produce)

    @classmethod
    def throw(cls, error: Any) -> Stream[Any]:
        """Error immediately with `error`."""

        def produce(subscriber: Subscriber[Any]) -> None:
            subscriber.error(error)

        return cls(produce)

    @classmethod
    def empty(cls) -> Stream[Any]:
        """Complete immediately without emitting."""

        def produce(subscriber: Subscriber[Any]) -> None:
            subscriber.complete()

        return cls(produce)

    @classmethod
    def never(cls) -> Stream[Any]:
        """Never emit and never terminate."""
        return cls(lambda _: None)

    def map[U](self, fn: Callable[[T], U]) -> Stream[U]:
        """Transform each emission; a raise inside `fn` errors the stream."""

        def forward(value: T, subscriber: Subscriber[U]) -> None:
            try:
                mapped = fn(value)
            except Exception as exc:
                subscriber.error(exc)
                return
            subscriber.next(mapped)

        return relay(self, forward)

    def __repr__(self) -> str:
        return f'Stream({self._producer!r})'


class Subject[T]:
    """Hot multicast observable.

    Values pushed with `next` reach every current subscriber. After `error`
    or `complete` the subject is stopped: later subscribers receive the
    terminal event immediately and later pushes are ignored.

    Example:
        ```python
        subject = Subject[int]()
        seen = []
        subject.subscribe(seen.append)
        subject.next(7)
        assert seen == [7]
        ```
    """

    __slots__ = ('_lock', '_subscribers', '_terminal')

    def __init__(self) -> None:
        self._lock = aiologic.Lock()
        self._subscribers: list[Subscriber[T]] = []
        self._terminal: Callable[[Subscriber[T]], None] | None = None

    @property
    def observed(self) -> bool:
        """True while at least one subscription is active."""
        return bool(self._subscribers)

    def subscribe(
        self,
        on_next: Callable[[T], Any],
        on_error: Callable[[Any], Any] | None = None,
        on_complete: Callable[[], Any] | None = None,
    ) -> Unsubscribe:
        return self.subscribe_with(Subscriber(on_next, on_error, on_complete))

    def subscribe_with(self, subscriber: Subscriber[T]) -> Unsubscribe:
        """Register an existing Subscriber, or replay the terminal event to it."""
        with self._lock:
            terminal = self._terminal
            if terminal is None:
                self._subscribers.append(subscriber)
        if terminal is not None:
            terminal(subscriber)
        else:
            subscriber.attach(lambda: self._remove(subscriber))
        return subscriber.unsubscribe

    def next(self, value: T) -> None:
        with self._lock:
            targets = [] if self._terminal is not None else list(self._subscribers)
        for subscriber in targets:
            subscriber.next(value)

    def error(self, error: Any) -> None:
        self._stop(lambda subscriber: subscriber.error(error))

    def complete(self) -> None:
        self._stop(Subscriber.complete)

    def _stop(self, terminal: Callable[[Subscriber[T]], None]) -> None:
        with self._lock:
            if self._terminal is not None:
                return
            self._terminal = terminal
            targets, self._subscribers = self._subscribers, []
        for subscriber in targets:
            terminal(subscriber)

    def _remove(self, subscriber: Subscriber[T]) -> None:
        with self._lock:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)


def connect[T](source: Observable[T], subscriber: Subscriber[T]) -> None:
    """Feed `source` into an existing Subscriber.

    Streams and Subjects deliver straight into `subscriber`, so closing it
    stops them even in the middle of a synchronous emission. Any other
    Observable is subscribed with the subscriber's methods and its
    unsubscribe handle is attached once `subscribe` returns.
    """
    if isinstance(source, Stream | Subject):
        source.subscribe_with(subscriber)
        return
    subscriber.attach(source.subscribe(subscriber.next, subscriber.error, subscriber.complete))


def relay[T, U](source: Observable[T], forward: Callable[[T, Subscriber[U]], None]) -> Stream[U]:
    """Derive a Stream that hands every value of `source` to `forward`.

    `forward` receives the value and the downstream Subscriber. Errors and
    completion pass through unchanged, and unsubscribing downstream closes
    the upstream subscription too.
    """

    def produce(subscriber: Subscriber[U]) -> None:
        upstream: Subscriber[T] = Subscriber(
            lambda value: forward(value, subscriber), subscriber.error, subscriber.complete
        )
        subscriber.attach(upstream.unsubscribe)
        connect(source, upstream)

    return Stream(produce)


class _TakeOne[T, E]:
    """Settles on the first event of a subscription and then unsubscribes.

    Callbacks may fire from any thread; the outcome is published through an
    aiologic.Event.
    """

    __slots__ = ('_closed', '_default_error', '_done', '_lock', '_outcome', '_teardown')

    def __init__(self, default_error: E) -> None:
        self._default_error = default_error
        self._done = aiologic.Event()
        self._lock = aiologic.Lock()
        self._outcome: Result[T, E] | None = None
        self._teardown: Unsubscribe | None = None
        self._closed = False

    def on_next(self, value: T) -> None:
        self._settle(Ok(value))

    def on_error(self, error: E) -> None:
        self._settle(Fail(error))

    def on_complete(self) -> None:
        if not self._closed and get_config().trace_conversions:
            get_logger(__name__).debug('stream_completed_empty', default_error=repr(self._default_error))
        self._settle(Fail(self._default_error))

    def attach(self, teardown: Unsubscribe) -> None:
        with self._lock:
            if not self._closed:
                self._teardown = teardown
                return
        teardown()

    def close(self) -> None:
        """Stop listening and release the subscription."""
        with self._lock:
            self._closed = True
            teardown, self._teardown = self._teardown, None
        if teardown is not None:
            teardown()

    async def wait(self) -> Result[T, E]:
        await self._done
        # _done is only set after the outcome is stored
        return cast('Result[T, E]', self._outcome)

    def _settle(self, outcome: Result[T, E]) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._outcome = outcome
            teardown, self._teardown = self._teardown, None
        self._done.set()
        if teardown is not None:
            teardown()


async def first_result[T, E](source: Observable[T] | AsyncIterable[T], default_error: E) -> Result[T, E]:
    """Resolve with the first event of `source` as a Result.

    Args:
        source: An Observable, or any async iterable.
        default_error: Fail payload when the source completes without emitting.

    Returns:
        Ok(first value), Fail(stream error), or Fail(default_error).

    Raises:
        TypeError: If `source` is neither an Observable nor an async iterable.
    """
    if isinstance(source, Observable):
        take: _TakeOne[T, E] = _TakeOne(default_error)
        subscriber: Subscriber[T] = Subscriber(take.on_next, take.on_error, take.on_complete)
        # attached before the source runs so a synchronous producer halts after the first event
        take.attach(subscriber.unsubscribe)
        try:
            connect(source, subscriber)
            return await take.wait()
        finally:
            take.close()

    if isinstance(source, AsyncIterable):
        return await _first_item(source, default_error)

    msg = f'Expected an Observable or an async iterable, got {type(source).__name__}'
    raise TypeError(msg)


async def _first_item[T, E](source: AsyncIterable[T], default_error: E) -> Result[T, E]:
    iterator = aiter(source)
    try:
        value = await anext(iterator)
    except StopAsyncIteration:
        if get_config().trace_conversions:
            get_logger(__name__).debug('stream_completed_empty', default_error=repr(default_error))
        return Fail(default_error)
    except Exception as exc:
        return Fail(exc)  # type: ignore[arg-type]
    finally:
        aclose = getattr(iterator, 'aclose', None)
        if aclose is not None:
            await aclose()
    return Ok(value)
