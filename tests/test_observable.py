"""Tests for the push-stream capability and the take-one bridge."""

import anyio
import pytest

from monadkit import Fail, Ok, Result
from monadkit.observable import Observable, Stream, Subject, Subscriber, first_result


class TestStream:
    """Tests for the cold Stream."""

    def test_of_emits_then_completes(self):
        events: list[object] = []
        Stream.of(1, 2).subscribe(events.append, events.append, lambda: events.append('done'))
        assert events == [1, 2, 'done']

    def test_throw(self):
        errors: list[object] = []
        Stream.throw('bad').subscribe(lambda v: None, errors.append)
        assert errors == ['bad']

    def test_empty_and_never(self):
        events: list[str] = []
        Stream.empty().subscribe(events.append, events.append, lambda: events.append('done'))
        Stream.never().subscribe(events.append, events.append, lambda: events.append('never'))
        assert events == ['done']

    def test_map(self):
        seen: list[int] = []
        Stream.of(1, 2).map(lambda v: v * 10).subscribe(seen.append)
        assert seen == [10, 20]

    def test_map_raise_errors_stream(self):
        seen: list[object] = []
        errors: list[object] = []
        Stream.of(1, 0, 2).map(lambda v: 10 // v).subscribe(seen.append, errors.append)
        assert seen == [10]
        assert len(errors) == 1
        assert isinstance(errors[0], ZeroDivisionError)

    def test_producer_raise_becomes_error(self):
        def producer(subscriber):
            raise OSError('no source')

        errors: list[object] = []
        Stream(producer).subscribe(lambda v: None, errors.append)
        assert isinstance(errors[0], OSError)

    def test_no_events_after_terminal(self):
        def producer(subscriber):
            subscriber.next(1)
            subscriber.complete()
            subscriber.next(2)
            subscriber.error('late')

        events: list[object] = []
        Stream(producer).subscribe(events.append, events.append, lambda: events.append('done'))
        assert events == [1, 'done']

    def test_teardown_runs_once(self):
        teardowns: list[int] = []
        emit: list = []

        def producer(subscriber):
            emit.append(subscriber)
            return lambda: teardowns.append(1)

        unsubscribe = Stream(producer).subscribe(lambda v: None)
        unsubscribe()
        unsubscribe()
        emit[0].complete()
        assert teardowns == [1]

    def test_unsubscribe_stops_delivery(self):
        holder: list = []
        seen: list[int] = []
        unsubscribe = Stream(lambda s: holder.append(s)).subscribe(seen.append)
        holder[0].next(1)
        unsubscribe()
        holder[0].next(2)
        assert seen == [1]

    def test_is_observable(self):
        assert isinstance(Stream.of(1), Observable)
        assert isinstance(Subject(), Observable)

    def test_subscribe_with_prebuilt_subscriber(self):
        seen: list[int] = []
        subscriber: Subscriber[int] = Subscriber(seen.append)
        subscriber.attach(lambda: seen.append(-1))

        unsubscribe = Stream.of(1, 2).subscribe_with(subscriber)
        unsubscribe()
        assert seen == [1, 2, -1]

    def test_map_unsubscribe_reaches_upstream(self):
        released: list[str] = []
        holder: list = []

        def producer(subscriber):
            holder.append(subscriber)
            return lambda: released.append('upstream')

        unsubscribe = Stream(producer).map(str).subscribe(lambda v: None)
        unsubscribe()
        assert released == ['upstream']
        assert holder[0].closed

    def test_teardowns_run_in_attach_order(self):
        order: list[str] = []
        subscriber: Subscriber[int] = Subscriber(lambda v: None)
        subscriber.attach(lambda: order.append('first'))
        subscriber.attach(lambda: order.append('second'))
        subscriber.complete()
        subscriber.unsubscribe()
        assert order == ['first', 'second']


class TestSubject:
    """Tests for the hot Subject."""

    def test_multicast(self):
        subject: Subject[int] = Subject()
        first: list[int] = []
        second: list[int] = []
        subject.subscribe(first.append)
        subject.subscribe(second.append)
        subject.next(1)
        assert first == second == [1]

    def test_late_subscriber_misses_earlier_values(self):
        subject: Subject[int] = Subject()
        subject.next(1)
        seen: list[int] = []
        subject.subscribe(seen.append)
        subject.next(2)
        assert seen == [2]

    def test_terminal_replayed_to_late_subscribers(self):
        subject: Subject[int] = Subject()
        subject.error('closed')
        errors: list[object] = []
        subject.subscribe(lambda v: None, errors.append)
        subject.next(1)
        assert errors == ['closed']

    def test_unsubscribe_removes_observer(self):
        subject: Subject[int] = Subject()
        unsubscribe = subject.subscribe(lambda v: None)
        assert subject.observed
        unsubscribe()
        assert not subject.observed

    def test_complete_releases_subscribers(self):
        subject: Subject[int] = Subject()
        done: list[str] = []
        subject.subscribe(lambda v: None, on_complete=lambda: done.append('done'))
        subject.complete()
        subject.complete()
        assert done == ['done']
        assert not subject.observed


class TestFirstResult:
    """Tests for the take-one bridge."""

    @pytest.mark.asyncio
    async def test_first_emission_only(self):
        assert await first_result(Stream.of(1, 2), 'empty') == Ok(1)

    @pytest.mark.asyncio
    async def test_empty_stream_uses_default_error(self):
        assert await first_result(Stream.empty(), 'empty') == Fail('empty')

    @pytest.mark.asyncio
    async def test_stream_error(self):
        assert await first_result(Stream.throw('bad'), 'empty') == Fail('bad')

    @pytest.mark.asyncio
    async def test_unsubscribes_after_first_emission(self):
        subject: Subject[int] = Subject()

        async def emit_later():
            await anyio.sleep(0.01)
            subject.next(7)
            subject.next(8)

        async with anyio.create_task_group() as tg:
            tg.start_soon(emit_later)
            result = await first_result(subject, 'closed')

        assert result == Ok(7)
        assert not subject.observed

    @pytest.mark.asyncio
    async def test_emission_from_another_thread(self):
        subject: Subject[str] = Subject()
        outcome: list[Result[str, str]] = []

        async def wait_first() -> None:
            outcome.append(await first_result(subject, 'closed'))

        async with anyio.create_task_group() as tg:
            tg.start_soon(wait_first)
            await anyio.sleep(0.01)
            await anyio.to_thread.run_sync(subject.next, 'from thread')

        assert outcome == [Ok('from thread')]

    @pytest.mark.asyncio
    async def test_cancelled_wait_unsubscribes(self):
        subject: Subject[int] = Subject()
        with anyio.move_on_after(0.01):
            await first_result(subject, 'closed')
        assert not subject.observed

    @pytest.mark.asyncio
    async def test_memory_object_stream(self):
        send, receive = anyio.create_memory_object_stream[int](2)
        await send.send(1)
        await send.send(2)
        assert await first_result(receive, 'closed') == Ok(1)

    @pytest.mark.asyncio
    async def test_closed_memory_object_stream(self):
        send, receive = anyio.create_memory_object_stream[int](1)
        await send.aclose()
        assert await first_result(receive, 'closed') == Fail('closed')

    @pytest.mark.asyncio
    async def test_async_generator_is_closed(self):
        closed: list[bool] = []

        async def numbers():
            try:
                yield 1
                yield 2
            finally:
                closed.append(True)

        assert await first_result(numbers(), 'empty') == Ok(1)
        assert closed == [True]

    @pytest.mark.asyncio
    async def test_async_generator_error(self):
        async def failing():
            raise ValueError('source down')
            yield  # pragma: no cover

        result = await first_result(failing(), 'empty')
        assert isinstance(result.unwrap_fail(), ValueError)

    @pytest.mark.asyncio
    async def test_unsupported_source(self):
        with pytest.raises(TypeError):
            await first_result([1, 2], 'empty')  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_upstream_stops_after_first_value(self):
        seen: list[int] = []

        def record(value: int) -> int:
            seen.append(value)
            return value

        assert await first_result(Stream.of(1, 2, 3).map(record), 'empty') == Ok(1)
        assert seen == [1]

    @pytest.mark.asyncio
    async def test_unbounded_producer_halts(self):
        emitted: list[int] = []

        def count_up(subscriber):
            while not subscriber.closed and len(emitted) < 1000:
                emitted.append(len(emitted))
                subscriber.next(emitted[-1])

        with anyio.fail_after(1):
            assert await first_result(Stream(count_up).map(lambda v: v * 2), 'empty') == Ok(0)
        assert emitted == [0]

    @pytest.mark.asyncio
    async def test_foreign_observable_closed_after_first_value(self):
        class Pusher:
            def __init__(self):
                self.released = False

            def subscribe(self, on_next, on_error=None, on_complete=None):
                on_next('a')
                on_next('b')
                return self.release

            def release(self):
                self.released = True

        source = Pusher()
        assert await first_result(source, 'empty') == Ok('a')
        assert source.released
