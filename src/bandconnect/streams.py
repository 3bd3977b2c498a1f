"""Observable state holders with ordered, buffered delivery to each subscriber."""

from __future__ import annotations

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from functools import partial
from typing import Any, AsyncIterator, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

_MISSING = object()


class Subscription:
    """A single subscriber's delivery queue.

    Values are enqueued under the owning stream's lock, so the queue order is
    the commit order. Draining happens outside that lock; a callback that
    mutates the stream again only enqueues, and the outer drain loop picks the
    new value up once the current callback returns.
    """

    def __init__(self, callback: Callable[[Any], None], on_close: Callable | None = None):
        self._callback = callback
        self._on_close = on_close
        self._pending: deque = deque()
        self._lock = threading.Lock()
        self._draining = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _enqueue(self, value: Any) -> None:
        with self._lock:
            if not self._closed:
                self._pending.append(value)

    def _drain(self) -> None:
        with self._lock:
            if self._draining:
                return
            self._draining = True
        while True:
            with self._lock:
                if self._closed or not self._pending:
                    self._draining = False
                    return
                value = self._pending.popleft()
            try:
                self._callback(value)
            except Exception:
                logger.exception("Subscriber callback failed")

    def close(self) -> None:
        """Stop delivery. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._pending.clear()
        if self._on_close:
            self._on_close(self)

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class CompositeSubscription:
    """Groups the subscriptions behind a combined stream."""

    def __init__(self, subscriptions: list[Subscription]):
        self._subscriptions = subscriptions

    @property
    def closed(self) -> bool:
        return all(s.closed for s in self._subscriptions)

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.close()

    def __enter__(self) -> CompositeSubscription:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class Stream(ABC, Generic[T]):
    """Read side of a live value: current snapshot plus push notifications."""

    @property
    @abstractmethod
    def value(self) -> T:
        """Current snapshot."""
        ...

    @abstractmethod
    def subscribe(self, callback: Callable[[T], None]):
        """Deliver the current value immediately, then every committed change."""
        ...

    def map(self, fn: Callable[[T], R]) -> DerivedStream[R]:
        return DerivedStream(self, fn)

    async def watch(self) -> AsyncIterator[T]:
        """Async iteration over the same emissions ``subscribe`` delivers."""
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        subscription = self.subscribe(
            lambda value: loop.call_soon_threadsafe(queue.put_nowait, value)
        )
        try:
            while True:
                yield await queue.get()
        finally:
            subscription.close()


class StateStream(Stream[T]):
    """Mutable holder; every ``set`` replaces the whole value."""

    def __init__(self, initial: T):
        self._value = initial
        self._lock = threading.RLock()
        self._subscriptions: list[Subscription] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        with self._lock:
            targets = self._commit(value)
        self._deliver(targets)

    def update(self, fn: Callable[[T], T]) -> T:
        """Atomic read-modify-write. Returns the new value."""
        with self._lock:
            new_value = fn(self._value)
            targets = self._commit(new_value)
        self._deliver(targets)
        return new_value

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        subscription = Subscription(callback, on_close=self._remove)
        with self._lock:
            self._subscriptions.append(subscription)
            subscription._enqueue(self._value)
        subscription._drain()
        return subscription

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def _commit(self, value: T) -> list[Subscription]:
        self._value = value
        targets = list(self._subscriptions)
        for subscription in targets:
            subscription._enqueue(value)
        return targets

    @staticmethod
    def _deliver(targets: list[Subscription]) -> None:
        for subscription in targets:
            subscription._drain()

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)


class DerivedStream(Stream[R]):
    """Projection of another stream, recomputed at delivery time."""

    def __init__(self, source: Stream, fn: Callable[[Any], R]):
        self._source = source
        self._fn = fn

    @property
    def value(self) -> R:
        return self._fn(self._source.value)

    def subscribe(self, callback: Callable[[R], None]):
        return self._source.subscribe(lambda value: callback(self._fn(value)))


class CombinedStream(Stream[R]):
    """Combines the latest value of several streams.

    Emits once every source has delivered at least one value, then on each
    emission of any source.
    """

    def __init__(self, sources: tuple[Stream, ...], fn: Callable[..., R]):
        self._sources = sources
        self._fn = fn

    @property
    def value(self) -> R:
        return self._fn(*(source.value for source in self._sources))

    def subscribe(self, callback: Callable[[R], None]) -> CompositeSubscription:
        latest = [_MISSING] * len(self._sources)
        lock = threading.Lock()
        # Combined values are queued under the lock, so delivery order matches
        # the order in which source emissions were recorded.
        output = Subscription(callback)

        def on_value(index: int, value: Any) -> None:
            with lock:
                latest[index] = value
                if any(item is _MISSING for item in latest):
                    return
                output._enqueue(self._fn(*latest))
            output._drain()

        return CompositeSubscription([
            *(
                source.subscribe(partial(on_value, index))
                for index, source in enumerate(self._sources)
            ),
            output,
        ])


def combine(*streams: Stream, fn: Callable[..., R]) -> CombinedStream[R]:
    """Derived stream over several sources, e.g. users plus conversations."""
    return CombinedStream(streams, fn)
