"""In-process publish/subscribe primitives for live state.

``Broadcast`` fans every published value out to all current subscribers in
publish order. ``ObservableState`` additionally keeps the latest value and
replays it to each new subscriber, so a late observer always starts from the
current state.
"""
from __future__ import annotations

import asyncio
from typing import Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")

_CLOSED = object()


class Subscription(Generic[T]):
    """A single observer's view of a broadcast channel.

    Values are queued per subscriber, so a slow consumer never drops or
    reorders updates. Iteration ends once ``close()`` is called.
    """

    def __init__(self, channel: "Broadcast[T]", initial: Iterable[T] = ()):
        self._channel = channel
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        for value in initial:
            self._queue.put_nowait(value)

    def _push(self, value: T) -> None:
        if not self._closed:
            self._queue.put_nowait(value)

    async def get(self) -> T:
        """Wait for the next value. Raises ``StopAsyncIteration`` once closed."""
        return await self.__anext__()

    def close(self) -> None:
        """Unsubscribe. Values queued before the call are still delivered."""
        if self._closed:
            return
        self._closed = True
        self._channel._detach(self)
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> "Subscription[T]":
        return self

    async def __anext__(self) -> T:
        if self._closed and self._queue.empty():
            raise StopAsyncIteration
        value = await self._queue.get()
        if value is _CLOSED:
            raise StopAsyncIteration
        return value

    async def __aenter__(self) -> "Subscription[T]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


class Broadcast(Generic[T]):
    """Fan-out channel delivering every published value to every subscriber."""

    def __init__(self):
        self._subscribers: List[Subscription[T]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, initial: Iterable[T] = ()) -> Subscription[T]:
        subscription = Subscription(self, initial)
        self._subscribers.append(subscription)
        return subscription

    def publish(self, value: T) -> None:
        for subscription in list(self._subscribers):
            subscription._push(value)

    def close(self) -> None:
        """Close every subscription."""
        for subscription in list(self._subscribers):
            subscription.close()

    def _detach(self, subscription: Subscription[T]) -> None:
        try:
            self._subscribers.remove(subscription)
        except ValueError:
            pass


class ObservableState(Broadcast[T]):
    """A current value plus a broadcast of every subsequent change."""

    def __init__(self, initial: T):
        super().__init__()
        self._value = initial

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self.publish(value)

    def subscribe(self, initial: Optional[Iterable[T]] = None) -> Subscription[T]:
        return super().subscribe([self._value] if initial is None else initial)
