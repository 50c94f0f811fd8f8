import asyncio
from typing import AsyncIterator, Callable, Generic, TypeVar

T = TypeVar("T")


class Observable(Generic[T]):
    """
    Value holder that notifies subscribers on change.

    Subscribers are either plain callbacks (called synchronously inside
    set()) or async consumers of updates(), which receive the current
    value first and then every change.
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._callbacks: list[Callable[[T], None]] = []
        self._queues: set[asyncio.Queue[T]] = set()

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        if value == self._value:
            return
        self._value = value
        for callback in list(self._callbacks):
            callback(value)
        for queue in list(self._queues):
            queue.put_nowait(value)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    async def updates(self) -> AsyncIterator[T]:
        queue: asyncio.Queue[T] = asyncio.Queue()
        queue.put_nowait(self._value)
        self._queues.add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._queues.discard(queue)

    def __repr__(self) -> str:
        return f"Observable({self._value!r})"
