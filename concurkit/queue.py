"""Michael-Scott lock-free queue, usable by any number of producers and consumers."""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from concurkit.atomic import Atomic, Backoff

T = TypeVar("T")

_EMPTY = object()


class _Node:
    __slots__ = ("data", "next")

    def __init__(self, data: Any) -> None:
        self.data = data
        self.next: Atomic[Optional[_Node]] = Atomic(None)


class Queue(Generic[T]):
    """A lock-free FIFO queue.

    The queue is a singly linked list with a sentinel node at the front; the
    tail pointer may lag behind the actual last node.
    """

    def __init__(self) -> None:
        sentinel = _Node(_EMPTY)
        self._head: Atomic[_Node] = Atomic(sentinel)
        self._tail: Atomic[_Node] = Atomic(sentinel)

    def push(self, value: T) -> None:
        """Add ``value`` to the back of the queue."""
        new = _Node(value)
        while True:
            tail = self._tail.load()
            following = tail.next.load()
            if following is not None:
                # The tail lags behind: help move it forward.
                self._tail.compare_exchange(tail, following)
                continue
            if tail.next.compare_exchange(None, new)[0]:
                self._tail.compare_exchange(tail, new)
                return

    def _take(self) -> Any:
        while True:
            head = self._head.load()
            following = head.next.load()
            if following is None:
                return _EMPTY
            tail = self._tail.load()
            if tail is head:
                self._tail.compare_exchange(tail, following)
            if self._head.compare_exchange(head, following)[0]:
                # ``following`` becomes the new sentinel; move its value out.
                result = following.data
                following.data = _EMPTY
                return result

    def try_pop(self) -> Optional[T]:
        """Remove and return the front element, or ``None`` if the queue is observed empty."""
        result = self._take()
        return None if result is _EMPTY else result

    def pop(self) -> T:
        """Remove and return the front element, waiting until one is available."""
        backoff = Backoff()
        while True:
            result = self._take()
            if result is not _EMPTY:
                return result
            backoff.snooze()

    def is_empty(self) -> bool:
        return self._head.load().next.load() is None

    def __repr__(self) -> str:
        return f"Queue(empty={self.is_empty()})"