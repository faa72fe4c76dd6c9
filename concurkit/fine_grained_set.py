"""Concurrent sorted set on a singly linked list with hand-over-hand locking."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Generic, Iterator, Optional, TypeVar

T = TypeVar("T")


class _Link:
    """A locked reference to the next node."""

    __slots__ = ("lock", "node")

    def __init__(self, node: Optional[_Node] = None) -> None:
        self.lock = threading.Lock()
        self.node = node


class _Node:
    __slots__ = ("data", "next")

    def __init__(self, data: Any, following: Optional[_Node]) -> None:
        self.data = data
        self.next = _Link(following)


class FineGrainedListSet(Generic[T]):
    """A sorted set where every link has its own lock, taken hand over hand."""

    def __init__(self) -> None:
        self._head = _Link()

    @contextmanager
    def _locate(self, key: T) -> Iterator[tuple[bool, _Link]]:
        """Yield whether ``key`` is present and the locked link that points at its position."""
        link = self._head
        link.lock.acquire()
        try:
            while True:
                node = link.node
                if node is None or not node.data < key:
                    break
                node.next.lock.acquire()
                link.lock.release()
                link = node.next
            yield node is not None and node.data == key, link
        finally:
            link.lock.release()

    def contains(self, key: T) -> bool:
        with self._locate(key) as (found, _):
            return found

    def insert(self, key: T) -> bool:
        """Add ``key``; return False if it was already present."""
        with self._locate(key) as (found, link):
            if found:
                return False
            link.node = _Node(key, link.node)
            return True

    def remove(self, key: T) -> bool:
        """Remove ``key``; return False if it was absent."""
        with self._locate(key) as (found, link):
            if not found:
                return False
            removed = link.node
            with removed.next.lock:
                link.node = removed.next.node
            return True

    def __iter__(self) -> Iterator[T]:
        link = self._head
        link.lock.acquire()
        try:
            while (node := link.node) is not None:
                node.next.lock.acquire()
                link.lock.release()
                link = node.next
                yield node.data
        finally:
            link.lock.release()