"""Concurrent sorted set on a singly linked list with optimistic per-link sequence locks."""

from __future__ import annotations

from typing import Any, Generic, Iterator, Optional, TypeVar

from concurkit.seqlock import ReadGuard, SeqLock, UpgradeError

T = TypeVar("T")


class ValidationError(Exception):
    """An optimistic read was invalidated by a concurrent writer."""


class _Node:
    __slots__ = ("data", "next")

    def __init__(self, data: Any, following: Optional[_Node]) -> None:
        self.data = data
        self.next: SeqLock[Optional[_Node]] = SeqLock(following)


class _Cursor:
    """``prev`` is a read section on the link that points to ``curr``."""

    __slots__ = ("prev", "curr")

    def __init__(self, prev: ReadGuard, curr: Optional[_Node]) -> None:
        self.prev = prev
        self.curr = curr

    def find(self, key: Any) -> bool:
        """Move to the position of ``key``; return whether it was found.

        Raises ValidationError if the cursor cannot move safely.
        """
        while True:
            node = self.curr
            if node is None or not node.data < key:
                return node is not None and node.data == key
            following = node.next.read_lock()
            if not self.prev.finish():
                raise ValidationError("link changed while moving the cursor")
            self.prev = following
            self.curr = following.data


class OptimisticFineGrainedListSet(Generic[T]):
    """A sorted set whose readers never block writers."""

    def __init__(self) -> None:
        self._head: SeqLock[Optional[_Node]] = SeqLock(None)

    def _head_cursor(self) -> _Cursor:
        guard = self._head.read_lock()
        return _Cursor(guard, guard.data)

    def _find(self, key: T) -> tuple[bool, _Cursor]:
        while True:
            cursor = self._head_cursor()
            try:
                return cursor.find(key), cursor
            except ValidationError:
                continue

    def contains(self, key: T) -> bool:
        while True:
            found, cursor = self._find(key)
            if cursor.prev.finish():
                return found

    def insert(self, key: T) -> bool:
        """Add ``key``; return False if it was already present."""
        while True:
            found, cursor = self._find(key)
            if found:
                if cursor.prev.finish():
                    return False
                continue
            try:
                writer = cursor.prev.upgrade()
            except UpgradeError:
                continue
            with writer:
                writer.data = _Node(key, cursor.curr)
            return True

    def remove(self, key: T) -> bool:
        """Remove ``key``; return False if it was absent."""
        while True:
            found, cursor = self._find(key)
            if not found:
                if cursor.prev.finish():
                    return False
                continue
            try:
                writer = cursor.prev.upgrade()
            except UpgradeError:
                continue
            with writer, cursor.curr.next.write_lock() as successor:
                writer.data = successor.data
            return True

    def iter(self) -> Iterator[T]:
        """Iterate over the elements in order.

        Raises ValidationError when a concurrent writer invalidates the iteration;
        the caller must then start a new one.
        """
        return self._iterate(self._head.read_lock())

    @staticmethod
    def _iterate(guard: ReadGuard) -> Iterator[T]:
        curr = guard.data
        while True:
            if curr is None:
                if not guard.finish():
                    raise ValidationError("list changed during iteration")
                return
            following = curr.next.read_lock()
            if not guard.finish():
                raise ValidationError("list changed during iteration")
            yield curr.data
            guard = following
            curr = following.data

    def __iter__(self) -> Iterator[T]:
        return self.iter()