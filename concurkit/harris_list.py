"""Lock-free sorted singly linked list with logical deletion by marking links."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from concurkit.atomic import Atomic

K = TypeVar("K")
V = TypeVar("V")


class RetryError(Exception):
    """A cursor operation lost a race; the operation must start over from the head."""


@dataclass(frozen=True)
class _Link:
    """A pointer to a node together with its mark bit."""

    node: Optional["Node[Any, Any]"]
    tag: int = 0

    def __or__(self, bits: int) -> _Link:
        return _Link(self.node, self.tag | bits)


class Node(Generic[K, V]):
    """A list node holding a key, a value and a markable link to the next node."""

    __slots__ = ("key", "value", "next")

    def __init__(self, key: K, value: V) -> None:
        self.key = key
        self.value = value
        self.next: Atomic[_Link] = Atomic(_Link(None))

    def __repr__(self) -> str:
        return f"Node({self.key!r}, {self.value!r})"


class Cursor(Generic[K, V]):
    """A position in the list: the link cell ``prev`` that points to the node ``curr``."""

    def __init__(self, prev: Atomic[_Link], curr: Optional[Node[K, V]]) -> None:
        self.prev = prev
        self.curr = curr

    def find_harris(self, key: K) -> bool:
        """Move to ``key``, unlinking the whole chain of marked nodes in one step.

        Returns whether the key was found; raises RetryError if the cleanup lost a race.
        """
        prev_next = self.curr
        while True:
            curr_node = self.curr
            if curr_node is None:
                found = False
                break
            following = curr_node.next.load()
            if following.tag:
                self.curr = following.node
                continue
            if curr_node.key < key:
                self.curr = following.node
                self.prev = curr_node.next
                prev_next = following.node
            elif curr_node.key == key:
                found = True
                break
            else:
                found = False
                break

        if prev_next is self.curr:
            return found
        if not self.prev.compare_exchange(_Link(prev_next), _Link(self.curr))[0]:
            raise RetryError("failed to unlink marked nodes")
        return found

    def find_harris_michael(self, key: K) -> bool:
        """Move to ``key``, unlinking marked nodes one at a time.

        Returns whether the key was found; raises RetryError if an unlink lost a race.
        """
        while True:
            curr_node = self.curr
            if curr_node is None:
                return False
            following = curr_node.next.load()
            if following.tag:
                if not self.prev.compare_exchange(_Link(curr_node), _Link(following.node))[0]:
                    raise RetryError("failed to unlink a marked node")
                self.curr = following.node
                continue
            if curr_node.key < key:
                self.prev = curr_node.next
                self.curr = following.node
            elif curr_node.key == key:
                return True
            else:
                return False

    def find_harris_herlihy_shavit(self, key: K) -> bool:
        """Move to ``key`` without any cleanup; never fails."""
        while True:
            curr_node = self.curr
            if curr_node is None:
                return False
            if curr_node.key < key:
                self.prev = curr_node.next
                self.curr = curr_node.next.load().node
            elif curr_node.key == key:
                return curr_node.next.load().tag == 0
            else:
                return False

    def _current(self) -> Node[K, V]:
        if self.curr is None:
            raise LookupError("cursor is past the end of the list")
        return self.curr

    def lookup(self) -> V:
        """Return the value of the current node."""
        return self._current().value

    def insert(self, node: Node[K, V]) -> None:
        """Link ``node`` between the previous and the current node.

        Raises RetryError if the previous link changed; ``node`` may then be reused.
        """
        node.next.store(_Link(self.curr))
        if not self.prev.compare_exchange(_Link(self.curr), _Link(node))[0]:
            raise RetryError("previous link changed")
        self.curr = node

    def delete(self) -> V:
        """Mark and unlink the current node, returning its value.

        Raises RetryError if another thread has already marked it.
        """
        curr_node = self._current()
        following = curr_node.next.fetch_or(1)
        if following.tag == 1:
            raise RetryError("node is already being deleted")
        self.prev.compare_exchange(_Link(curr_node), _Link(following.node))
        self.curr = following.node
        return curr_node.value


_Finder = Callable[[Cursor[Any, Any], Any], bool]


class List(Generic[K, V]):
    """A sorted lock-free map from keys to values, usable by many threads."""

    def __init__(self) -> None:
        self._head: Atomic[_Link] = Atomic(_Link(None))

    def head(self) -> Cursor[K, V]:
        """Return a cursor at the front of the list."""
        return Cursor(self._head, self._head.load().node)

    def _find(self, key: K, find: _Finder) -> tuple[bool, Cursor[K, V]]:
        while True:
            cursor = self.head()
            try:
                return find(cursor, key), cursor
            except RetryError:
                continue

    def _lookup(self, key: K, find: _Finder) -> Optional[V]:
        found, cursor = self._find(key, find)
        return cursor.lookup() if found else None

    def _insert(self, key: K, value: V, find: _Finder) -> bool:
        node = Node(key, value)
        while True:
            found, cursor = self._find(key, find)
            if found:
                return False
            try:
                cursor.insert(node)
                return True
            except RetryError:
                continue

    def _delete(self, key: K, find: _Finder) -> Optional[V]:
        while True:
            found, cursor = self._find(key, find)
            if not found:
                return None
            try:
                return cursor.delete()
            except RetryError:
                continue

    def harris_lookup(self, key: K) -> Optional[V]:
        """Return the value at ``key`` or ``None``, with Harris cleanup."""
        return self._lookup(key, Cursor.find_harris)

    def harris_insert(self, key: K, value: V) -> bool:
        """Insert ``key``; return False if it was already present."""
        return self._insert(key, value, Cursor.find_harris)

    def harris_delete(self, key: K) -> Optional[V]:
        """Delete ``key`` and return its value, or ``None`` if absent."""
        return self._delete(key, Cursor.find_harris)

    def harris_michael_lookup(self, key: K) -> Optional[V]:
        """Return the value at ``key`` or ``None``, with Harris-Michael cleanup."""
        return self._lookup(key, Cursor.find_harris_michael)

    def harris_michael_insert(self, key: K, value: V) -> bool:
        """Insert ``key``; return False if it was already present."""
        return self._insert(key, value, Cursor.find_harris_michael)

    def harris_michael_delete(self, key: K) -> Optional[V]:
        """Delete ``key`` and return its value, or ``None`` if absent."""
        return self._delete(key, Cursor.find_harris_michael)

    def harris_herlihy_shavit_lookup(self, key: K) -> Optional[V]:
        """Return the value at ``key`` or ``None`` without any cleanup."""
        return self._lookup(key, Cursor.find_harris_herlihy_shavit)