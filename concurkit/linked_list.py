"""A doubly linked list with constant-time pushes and pops at both ends."""

from __future__ import annotations

from typing import Any, Generic, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")


class _Node:
    __slots__ = ("element", "prev", "next")

    def __init__(self, element: Any) -> None:
        self.element = element
        self.prev: Optional[_Node] = None
        self.next: Optional[_Node] = None


class LinkedList(Generic[T]):
    """A doubly linked list that owns its nodes.

    Elements can be pushed and popped at either end in constant time.
    """

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, iterable: Iterable[T] = ()) -> None:
        self._head: Optional[_Node] = None
        self._tail: Optional[_Node] = None
        self._len = 0
        for value in iterable:
            self.push_back(value)

    # -- node operations -------------------------------------------------

    def _push_front_node(self, node: _Node) -> None:
        node.next = self._head
        node.prev = None
        if self._head is None:
            self._tail = node
        else:
            self._head.prev = node
        self._head = node
        self._len += 1

    def _pop_front_node(self) -> Optional[_Node]:
        node = self._head
        if node is None:
            return None
        self._head = node.next
        if self._head is None:
            self._tail = None
        else:
            self._head.prev = None
        node.next = None
        self._len -= 1
        return node

    def _push_back_node(self, node: _Node) -> None:
        node.prev = self._tail
        node.next = None
        if self._tail is None:
            self._head = node
        else:
            self._tail.next = node
        self._tail = node
        self._len += 1

    def _pop_back_node(self) -> Optional[_Node]:
        node = self._tail
        if node is None:
            return None
        self._tail = node.prev
        if self._tail is None:
            self._head = None
        else:
            self._tail.next = None
        node.prev = None
        self._len -= 1
        return node

    def _take(self) -> tuple[Optional[_Node], Optional[_Node], int]:
        state = (self._head, self._tail, self._len)
        self._head = self._tail = None
        self._len = 0
        return state

    # -- public API ------------------------------------------------------

    def append(self, other: LinkedList[T]) -> None:
        """Move all elements of ``other`` to the end of this list, emptying ``other``."""
        if other is self:
            raise ValueError("cannot append a list to itself")
        if other._head is None:
            return
        head, tail, length = other._take()
        if self._tail is None:
            self._head, self._tail, self._len = head, tail, length
            return
        self._tail.next = head
        head.prev = self._tail
        self._tail = tail
        self._len += length

    def prepend(self, other: LinkedList[T]) -> None:
        """Move all elements of ``other`` to the front of this list, emptying ``other``."""
        if other is self:
            raise ValueError("cannot prepend a list to itself")
        if other._head is None:
            return
        head, tail, length = other._take()
        if self._head is None:
            self._head, self._tail, self._len = head, tail, length
            return
        tail.next = self._head
        self._head.prev = tail
        self._head = head
        self._len += length

    def is_empty(self) -> bool:
        return self._head is None

    def __len__(self) -> int:
        return self._len

    def clear(self) -> None:
        """Remove all elements, releasing every node."""
        while self._pop_front_node() is not None:
            pass

    def __contains__(self, value: object) -> bool:
        return any(element == value for element in self)

    def front(self) -> Optional[T]:
        """Return the first element, or ``None`` if the list is empty."""
        return None if self._head is None else self._head.element

    def back(self) -> Optional[T]:
        """Return the last element, or ``None`` if the list is empty."""
        return None if self._tail is None else self._tail.element

    def set_front(self, value: T) -> None:
        """Replace the first element."""
        if self._head is None:
            raise IndexError("front of an empty list")
        self._head.element = value

    def set_back(self, value: T) -> None:
        """Replace the last element."""
        if self._tail is None:
            raise IndexError("back of an empty list")
        self._tail.element = value

    def push_front(self, value: T) -> None:
        self._push_front_node(_Node(value))

    def pop_front(self) -> Optional[T]:
        """Remove and return the first element, or ``None`` if the list is empty."""
        node = self._pop_front_node()
        return None if node is None else node.element

    def push_back(self, value: T) -> None:
        self._push_back_node(_Node(value))

    def pop_back(self) -> Optional[T]:
        """Remove and return the last element, or ``None`` if the list is empty."""
        node = self._pop_back_node()
        return None if node is None else node.element

    def iter_mut(self) -> IterMut[T]:
        """Return an iterator that can modify and insert elements in place."""
        return IterMut(self)

    def __iter__(self) -> Iter[T]:
        return Iter(self._head, self._tail, self._len)

    def __reversed__(self) -> Iterator[T]:
        node = self._tail
        for _ in range(self._len):
            yield node.element
            node = node.prev

    # -- comparison ------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return len(self) == len(other) and all(a == b for a, b in zip(self, other))

    def _partial_cmp(self, other: LinkedList[T]) -> Optional[int]:
        """Lexicographic comparison; ``None`` when a pair of elements is unordered."""
        for a, b in zip(self, other):
            if a == b:
                continue
            if a < b:
                return -1
            if a > b:
                return 1
            return None
        return (len(self) > len(other)) - (len(self) < len(other))

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) == -1

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) in (-1, 0)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) == 1

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LinkedList):
            return NotImplemented
        return self._partial_cmp(other) in (1, 0)

    def __repr__(self) -> str:
        return "[" + ", ".join(repr(element) for element in self) + "]"

    def copy(self) -> LinkedList[T]:
        """Return a shallow copy."""
        return LinkedList(self)


class Iter(Generic[T]):
    """A double-ended iterator over the elements of a :class:`LinkedList`."""

    __slots__ = ("_head", "_tail", "_len")

    def __init__(self, head: Optional[_Node], tail: Optional[_Node], length: int) -> None:
        self._head = head
        self._tail = tail
        self._len = length

    def __iter__(self) -> Iter[T]:
        return self

    def __next__(self) -> T:
        if self._len == 0:
            raise StopIteration
        node = self._head
        self._len -= 1
        self._head = node.next
        return node.element

    def next_back(self) -> T:
        """Return the next element from the back; raise StopIteration when exhausted."""
        if self._len == 0:
            raise StopIteration
        node = self._tail
        self._len -= 1
        self._tail = node.prev
        return node.element

    def __len__(self) -> int:
        return self._len

    def copy(self) -> Iter[T]:
        """Return an independent iterator at the same position."""
        return Iter(self._head, self._tail, self._len)

    def __repr__(self) -> str:
        return f"Iter({self._len})"


class IterMut(Generic[T]):
    """A double-ended iterator that can replace and insert elements of its list."""

    def __init__(self, owner: LinkedList[T]) -> None:
        self._list = owner
        self._head = owner._head
        self._tail = owner._tail
        self._len = owner._len
        self._last: Optional[_Node] = None

    def __iter__(self) -> IterMut[T]:
        return self

    def __next__(self) -> T:
        if self._len == 0:
            raise StopIteration
        node = self._head
        self._len -= 1
        self._head = node.next
        self._last = node
        return node.element

    def next_back(self) -> T:
        """Return the next element from the back; raise StopIteration when exhausted."""
        if self._len == 0:
            raise StopIteration
        node = self._tail
        self._len -= 1
        self._tail = node.prev
        self._last = node
        return node.element

    def replace_last(self, value: T) -> None:
        """Replace the element most recently returned by this iterator."""
        if self._last is None:
            raise IndexError("no element has been returned yet")
        self._last.element = value

    def insert_next(self, value: T) -> None:
        """Insert ``value`` just after the element most recently returned by ``next``.

        The inserted element does not appear in the iteration.
        """
        head = self._head
        if head is None:
            self._list.push_back(value)
            return
        prev = head.prev
        if prev is None:
            self._list.push_front(value)
            return
        node = _Node(value)
        node.prev = prev
        node.next = head
        prev.next = node
        head.prev = node
        self._list._len += 1

    def peek_next(self) -> Optional[T]:
        """Return the next element without advancing, or ``None`` when exhausted."""
        if self._len == 0:
            return None
        return self._head.element

    def replace_next(self, value: T) -> None:
        """Replace the element that ``next`` would return, without advancing."""
        if self._len == 0:
            raise IndexError("iterator is exhausted")
        self._head.element = value

    def __repr__(self) -> str:
        return f"IterMut({self._list!r}, {self._len})"