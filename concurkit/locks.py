"""Raw spinning and queue locks.

Every lock has ``lock()``, which blocks until the lock is held and returns a
token, and ``unlock(token)``, which releases it using that token.
"""

from __future__ import annotations

import threading
from typing import Optional

from concurkit.atomic import Atomic, Backoff


class SpinLock:
    """A test-and-set spin lock. Its token is ``None``."""

    def __init__(self) -> None:
        self._inner = Atomic(False)

    def lock(self) -> None:
        backoff = Backoff()
        while not self._inner.compare_exchange(False, True)[0]:
            backoff.snooze()

    def unlock(self, token: None = None) -> None:
        self._inner.store(False)

    def try_lock(self) -> bool:
        """Take the lock if it is free; return whether it was taken."""
        return self._inner.compare_exchange(False, True)[0]


class TicketLock:
    """A fair lock that serves threads in the order of their tickets."""

    def __init__(self) -> None:
        self._curr = Atomic(0)
        self._next = Atomic(0)

    def lock(self) -> int:
        ticket = self._next.fetch_add(1)
        backoff = Backoff()
        while self._curr.load() != ticket:
            backoff.snooze()
        return ticket

    def unlock(self, token: int) -> None:
        self._curr.store(token + 1)


class _ClhNode:
    __slots__ = ("locked",)

    def __init__(self, locked: bool) -> None:
        self.locked = Atomic(locked)


class ClhLock:
    """A CLH queue lock: each waiter spins on its predecessor's node."""

    def __init__(self) -> None:
        self._tail = Atomic(_ClhNode(False))

    def lock(self) -> _ClhNode:
        node = _ClhNode(True)
        prev = self._tail.swap(node)
        backoff = Backoff()
        while prev.locked.load():
            backoff.snooze()
        return node

    def unlock(self, token: _ClhNode) -> None:
        token.locked.store(False)


class _McsNode:
    __slots__ = ("locked", "next", "wakeup")

    def __init__(self) -> None:
        self.locked = Atomic(True)
        self.next: Atomic[Optional[_McsNode]] = Atomic(None)
        self.wakeup = threading.Event()


def _mcs_successor(tail: Atomic, node: _McsNode) -> Optional[_McsNode]:
    """Return the node waiting after ``node``, or ``None`` once the queue is emptied."""
    successor = node.next.load()
    if successor is None:
        if tail.compare_exchange(node, None)[0]:
            return None
        backoff = Backoff()
        while (successor := node.next.load()) is None:
            backoff.snooze()
    return successor


class McsLock:
    """An MCS queue lock: each waiter spins on its own node."""

    def __init__(self) -> None:
        self._tail: Atomic[Optional[_McsNode]] = Atomic(None)

    def lock(self) -> _McsNode:
        node = _McsNode()
        prev = self._tail.swap(node)
        if prev is None:
            return node
        prev.next.store(node)
        backoff = Backoff()
        while node.locked.load():
            backoff.snooze()
        return node

    def unlock(self, token: _McsNode) -> None:
        successor = _mcs_successor(self._tail, token)
        if successor is not None:
            successor.locked.store(False)


class McsParkingLock:
    """An MCS queue lock whose waiters sleep until their predecessor wakes them."""

    def __init__(self) -> None:
        self._tail: Atomic[Optional[_McsNode]] = Atomic(None)

    def lock(self) -> _McsNode:
        node = _McsNode()
        prev = self._tail.swap(node)
        if prev is None:
            return node
        prev.next.store(node)
        while node.locked.load():
            node.wakeup.wait()
        return node

    def unlock(self, token: _McsNode) -> None:
        successor = _mcs_successor(self._tail, token)
        if successor is None:
            return
        # Take the wake-up handle before releasing: the waiter may drop its node after that.
        wakeup = successor.wakeup
        successor.locked.store(False)
        wakeup.set()