"""Atomic cells and an exponential backoff helper for spinning loops."""

from __future__ import annotations

import threading
import time
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_SPIN_LIMIT = 6
_YIELD_LIMIT = 10


class Atomic(Generic[T]):
    """A value cell whose operations each happen as one indivisible step."""

    __slots__ = ("_value", "_mutex")

    def __init__(self, value: T) -> None:
        self._value = value
        self._mutex = threading.Lock()

    @staticmethod
    def _same(a: Any, b: Any) -> bool:
        return a is b or a == b

    def load(self) -> T:
        with self._mutex:
            return self._value

    def store(self, value: T) -> None:
        with self._mutex:
            self._value = value

    def swap(self, value: T) -> T:
        """Store ``value`` and return the previous value."""
        with self._mutex:
            previous, self._value = self._value, value
            return previous

    def compare_exchange(self, current: T, new: T) -> tuple[bool, T]:
        """Store ``new`` if the cell holds ``current``.

        Returns ``(succeeded, previous)``, where ``previous`` is the value the
        cell held before the call.
        """
        with self._mutex:
            previous = self._value
            if self._same(previous, current):
                self._value = new
                return True, previous
            return False, previous

    def fetch_add(self, delta: Any) -> T:
        """Add ``delta`` and return the previous value."""
        with self._mutex:
            previous = self._value
            self._value = previous + delta
            return previous

    def fetch_or(self, bits: Any) -> T:
        """Bitwise-or ``bits`` into the value and return the previous value."""
        with self._mutex:
            previous = self._value
            self._value = previous | bits
            return previous

    def __repr__(self) -> str:
        return f"Atomic({self.load()!r})"


class Backoff:
    """Exponential backoff for spin loops: busy-waits briefly, then yields."""

    __slots__ = ("_step",)

    def __init__(self) -> None:
        self._step = 0

    def _busy_wait(self) -> None:
        for _ in range(1 << min(self._step, _SPIN_LIMIT)):
            pass

    def spin(self) -> None:
        """Back off in a lock-free loop, never yielding the thread."""
        self._busy_wait()
        if self._step <= _SPIN_LIMIT:
            self._step += 1

    def snooze(self) -> None:
        """Back off in a blocking loop, yielding the thread once spinning is exhausted."""
        if self._step <= _SPIN_LIMIT:
            self._busy_wait()
        else:
            time.sleep(0)
        if self._step <= _YIELD_LIMIT:
            self._step += 1

    def reset(self) -> None:
        """Start backing off from the shortest wait again."""
        self._step = 0