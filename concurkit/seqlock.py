"""Sequence locks: writers exclude each other, readers validate optimistically."""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

from concurkit.atomic import Atomic, Backoff

T = TypeVar("T")
R = TypeVar("R")


class UpgradeError(Exception):
    """A read guard could not be upgraded because a writer intervened."""


class RawSeqLock:
    """A raw sequence lock.

    The sequence number is even when unlocked or read-locked, odd when
    write-locked, and never decreases.
    """

    def __init__(self) -> None:
        self._seq = Atomic(0)

    def write_lock(self) -> int:
        """Acquire the writer's lock and return the sequence number it started from."""
        backoff = Backoff()
        while True:
            seq = self._seq.load()
            if seq % 2 == 0 and self._seq.compare_exchange(seq, seq + 1)[0]:
                return seq
            backoff.snooze()

    def write_unlock(self, seq: int) -> None:
        """Release the writer's lock taken at sequence number ``seq``."""
        if not self._seq.compare_exchange(seq + 1, seq + 2)[0]:
            raise RuntimeError(f"sequence {seq} does not hold the writer's lock")

    def read_begin(self) -> int:
        """Wait until no writer holds the lock and return the sequence number."""
        backoff = Backoff()
        while True:
            seq = self._seq.load()
            if seq % 2 == 0:
                return seq
            backoff.snooze()

    def read_validate(self, seq: int) -> bool:
        """Return whether no writer has run since ``seq`` was read."""
        return seq == self._seq.load()

    def upgrade(self, seq: int) -> bool:
        """Try to turn a read at ``seq`` into the writer's lock; return success."""
        if seq % 2:
            raise ValueError("a read sequence number must be even")
        return self._seq.compare_exchange(seq, seq + 1)[0]


class SeqLock(Generic[T]):
    """A sequence lock protecting ``data``."""

    def __init__(self, data: T) -> None:
        self._inner = RawSeqLock()
        self.data = data

    def write_lock(self) -> WriteGuard[T]:
        """Acquire the writer's lock."""
        return WriteGuard(self, self._inner.write_lock())

    def read_lock(self) -> ReadGuard[T]:
        """Begin a read section; the guard must be finished to validate it."""
        return ReadGuard(self, self._inner.read_begin())

    def read(self, func: Callable[[T], R]) -> Optional[R]:
        """Call ``func`` on the data; return its result, or ``None`` if a writer interfered."""
        guard = self.read_lock()
        result = func(guard.data)
        return result if guard.finish() else None


class WriteGuard(Generic[T]):
    """Holds a sequence lock's writer's lock until released."""

    def __init__(self, lock: SeqLock[T], seq: int) -> None:
        self._lock = lock
        self._seq = seq
        self._released = False

    @property
    def data(self) -> T:
        return self._lock.data

    @data.setter
    def data(self, value: T) -> None:
        if self._released:
            raise RuntimeError("write guard already released")
        self._lock.data = value

    def release(self) -> None:
        """Release the writer's lock."""
        if self._released:
            raise RuntimeError("write guard already released")
        self._released = True
        self._lock._inner.write_unlock(self._seq)

    def __enter__(self) -> WriteGuard[T]:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if not self._released:
            self.release()


class ReadGuard(Generic[T]):
    """An optimistic read section of a sequence lock."""

    def __init__(self, lock: SeqLock[T], seq: int) -> None:
        self._lock = lock
        self._seq = seq
        self._done = False

    def _check_open(self) -> None:
        if self._done:
            raise RuntimeError("read guard already finished")

    @property
    def data(self) -> T:
        self._check_open()
        return self._lock.data

    def validate(self) -> bool:
        """Return whether the reads so far are valid."""
        self._check_open()
        return self._lock._inner.read_validate(self._seq)

    def restart(self) -> None:
        """Restart the read section at the current sequence number."""
        self._check_open()
        self._seq = self._lock._inner.read_begin()

    def finish(self) -> bool:
        """End the read section; return whether its reads were valid."""
        result = self.validate()
        self._done = True
        return result

    def upgrade(self) -> WriteGuard[T]:
        """End the read section and take the writer's lock.

        Raises UpgradeError if a writer has run since the section began.
        """
        self._check_open()
        self._done = True
        if not self._lock._inner.upgrade(self._seq):
            raise UpgradeError("sequence lock changed since the read began")
        return WriteGuard(self._lock, self._seq)

    def copy(self) -> ReadGuard[T]:
        """Return an independent guard at the same sequence number."""
        self._check_open()
        return ReadGuard(self._lock, self._seq)