"""Treiber's lock-free stack."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from concurkit.atomic import Atomic

T = TypeVar("T")


@dataclass(eq=False)
class _Link:
    value: Any
    below: Optional[_Link]


class Stack(Generic[T]):
    """A lock-free stack usable by any number of producers and consumers."""

    def __init__(self) -> None:
        self._top: Atomic[Optional[_Link]] = Atomic(None)

    def push(self, value: T) -> None:
        """Push ``value`` on top of the stack."""
        link = _Link(value, self._top.load())
        while True:
            swapped, observed = self._top.compare_exchange(link.below, link)
            if swapped:
                return
            link.below = observed

    def pop(self) -> Optional[T]:
        """Remove and return the top element, or ``None`` if the stack is empty."""
        while (top := self._top.load()) is not None:
            if self._top.compare_exchange(top, top.below)[0]:
                return top.value
        return None

    def is_empty(self) -> bool:
        return self._top.load() is None

    def __repr__(self) -> str:
        return f"Stack(empty={self.is_empty()})"