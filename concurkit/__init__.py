"""Concurrent data structures and locks: linked list, atomics, locks, sequence locks, stack, queue and list sets."""

__version__ = "0.1.0"

__all__ = [
    "atomic",
    "fine_grained_set",
    "harris_list",
    "linked_list",
    "locks",
    "optimistic_set",
    "queue",
    "seqlock",
    "stack",
]