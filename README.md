# concurkit

A collection of concurrent data structures and locks for threaded Python code.

## Installation

```
pip install concurkit
```

## What is inside

- `concurkit.linked_list` — `LinkedList`, a doubly linked list with constant-time
  pushes and pops at both ends, `append`/`prepend` splicing, lexicographic
  comparison, double-ended iterators (`Iter`, with `next_back` and `copy`) and a
  mutating cursor (`IterMut`) that can peek at, replace and insert elements as
  it walks.
- `concurkit.atomic` — `Atomic`, a cell with `load`, `store`, `swap`,
  `compare_exchange`, `fetch_add` and `fetch_or`, and `Backoff` for spin loops.
- `concurkit.locks` — `SpinLock` (with `try_lock`), `TicketLock`, `ClhLock`,
  `McsLock` and `McsParkingLock`. Each has `lock()`, which returns a handle
  for the holder, and `unlock(handle)`, which releases the lock with it.
- `concurkit.seqlock` — `RawSeqLock` and `SeqLock` with `WriteGuard` and
  `ReadGuard`; read guards validate, restart, finish, copy, or upgrade to a
  writer (raising `UpgradeError` if a writer intervened).
- `concurkit.stack` — Treiber's `Stack` with `push`, `pop` and `is_empty`.
- `concurkit.queue` — Michael–Scott `Queue` with `push`, `try_pop`, a waiting
  `pop`, and `is_empty`.
- `concurkit.harris_list` — a sorted map `List` with Harris, Harris–Michael and
  Harris–Herlihy–Shavit lookup strategies, its `Cursor` and `Node`, and
  `RetryError` for cursor operations that lost a race.
- `concurkit.fine_grained_set` — `FineGrainedListSet`, a sorted set using
  hand-over-hand locking.
- `concurkit.optimistic_set` — `OptimisticFineGrainedListSet`, a sorted set
  using sequence locks for optimistic reads; its iterator raises
  `ValidationError` when a concurrent writer invalidates it.

## Examples

```python
from concurkit.linked_list import LinkedList

items = LinkedList([1, 4])
it = items.iter_mut()
next(it)
it.insert_next(2)
it.insert_next(3)
print(list(items))          # [1, 2, 3, 4]
```

```python
from concurkit.locks import TicketLock

lock = TicketLock()
ticket = lock.lock()
try:
    ...                      # critical section
finally:
    lock.unlock(ticket)
```

```python
from concurkit.seqlock import SeqLock

counter = SeqLock([0])
with counter.write_lock() as guard:
    guard.data[0] += 1

value = counter.read(lambda data: data[0])   # None if a writer interfered
```

```python
from concurkit.queue import Queue
from concurkit.fine_grained_set import FineGrainedListSet

q = Queue()
q.push(37)
q.push(48)
assert q.try_pop() == 37

s = FineGrainedListSet()
s.insert(3)
s.insert(1)
assert list(s) == [1, 3]
```

## What it does not do

Every `Atomic` operation is made indivisible by a `threading.Lock` held for
the length of that one operation, so the "lock-free" structures here are
lock-free in their algorithms, not free of interpreter-level locking. The
package offers no command-line tool.

## Running the tests

```
pip install concurkit[test]
pytest
```