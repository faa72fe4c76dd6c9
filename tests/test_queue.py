import threading
from functools import partial

import pytest

from concurkit.queue import Queue

CONC_COUNT = 5000


def _run(*targets):
    threads = [threading.Thread(target=target) for target in targets]
    for t in threads:
        t.start()
    for t in threads:
        t.join()


def _produce(q, items):
    for item in items:
        q.push(item)


def _drain(q):
    rest = []
    while (item := q.try_pop()) is not None:
        rest.append(item)
    return rest


@pytest.mark.parametrize("values", [[37], [37, 48], list(range(200))])
@pytest.mark.parametrize("method", ["try_pop", "pop"])
def test_sequential_fifo(values, method):
    q = Queue()
    assert q.is_empty()
    _produce(q, values)
    assert not q.is_empty()
    take = getattr(q, method)
    popped = []
    for remaining in range(len(values) - 1, -1, -1):
        popped.append(take())
        assert q.is_empty() is (remaining == 0)
    assert popped == values


def test_try_pop_empty_returns_none():
    assert Queue().try_pop() is None


def test_pop_returns_pushed_none():
    q = Queue()
    _produce(q, [None, 1])
    assert [q.pop(), q.pop()] == [None, 1]
    assert q.is_empty()


def test_push_try_pop_many_spsc():
    q = Queue()
    received = []

    def consumer():
        while len(received) < CONC_COUNT:
            elem = q.try_pop()
            if elem is not None:
                received.append(elem)

    _run(consumer, partial(_produce, q, range(CONC_COUNT)))
    assert received == list(range(CONC_COUNT))
    assert q.try_pop() is None
    assert q.is_empty()


def test_push_try_pop_many_spmc():
    q = Queue()
    results = [[] for _ in range(3)]

    def recv(out):
        for _ in range(CONC_COUNT):
            elem = q.try_pop()
            if elem is not None:
                out.append(elem)
                if elem == CONC_COUNT - 1:
                    break

    _run(*(partial(recv, out) for out in results), partial(_produce, q, range(CONC_COUNT)))
    for out in results:
        assert all(a < b for a, b in zip(out, out[1:]))
    rest = _drain(q)
    assert rest == sorted(rest)
    taken = [x for out in results for x in out] + rest
    assert sorted(taken) == list(range(CONC_COUNT))
    assert q.is_empty()


def test_push_try_pop_many_mpmc():
    q = Queue()
    consumed = [{"left": [], "right": []} for _ in range(2)]

    def consume(seen):
        for _ in range(CONC_COUNT):
            item = q.try_pop()
            if item is not None:
                side, x = item
                seen[side].append(x)

    _run(
        partial(_produce, q, (("left", i) for i in range(CONC_COUNT))),
        partial(_produce, q, (("right", i) for i in range(CONC_COUNT))),
        *(partial(consume, seen) for seen in consumed),
    )
    for seen in consumed:
        for values in seen.values():
            assert values == sorted(values)
    rest = _drain(q)
    assert q.is_empty()
    for side in ("left", "right"):
        leftover = [x for s, x in rest if s == side]
        assert leftover == sorted(leftover)
        everything = leftover + [x for seen in consumed for x in seen[side]]
        assert sorted(everything) == list(range(CONC_COUNT))


def test_push_pop_many_spsc():
    q = Queue()
    received = []

    def consumer():
        received.extend(q.pop() for _ in range(CONC_COUNT))

    _run(consumer, partial(_produce, q, range(CONC_COUNT)))
    assert received == list(range(CONC_COUNT))
    assert q.is_empty()


def test_is_empty_dont_pop():
    q = Queue()
    _produce(q, [20, 20])
    assert not q.is_empty()
    assert q.try_pop() == 20
    assert not q.is_empty()