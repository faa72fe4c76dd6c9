import random
import threading

import pytest

from concurkit.harris_list import Cursor, List, Node, RetryError

STRATEGIES = [
    ("harris_insert", "harris_lookup", "harris_delete"),
    ("harris_michael_insert", "harris_michael_lookup", "harris_michael_delete"),
    ("harris_michael_insert", "harris_herlihy_shavit_lookup", "harris_michael_delete"),
]


def _ops(lst, names):
    return tuple(getattr(lst, name) for name in names)


def _run_threads(targets):
    errors = []

    def wrap(fn):
        def run():
            try:
                fn()
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        return run

    threads = [threading.Thread(target=wrap(fn)) for fn in targets]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return errors


@pytest.mark.parametrize("names", STRATEGIES)
def test_smoke(names):
    lst = List()
    insert, lookup, delete = _ops(lst, names)
    assert insert(37, 37) is True
    assert lookup(42) is None
    assert lookup(37) == 37

    assert insert(42, 42) is True
    assert lookup(42) == 42
    assert lookup(37) == 37

    assert delete(37) == 37
    assert lookup(42) == 42
    assert lookup(37) is None

    assert delete(37) is None
    assert lookup(42) == 42
    assert lookup(37) is None


@pytest.mark.parametrize("names", STRATEGIES)
def test_duplicate_insert_keeps_first_value(names):
    lst = List()
    insert, lookup, _ = _ops(lst, names)
    assert insert(37, "first") is True
    assert insert(37, "second") is False
    assert lookup(37) == "first"


@pytest.mark.parametrize("names", STRATEGIES)
def test_stress_sequential(names):
    lst = List()
    insert, lookup, delete = _ops(lst, names)
    rng = random.Random(7)
    reference = {}
    for _ in range(2000):
        key = rng.randrange(64)
        op = rng.randrange(3)
        if op == 0:
            value = rng.randrange(1000)
            assert insert(key, value) is (key not in reference)
            reference.setdefault(key, value)
        elif op == 1:
            assert lookup(key) == reference.get(key)
        else:
            assert delete(key) == reference.pop(key, None)


def test_keys_stay_sorted():
    lst = List()
    keys = list(range(50))
    random.Random(3).shuffle(keys)
    for key in keys:
        assert lst.harris_insert(key, key)
    seen = []
    node = lst.head().curr
    while node is not None:
        seen.append(node.key)
        node = node.next.load().node
    assert seen == sorted(keys)


def test_insert_concurrent_disjoint():
    lst = List()
    threads, steps = 4, 300

    def worker(tid):
        def run():
            for i in range(steps):
                key = i * threads + tid
                assert lst.harris_michael_insert(key, key)
        return run

    assert _run_threads([worker(t) for t in range(threads)]) == []
    for key in range(threads * steps):
        assert lst.harris_lookup(key) == key


def test_delete_concurrent_each_key_once():
    lst = List()
    keys = range(200)
    for key in keys:
        assert lst.harris_insert(key, key)
    results = [[] for _ in range(4)]

    def worker(out, use_harris):
        def run():
            for key in keys:
                value = lst.harris_delete(key) if use_harris else lst.harris_michael_delete(key)
                if value is not None:
                    out.append(value)
        return run

    errors = _run_threads([worker(out, i % 2 == 0) for i, out in enumerate(results)])
    assert errors == []
    deleted = sorted(v for out in results for v in out)
    assert deleted == list(keys)
    assert lst.head().curr is None


def test_cursor_on_empty_list():
    lst = List()
    cursor = lst.head()
    assert cursor.curr is None
    assert cursor.find_harris(37) is False
    with pytest.raises(LookupError):
        cursor.lookup()
    with pytest.raises(LookupError):
        cursor.delete()


def test_cursor_insert_and_stale_cursor():
    lst = List()
    first = lst.head()
    second = lst.head()
    node = Node(37, "a")
    first.insert(node)
    assert first.curr is node
    assert first.lookup() == "a"
    with pytest.raises(RetryError):
        second.insert(Node(42, "b"))
    assert lst.harris_lookup(37) == "a"
    assert lst.harris_lookup(42) is None


def test_cursor_double_delete_fails():
    lst = List()
    assert lst.harris_insert(37, "v")
    first = lst.head()
    second = lst.head()
    assert first.delete() == "v"
    with pytest.raises(RetryError):
        second.delete()


def test_marked_node_hidden_and_cleaned():
    lst = List()
    assert lst.harris_insert(1, "one")
    stale = lst.head()
    assert stale.curr.key == 1
    assert lst.harris_insert(0, "zero")
    # The unlink fails because the head changed, so node 1 stays linked but marked.
    assert stale.delete() == "one"
    assert lst.head().curr.next.load().node.key == 1
    assert lst.harris_herlihy_shavit_lookup(1) is None
    assert lst.harris_michael_lookup(1) is None
    assert lst.head().curr.next.load().node is None
    assert lst.harris_lookup(0) == "zero"


def test_find_harris_unlinks_chain():
    lst = List()
    for key in (1, 2, 3, 4):
        assert lst.harris_insert(key, key)
    head_node = lst.head().curr
    for key in (2, 3):
        cursor = Cursor(head_node.next, head_node.next.load().node)
        cursor.find_harris_herlihy_shavit(key)
        # mark without unlinking by using a stale predecessor
        cursor.curr.next.fetch_or(1)
    cursor = lst.head()
    assert cursor.find_harris(4) is True
    assert cursor.lookup() == 4
    assert head_node.next.load().node.key == 4