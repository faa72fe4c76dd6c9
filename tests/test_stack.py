import threading

from concurkit.stack import Stack


def test_pop_empty_returns_none():
    stack = Stack()
    assert stack.pop() is None
    assert stack.is_empty()


def test_lifo_order():
    stack = Stack()
    for i in range(10):
        stack.push(i)
    assert not stack.is_empty()
    assert [stack.pop() for _ in range(10)] == list(range(9, -1, -1))
    assert stack.is_empty()
    assert stack.pop() is None


def test_push_pop_interleaved():
    stack = Stack()
    stack.push("a")
    stack.push("b")
    assert stack.pop() == "b"
    stack.push("c")
    assert stack.pop() == "c"
    assert stack.pop() == "a"
    assert stack.is_empty()


def test_concurrent_push_pop():
    stack = Stack()
    failures = []

    def worker():
        for i in range(2000):
            stack.push(i)
            if stack.pop() is None:
                failures.append(i)

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert failures == []
    assert stack.is_empty()


def test_concurrent_push_keeps_every_value():
    stack = Stack()

    def producer(base):
        for i in range(1000):
            stack.push(base + i)

    threads = [threading.Thread(target=producer, args=(k * 1000,)) for k in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    popped = []
    while (value := stack.pop()) is not None:
        popped.append(value)
    assert sorted(popped) == list(range(4000))