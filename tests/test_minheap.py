import pytest
from hypothesis import given, strategies as st

from schedkit.minheap import HeapFullError, MinHeap


def test_pop_returns_least_weight_first():
    heap = MinHeap(8)
    items = [("a", 30), ("b", 10), ("c", 20), ("d", 5)]
    for elem, weight in items:
        heap.insert(elem, weight)
    popped = [heap.pop() for _ in range(len(items))]
    assert popped == sorted(items, key=lambda pair: pair[1])


def test_insert_beyond_capacity_raises():
    heap = MinHeap(2)
    heap.insert("x", 1)
    heap.insert("y", 2)
    with pytest.raises(HeapFullError):
        heap.insert("z", 3)
    assert len(heap) == 2


def test_zero_capacity_heap_rejects_everything():
    heap = MinHeap(0)
    with pytest.raises(HeapFullError):
        heap.insert("x", 1)


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        MinHeap(-1)


def test_pop_empty_raises():
    heap = MinHeap(4)
    with pytest.raises(IndexError):
        heap.pop()


def test_peek_empty_raises():
    with pytest.raises(IndexError):
        MinHeap(4).peek()


def test_peek_does_not_remove():
    heap = MinHeap(4)
    heap.insert("late", 9)
    heap.insert("early", 3)
    assert heap.peek() == ("early", 3)
    assert len(heap) == 2
    assert heap.pop() == ("early", 3)
    assert heap.peek() == ("late", 9)


def test_capacity_freed_after_pop():
    heap = MinHeap(1)
    heap.insert("a", 1)
    heap.pop()
    heap.insert("b", 2)
    assert heap.pop() == ("b", 2)


def test_dump_header_and_entries():
    heap = MinHeap(4)
    heap.insert("only", 7)
    lines = heap.dump().splitlines()
    assert lines[0] == "HEAP SIZE 1"
    assert "'only'" in lines[1]
    assert len(lines) == 2


@given(st.lists(st.integers(min_value=0, max_value=2**64 - 1), max_size=60))
def test_pops_are_sorted_and_complete(weights):
    heap = MinHeap(len(weights))
    for ind, weight in enumerate(weights):
        heap.insert(ind, weight)
    out = [heap.pop() for _ in range(len(weights))]
    assert [w for _, w in out] == sorted(weights)
    assert sorted(e for e, _ in out) == list(range(len(weights)))
    assert len(heap) == 0