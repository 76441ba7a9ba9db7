import pytest
from hypothesis import given
from hypothesis import strategies as st

from schedkit.atq import QueueFullError
from schedkit.dhq import DHQ, DhqMode, Strand, StrandImbalanceError


def drain(dhq):
    out = []
    while len(dhq):
        out.append(dhq.pop())
    return out


def test_auto_insert_balances_strands():
    dhq = DHQ(fifo=True, capacity=16)
    for i in range(5):
        dhq.insert(i)
    assert dhq.nr_queued_strand(Strand.A) == 3
    assert dhq.nr_queued_strand(Strand.B) == 2
    assert len(dhq) == 5


def test_alternating_pop():
    dhq = DHQ(fifo=True, capacity=16, mode=DhqMode.ALTERNATING)
    for i in range(1, 5):
        dhq.insert(i)
    assert dhq.peek() == 1
    assert drain(dhq) == [1, 2, 3, 4]


def test_alternating_falls_back_to_other_strand():
    dhq = DHQ(fifo=True, capacity=16, mode=DhqMode.ALTERNATING)
    for name in "abc":
        dhq.insert(name, Strand.B)
    assert drain(dhq) == ["a", "b", "c"]
    assert dhq.last_strand is Strand.B


def test_priority_pop_orders_by_vtime():
    dhq = DHQ(fifo=False, capacity=16, mode=DhqMode.PRIORITY)
    dhq.insert_vtime("x", 5, Strand.A)
    dhq.insert_vtime("y", 3, Strand.B)
    dhq.insert_vtime("z", 4, Strand.A)
    assert dhq.peek() == "y"
    assert drain(dhq) == ["y", "z", "x"]


@given(st.lists(st.integers(min_value=0, max_value=10_000), max_size=30))
def test_priority_pops_sorted(vtimes):
    dhq = DHQ(fifo=False, capacity=64, mode=DhqMode.PRIORITY)
    for v in vtimes:
        dhq.insert_vtime(v, v)
    assert drain(dhq) == sorted(vtimes)


def test_balanced_prefers_larger_strand():
    dhq = DHQ(fifo=True, capacity=16, mode=DhqMode.BALANCED)
    for name in ("a1", "a2", "a3"):
        dhq.insert(name, Strand.A)
    dhq.insert("b1", Strand.B)
    assert dhq.peek() == "a1"
    assert drain(dhq) == ["a1", "a2", "a3", "b1"]


def test_fifo_mismatch():
    fifo = DHQ(fifo=True, capacity=4)
    with pytest.raises(ValueError):
        fifo.insert_vtime("x", 1)
    vt = DHQ(fifo=False, capacity=4)
    with pytest.raises(ValueError):
        vt.insert("x")
    assert len(fifo) == 0 and len(vt) == 0


def test_capacity_limits():
    dhq = DHQ(fifo=True, capacity=2)
    dhq.insert("a", Strand.A)
    with pytest.raises(QueueFullError):
        dhq.insert("a2", Strand.A)
    dhq.insert("b", Strand.B)
    with pytest.raises(QueueFullError):
        dhq.insert("c")
    assert len(dhq) == 2


def test_imbalance_limit():
    dhq = DHQ(fifo=True, capacity=16, max_imbalance=1)
    dhq.insert("a", Strand.A)
    with pytest.raises(StrandImbalanceError):
        dhq.insert("a2", Strand.A)
    dhq.insert("b", Strand.B)
    dhq.insert("a2", Strand.A)
    assert dhq.nr_queued_strand(Strand.A) == 2


def test_pop_and_peek_strand():
    dhq = DHQ(fifo=True, capacity=16)
    dhq.insert("a", Strand.A)
    dhq.insert("b", Strand.B)
    assert dhq.peek_strand(Strand.B) == "b"
    assert dhq.pop_strand(Strand.B) == "b"
    assert dhq.pop_strand(Strand.B) is None
    assert dhq.peek_strand(Strand.B) is None
    assert dhq.dequeue_count[Strand.B] == 1
    assert len(dhq) == 1


def test_empty_queue():
    dhq = DHQ()
    assert dhq.pop() is None
    assert dhq.peek() is None


def test_fifo_within_strand():
    dhq = DHQ(fifo=True, capacity=16)
    for i in range(4):
        dhq.insert(i, Strand.A)
    assert [dhq.pop_strand(Strand.A) for _ in range(4)] == [0, 1, 2, 3]


def test_invalid_arguments():
    with pytest.raises(ValueError):
        DHQ(capacity=-1)
    with pytest.raises(ValueError):
        DHQ(max_imbalance=-1)