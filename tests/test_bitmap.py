import pytest
from hypothesis import given, strategies as st

from schedkit.bitmap import Bitmap

NR_CPUS = 200
cpu_sets = st.sets(st.integers(min_value=0, max_value=NR_CPUS - 1), max_size=40)


def make(cpus):
    mask = Bitmap(NR_CPUS)
    for cpu in cpus:
        mask.set_cpu(cpu)
    return mask


def test_word_count_covers_cpus():
    assert len(Bitmap(64).words) == 1
    assert len(Bitmap(65).words) == 2


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        Bitmap(0)


def test_set_test_clear_roundtrip():
    mask = Bitmap(NR_CPUS)
    mask.set_cpu(70)
    assert mask.test_cpu(70)
    assert not mask.test_cpu(69)
    mask.clear_cpu(70)
    assert not mask.test_cpu(70)
    assert mask.is_empty()


def test_out_of_range_cpu_raises():
    mask = Bitmap(64)
    with pytest.raises(IndexError):
        mask.set_cpu(64)
    with pytest.raises(IndexError):
        mask.test_cpu(-1)


def test_test_and_clear():
    mask = make([5])
    assert mask.test_and_clear_cpu(5) is True
    assert mask.test_and_clear_cpu(5) is False
    assert mask.is_empty()


def test_clear_empties():
    mask = make([1, 100, 150])
    mask.clear()
    assert list(mask.cpus()) == []


@given(cpu_sets, cpu_sets)
def test_and_or_match_set_semantics(a, b):
    dst = Bitmap(NR_CPUS)
    dst.and_(make(a), make(b))
    assert set(dst.cpus()) == a & b
    dst.or_(make(a), make(b))
    assert set(dst.cpus()) == a | b


@given(cpu_sets, cpu_sets)
def test_contains_and_intersects(a, b):
    assert make(a).contains(make(b)) == (b <= a)
    assert make(a).intersects(make(b)) == bool(a & b)


@given(cpu_sets)
def test_cpus_sorted_roundtrip(cpus):
    assert list(make(cpus).cpus()) == sorted(cpus)


def test_copy_from_is_independent():
    src = make([3, 130])
    dst = Bitmap(NR_CPUS)
    dst.copy_from(src)
    src.clear_cpu(3)
    assert list(dst.cpus()) == [3, 130]


def test_mismatched_sizes_rejected():
    with pytest.raises(ValueError):
        Bitmap(64).copy_from(Bitmap(NR_CPUS))


def test_load_words_truncates_extra_input():
    mask = Bitmap(64)
    mask.load_words([5, 7])
    assert mask.words == [5]


def test_load_words_partial_keeps_tail():
    mask = make([130])
    mask.load_words([1])
    assert list(mask.cpus()) == [0, 130]


def test_format_one_line_per_word():
    mask = make([0, 64, 199])
    lines = mask.format().splitlines()
    assert len(lines) == len(mask.words)
    assert [int(line, 16) for line in lines] == mask.words