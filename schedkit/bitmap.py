"""Fixed-size CPU bitmaps made of 64-bit words."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from itertools import islice

WORD_BITS = 64
_WORD_MASK = (1 << WORD_BITS) - 1


class Bitmap:
    """A bitmap large enough to hold ``nr_cpu_ids`` CPUs, stored as 64-bit words."""

    __slots__ = ("nr_cpu_ids", "words")

    def __init__(self, nr_cpu_ids: int) -> None:
        if nr_cpu_ids <= 0:
            raise ValueError(f"nr_cpu_ids must be positive, got {nr_cpu_ids}")
        self.nr_cpu_ids = nr_cpu_ids
        nbytes = -(-nr_cpu_ids // 8)
        self.words = [0] * (-(-nbytes // 8))

    def __repr__(self) -> str:
        return f"Bitmap(nr_cpu_ids={self.nr_cpu_ids}, cpus={list(self.cpus())})"

    def _locate(self, cpu: int) -> tuple[int, int]:
        if not 0 <= cpu < len(self.words) * WORD_BITS:
            raise IndexError(f"cpu {cpu} outside bitmap")
        return divmod(cpu, WORD_BITS)

    def _check_peer(self, other: Bitmap) -> None:
        if len(other.words) != len(self.words):
            raise ValueError("bitmaps have different sizes")

    def set_cpu(self, cpu: int) -> None:
        idx, bit = self._locate(cpu)
        self.words[idx] |= 1 << bit

    def clear_cpu(self, cpu: int) -> None:
        idx, bit = self._locate(cpu)
        self.words[idx] &= ~(1 << bit) & _WORD_MASK

    def test_cpu(self, cpu: int) -> bool:
        idx, bit = self._locate(cpu)
        return bool(self.words[idx] & (1 << bit))

    def test_and_clear_cpu(self, cpu: int) -> bool:
        """Clear ``cpu`` and report whether it was set."""
        idx, bit = self._locate(cpu)
        mask = 1 << bit
        if not self.words[idx] & mask:
            return False
        self.words[idx] &= ~mask & _WORD_MASK
        return True

    def clear(self) -> None:
        self.words = [0] * len(self.words)

    def and_(self, src1: Bitmap, src2: Bitmap) -> None:
        """Store ``src1 & src2`` into this bitmap."""
        self._check_peer(src1)
        self._check_peer(src2)
        self.words = [a & b for a, b in zip(src1.words, src2.words)]

    def or_(self, src1: Bitmap, src2: Bitmap) -> None:
        """Store ``src1 | src2`` into this bitmap."""
        self._check_peer(src1)
        self._check_peer(src2)
        self.words = [a | b for a, b in zip(src1.words, src2.words)]

    def is_empty(self) -> bool:
        return not any(self.words)

    def copy_from(self, src: Bitmap) -> None:
        self._check_peer(src)
        self.words = list(src.words)

    def load_words(self, words: Iterable[int]) -> None:
        """Overwrite leading words from ``words``; extra input words are ignored."""
        head = [word & _WORD_MASK for word in islice(words, len(self.words))]
        self.words[: len(head)] = head

    def contains(self, small: Bitmap) -> bool:
        """Return whether every CPU in ``small`` is also in this bitmap."""
        self._check_peer(small)
        return not any(~big & sm for big, sm in zip(self.words, small.words))

    def intersects(self, other: Bitmap) -> bool:
        self._check_peer(other)
        return any(a & b for a, b in zip(self.words, other.words))

    def cpus(self) -> Iterator[int]:
        """Yield the set CPUs in ascending order."""
        for idx, word in enumerate(self.words):
            while word:
                low = word & -word
                yield idx * WORD_BITS + low.bit_length() - 1
                word ^= low

    def format(self) -> str:
        """Return one hex line per word."""
        return "\n".join(f"{word:08x}" for word in self.words)