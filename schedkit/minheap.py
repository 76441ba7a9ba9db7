"""Fixed-capacity binary min-heap of (element, weight) pairs."""

from __future__ import annotations

from typing import Any


class HeapFullError(Exception):
    """Raised when inserting into a heap that is already at capacity."""


class MinHeap:
    """A binary min-heap ordered by weight, with a fixed capacity.

    Ties are resolved by the heap's sift order rather than by insertion
    order, so equal weights carry no FIFO guarantee.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self._elems: list[tuple[Any, int]] = []

    def __len__(self) -> int:
        return len(self._elems)

    def _swap(self, a: int, b: int) -> None:
        elems = self._elems
        elems[a], elems[b] = elems[b], elems[a]

    def _sift_up(self) -> None:
        elems = self._elems
        ind = len(elems) - 1
        while ind > 0:
            parent = (ind - 1) >> 1
            if elems[parent][1] <= elems[ind][1]:
                break
            self._swap(parent, ind)
            ind = parent

    def _sift_down(self) -> None:
        elems = self._elems
        size = len(elems)
        ind = 0
        while ind < size:
            nxt = ind
            for child in (2 * ind + 1, 2 * ind + 2):
                if child < size and elems[child][1] < elems[nxt][1]:
                    nxt = child
            if nxt == ind:
                break
            self._swap(nxt, ind)
            ind = nxt

    def insert(self, elem: Any, weight: int) -> None:
        """Add ``elem`` with the given weight."""
        if len(self._elems) >= self.capacity:
            raise HeapFullError(f"heap is full (capacity {self.capacity})")
        self._elems.append((elem, weight))
        self._sift_up()

    def pop(self) -> tuple[Any, int]:
        """Remove and return the ``(elem, weight)`` pair of least weight."""
        if not self._elems:
            raise IndexError("pop from empty heap")
        top = self._elems[0]
        last = self._elems.pop()
        if self._elems:
            self._elems[0] = last
            self._sift_down()
        return top

    def peek(self) -> tuple[Any, int]:
        """Return the ``(elem, weight)`` pair of least weight without removing it."""
        if not self._elems:
            raise IndexError("peek at empty heap")
        return self._elems[0]

    def dump(self) -> str:
        """Return a textual dump of the heap in storage order."""
        lines = [f"HEAP SIZE {len(self._elems)}"]
        lines.extend(
            f"[{ind}] ({elem!r}, {weight})"
            for ind, (elem, weight) in enumerate(self._elems)
        )
        return "\n".join(lines)