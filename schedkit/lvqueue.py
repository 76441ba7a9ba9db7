"""Growable work-stealing deque: the owner pushes and pops, others steal."""

from __future__ import annotations

from typing import Any


class QueueCapacityError(OverflowError):
    """Raised when the queue cannot grow any further."""


class LvQueue:
    """A circular-array deque that doubles in size up to ``orders`` times.

    ``push`` and ``pop`` work at the bottom (LIFO for the owner) while
    ``steal`` takes from the top (oldest first).
    """

    def __init__(self, base_size: int = 64, orders: int = 8) -> None:
        if base_size < 2:
            raise ValueError(f"base_size must be at least 2, got {base_size}")
        if orders < 1:
            raise ValueError(f"orders must be at least 1, got {orders}")
        self._base_size = base_size
        self._orders = orders
        self._order = 0
        self._data: list[Any] = [None] * base_size
        self._bottom = 0
        self._top = 0

    def __len__(self) -> int:
        return self._bottom - self._top

    def _slot(self, ind: int) -> int:
        return ind % len(self._data)

    def _grow(self) -> None:
        next_order = self._order + 1
        if next_order >= self._orders:
            raise QueueCapacityError("queue has reached its largest size")
        new = [None] * (self._base_size << next_order)
        for ind in range(self._top, self._bottom):
            new[ind % len(new)] = self._data[self._slot(ind)]
        self._data = new
        self._order = next_order

    def push(self, value: Any) -> None:
        """Add ``value`` at the bottom."""
        if len(self) >= len(self._data) - 1:
            self._grow()
        self._data[self._slot(self._bottom)] = value
        self._bottom += 1

    def pop(self) -> Any:
        """Remove and return the most recently pushed value."""
        if not len(self):
            raise IndexError("pop from empty queue")
        self._bottom -= 1
        slot = self._slot(self._bottom)
        value, self._data[slot] = self._data[slot], None
        if self._bottom == self._top:
            self._bottom = self._top = 0
        return value

    def steal(self) -> Any:
        """Remove and return the oldest value."""
        if not len(self):
            raise IndexError("steal from empty queue")
        slot = self._slot(self._top)
        value, self._data[slot] = self._data[slot], None
        self._top += 1
        return value