"""Double helix queue: two heap-ordered strands consumed in a chosen pattern."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Any

from schedkit.atq import QueueFullError
from schedkit.minheap import HeapFullError, MinHeap

_MISSING = object()


class Strand(Enum):
    """One of the two strands, or a request to pick the emptier one."""

    A = "a"
    B = "b"
    AUTO = "auto"


class DhqMode(Enum):
    """How :meth:`DHQ.pop` chooses between the strands."""

    ALTERNATING = "alternating"
    PRIORITY = "priority"
    BALANCED = "balanced"


class StrandImbalanceError(Exception):
    """Raised when an insert would make one strand too much larger than the other."""


def _other(strand: Strand) -> Strand:
    return Strand.B if strand is Strand.A else Strand.A


class DHQ:
    """A queue of two strands, each a min-heap of half the total capacity.

    FIFO queues key items by a per-strand sequence number; vtime queues key
    them by the given vtime. ``max_imbalance`` above zero limits how many
    more items one strand may hold than the other on insert.
    """

    def __init__(
        self,
        fifo: bool = True,
        capacity: int = 1024,
        mode: DhqMode = DhqMode.ALTERNATING,
        max_imbalance: int = 0,
    ) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        if max_imbalance < 0:
            raise ValueError(f"max_imbalance must be non-negative, got {max_imbalance}")
        self.fifo = fifo
        self.capacity = capacity
        self.mode = DhqMode(mode)
        self.max_imbalance = max_imbalance
        self.last_strand = Strand.B
        self._heaps = {Strand.A: MinHeap(capacity // 2), Strand.B: MinHeap(capacity // 2)}
        self._seq = {Strand.A: 0, Strand.B: 0}
        self.dequeue_count = {Strand.A: 0, Strand.B: 0}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._heaps[Strand.A]) + len(self._heaps[Strand.B])

    def nr_queued_strand(self, strand: Strand) -> int:
        """Number of items on ``strand``."""
        return len(self._heaps[Strand.A if strand is Strand.A else Strand.B])

    def _select(self, strand: Strand) -> Strand:
        if strand is Strand.AUTO:
            if len(self._heaps[Strand.A]) <= len(self._heaps[Strand.B]):
                return Strand.A
            return Strand.B
        return Strand(strand)

    def _insert_strand(self, item: Any, strand: Strand, key: int) -> None:
        with self._lock:
            if len(self) >= self.capacity:
                raise QueueFullError(f"queue is full (capacity {self.capacity})")
            if self.max_imbalance > 0:
                mine = len(self._heaps[strand])
                other = len(self._heaps[_other(strand)])
                if mine >= other + self.max_imbalance:
                    raise StrandImbalanceError(
                        f"strand {strand.name} would exceed imbalance {self.max_imbalance}"
                    )
            try:
                self._heaps[strand].insert(item, key)
            except HeapFullError as exc:
                raise QueueFullError(f"strand {strand.name} is full") from exc

    def insert(self, item: Any, strand: Strand = Strand.AUTO) -> None:
        """Append ``item`` to a strand of a FIFO queue."""
        if not self.fifo:
            raise ValueError("vtime queue needs a vtime")
        selected = self._select(strand)
        # A sequence number lost to a failed insert is not reused.
        key = self._seq[selected]
        self._seq[selected] += 1
        self._insert_strand(item, selected, key)

    def insert_vtime(self, item: Any, vtime: int, strand: Strand = Strand.AUTO) -> None:
        """Insert ``item`` keyed by ``vtime`` into a strand of a vtime queue."""
        if self.fifo:
            raise ValueError("FIFO queue needs no vtime")
        self._insert_strand(item, self._select(strand), vtime)

    def _pop_strand_nolock(self, strand: Strand) -> Any:
        heap = self._heaps[strand]
        if not len(heap):
            return _MISSING
        item, _ = heap.pop()
        self.dequeue_count[strand] += 1
        return item

    def _peek_strand_nolock(self, strand: Strand) -> Any:
        heap = self._heaps[strand]
        if not len(heap):
            return _MISSING
        return heap.peek()[0]

    def _priority_strand(self) -> Strand:
        heap_a, heap_b = self._heaps[Strand.A], self._heaps[Strand.B]
        if not len(heap_b):
            return Strand.A
        if not len(heap_a):
            return Strand.B
        return Strand.A if heap_a.peek()[1] <= heap_b.peek()[1] else Strand.B

    def _balanced_strand(self) -> Strand:
        if len(self._heaps[Strand.A]) >= len(self._heaps[Strand.B]):
            return Strand.A
        return Strand.B

    def pop_strand(self, strand: Strand) -> Any:
        """Remove and return the first item of ``strand``, or ``None`` if empty."""
        with self._lock:
            item = self._pop_strand_nolock(self._select(strand))
        return None if item is _MISSING else item

    def pop(self) -> Any:
        """Remove and return the next item as chosen by the mode, or ``None``."""
        with self._lock:
            if not len(self):
                return None

            if self.mode is DhqMode.ALTERNATING:
                strand = _other(self.last_strand)
                item = self._pop_strand_nolock(strand)
                if item is _MISSING:
                    strand = _other(strand)
                    item = self._pop_strand_nolock(strand)
                if item is not _MISSING:
                    self.last_strand = strand
            elif self.mode is DhqMode.PRIORITY:
                strand = self._priority_strand()
                item = self._pop_strand_nolock(strand)
                if item is _MISSING:
                    strand = _other(strand)
                    item = self._pop_strand_nolock(strand)
                if item is not _MISSING:
                    self.last_strand = strand
            else:
                strand = self._balanced_strand()
                item = self._pop_strand_nolock(strand)
                if item is _MISSING:
                    item = self._pop_strand_nolock(_other(strand))
                else:
                    self.last_strand = strand

        return None if item is _MISSING else item

    def peek_strand(self, strand: Strand) -> Any:
        """Return the first item of ``strand`` without removing it, or ``None``."""
        with self._lock:
            item = self._peek_strand_nolock(self._select(strand))
        return None if item is _MISSING else item

    def peek(self) -> Any:
        """Return the item :meth:`pop` would return, without removing it."""
        with self._lock:
            if not len(self):
                return None
            if self.mode is DhqMode.ALTERNATING:
                strand = _other(self.last_strand)
            elif self.mode is DhqMode.PRIORITY:
                strand = self._priority_strand()
            else:
                strand = self._balanced_strand()
            item = self._peek_strand_nolock(strand)
            if item is _MISSING:
                item = self._peek_strand_nolock(_other(strand))
        return None if item is _MISSING else item