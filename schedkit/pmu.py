"""Per-task accumulation of hardware performance counter deltas."""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field

_U64_MASK = (1 << 64) - 1


@dataclass
class PmuCounters:
    """Counter snapshot for one task.

    ``start`` holds the counter value at the start of the current interval,
    ``agg`` the accumulated deltas, and ``gen`` the tracker generation the
    values belong to.
    """

    start: list[int] = field(default_factory=list)
    agg: list[int] = field(default_factory=list)
    switched: bool = False
    gen: int = 0


class PmuTracker:
    """Tracks installed counter events and per-task aggregated deltas.

    Installing or uninstalling an event bumps the generation, which lazily
    invalidates every task's previous measurements.
    """

    def __init__(self, max_counters: int = 1) -> None:
        if max_counters < 1:
            raise ValueError(f"max_counters must be positive, got {max_counters}")
        self.max_counters = max_counters
        self.event_idx = [0] * max_counters
        # Start at 1 so that freshly registered tasks (gen 0) are invalid.
        self.gen = 1
        self.tasks: dict[Hashable, PmuCounters] = {}

    def _storage(self, task: Hashable) -> PmuCounters:
        cntrs = self.tasks.get(task)
        if cntrs is None:
            cntrs = PmuCounters(
                start=[0] * self.max_counters, agg=[0] * self.max_counters
            )
            self.tasks[task] = cntrs
        return cntrs

    def _installed(self) -> Iterator[int]:
        return (idx for idx, event in enumerate(self.event_idx) if event)

    def _index_of(self, event: int) -> int | None:
        try:
            return self.event_idx.index(event)
        except ValueError:
            return None

    def install(self, event: int) -> None:
        """Start tracking ``event`` in the first free slot."""
        if event == 0:
            raise ValueError("event 0 marks a free slot and cannot be installed")
        idx = self._index_of(0)
        if idx is None:
            raise OverflowError("no free counter slot")
        self.event_idx[idx] = event
        self.gen += 1

    def uninstall(self, event: int) -> None:
        """Stop tracking ``event``."""
        idx = self._index_of(event) if event else None
        if idx is None:
            raise KeyError(event)
        self.event_idx[idx] = 0
        self.gen += 1

    def task_init(self, task: Hashable) -> None:
        """Register ``task``; its values stay invalid until first scheduled."""
        self._storage(task).gen = 0

    def task_fini(self, task: Hashable) -> None:
        """Forget ``task``."""
        self.tasks.pop(task, None)

    def event_start(self, task: Hashable, counter: int, update: bool = False) -> None:
        """Begin an interval for ``task`` at counter reading ``counter``.

        With ``update``, the delta since the previous start is added first.
        """
        cntrs = self._storage(task)
        for idx in self._installed():
            if cntrs.gen != self.gen:
                cntrs.agg[idx] = 0
            if update:
                delta = (counter - cntrs.start[idx]) & _U64_MASK
                cntrs.agg[idx] = (cntrs.agg[idx] + delta) & _U64_MASK
            cntrs.start[idx] = counter
        cntrs.gen = self.gen

    def event_stop(
        self, task: Hashable, counter: int, enabled: int = 0, running: int = 0
    ) -> None:
        """End an interval for ``task`` at counter reading ``counter``.

        ``enabled`` and ``running`` are the counter's enabled and running
        times; a mismatch marks the task as having been multiplexed.
        """
        cntrs = self._storage(task)
        for idx in self._installed():
            if cntrs.gen != self.gen:
                cntrs.agg[idx] = 0
                continue
            if not cntrs.switched and enabled != running:
                cntrs.switched = True
            delta = (counter - cntrs.start[idx]) & _U64_MASK
            cntrs.agg[idx] = (cntrs.agg[idx] + delta) & _U64_MASK
        cntrs.gen = self.gen

    def read(self, task: Hashable, event: int, clear: bool = False) -> int:
        """Return the accumulated value of ``event`` for ``task``."""
        idx = self._index_of(event)
        if idx is None:
            raise ValueError(f"event {event} is not installed")
        cntrs = self.tasks.get(task)
        if cntrs is None:
            raise KeyError(task)
        value = cntrs.agg[idx]
        if clear:
            cntrs.agg[idx] = 0
        return value