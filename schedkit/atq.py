"""Arena task queue: a bounded, locked queue of tasks ordered FIFO or by vtime."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from schedkit.rbtree import AllocMode, InsertMode, RBNode, RBTree


class QueueFullError(OverflowError):
    """Raised when inserting into a queue that is at capacity."""


@dataclass(eq=False)
class QueuedTask:
    """Queue membership state for one task.

    ``node`` is the tree node the task is linked through and ``atq`` the
    queue that currently holds the task, if any. ``data`` is free for the
    caller.
    """

    data: Any = None
    node: RBNode = field(default_factory=RBNode, repr=False)
    atq: ATQ | None = field(default=None, repr=False)


class ATQ:
    """A task queue ordered either by insertion sequence or by vtime.

    A FIFO queue accepts only :meth:`insert` (or a vtime of ``None``); a
    vtime queue accepts only explicit vtimes. Ties between equal vtimes are
    not ordered.
    """

    def __init__(self, fifo: bool = True, capacity: int = 2**64 - 1) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.fifo = fifo
        self.capacity = capacity
        self._tree = RBTree(AllocMode.NOALLOC, InsertMode.DUPLICATE)
        self._size = 0
        self._seq = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return self._size

    @contextmanager
    def locked(self) -> Iterator[ATQ]:
        """Hold the queue lock; use the ``*_unlocked`` methods inside."""
        with self._lock:
            yield self

    def insert_vtime_unlocked(self, task: QueuedTask, vtime: int | None) -> None:
        """Insert ``task`` keyed by ``vtime`` (``None`` for FIFO) without locking."""
        if self._size >= self.capacity:
            raise QueueFullError(f"queue is full (capacity {self.capacity})")
        if (vtime is None) != self.fifo:
            raise ValueError(
                "FIFO queue needs no vtime" if self.fifo else "vtime queue needs a vtime"
            )
        if task.atq is not None:
            raise ValueError("task is already queued")

        if vtime is None:
            # A sequence number lost to a failed insert is never reused; keys
            # only need to grow, not to be consecutive.
            key = self._seq
            self._seq += 1
        else:
            key = vtime

        node = task.node
        node.key = key
        node.value = task
        self._tree.insert_node(node)

        task.atq = self
        self._size += 1

    def insert_vtime(self, task: QueuedTask, vtime: int | None) -> None:
        """Insert ``task`` keyed by ``vtime``."""
        with self._lock:
            self.insert_vtime_unlocked(task, vtime)

    def insert(self, task: QueuedTask) -> None:
        """Append ``task`` to a FIFO queue."""
        self.insert_vtime(task, None)

    def remove_unlocked(self, task: QueuedTask) -> None:
        """Remove ``task`` from this queue without locking."""
        if task.atq is not self:
            raise ValueError("task is not in this queue")
        try:
            self._tree.remove_node(task.node)
        finally:
            task.atq = None
        self._size -= 1

    def remove(self, task: QueuedTask) -> None:
        """Remove ``task`` from this queue."""
        with self._lock:
            self.remove_unlocked(task)

    def pop(self) -> QueuedTask | None:
        """Remove and return the first task, or ``None`` if the queue is empty."""
        with self._lock:
            if not self._size:
                return None
            _, task = self._tree.pop()
            self._size -= 1
            task.atq = None
            return task

    def peek(self) -> QueuedTask | None:
        """Return the first task without removing it, or ``None`` if empty."""
        with self._lock:
            if not self._size:
                return None
            _, task = self._tree.least()
            return task


def cancel(task: QueuedTask) -> bool:
    """Take ``task`` out of whatever queue holds it.

    Returns whether this call removed it; ``False`` means the task was not
    queued or a concurrent pop got to it first.
    """
    atq = task.atq
    if atq is None:
        return False
    with atq.locked():
        if task.atq is not atq:
            return False
        atq.remove_unlocked(task)
        return True