"""Scheduler data structures: min-heaps, CPU bitmaps and masks, work-stealing deques,
performance-counter tracking, red-black and B+ trees, and task queues."""

__version__ = "0.1.0"

__all__ = [
    "atq",
    "bitmap",
    "btree",
    "cpumask",
    "dhq",
    "lvqueue",
    "minheap",
    "pmu",
    "rbtree",
]