# schedkit

Data structures for building CPU schedulers, in plain Python. The package
uses only the standard library.

## Modules

| Module | Contents |
| --- | --- |
| `schedkit.minheap` | `MinHeap`, a fixed-capacity binary min-heap of `(elem, weight)` pairs with `insert`, `pop`, `peek` and `dump`. When it is full, `insert` raises `HeapFullError`. |
| `schedkit.bitmap` | `Bitmap`, a CPU bitmap sized for `nr_cpu_ids` CPUs and stored as 64-bit words. It has `set_cpu`, `clear_cpu`, `test_cpu`, `test_and_clear_cpu`, `clear`, `and_`, `or_`, `is_empty`, `copy_from`, `load_words`, `contains`, `intersects`, `cpus` and `format`. |
| `schedkit.cpumask` | Functions that work on a `Bitmap`: `pick_any_cpu`, `pick_any_cpu_from`, `vacate_cpu`, `subset_cpumask`, `intersects_cpumask` and `and_cpumask`. When no CPU is left to pick, they raise `NoCpuAvailableError`. |
| `schedkit.lvqueue` | `LvQueue`, a circular-array work-stealing deque that doubles in size up to `orders` times. The owner calls `push` and `pop` (LIFO), and other consumers call `steal` (oldest first). When the deque cannot grow any further, it raises `QueueCapacityError`. |
| `schedkit.pmu` | `PmuTracker` and `PmuCounters`. They keep per-task sums of performance-counter deltas, and install or uninstall an event by bumping a generation. |
| `schedkit.rbtree` | `RBTree`, a red-black tree with integer keys. It can own its nodes (`AllocMode.ALLOC`, which uses `insert` and `remove`) or take caller-supplied `RBNode`s (`AllocMode.NOALLOC`, which uses `insert_node` and `remove_node`). Duplicate keys follow `InsertMode.DEFAULT`, `UPDATE` or `DUPLICATE`. It also has `find`, `least`, `pop`, `destroy`, `integrity_check` and `format`, and it iterates in key order. |
| `schedkit.btree` | `BTree`, a B+ tree from unique integer keys to values, with node fan-out `LEAF_SIZE` (10). It has `insert`, `remove`, `find`, `items` and `format`. |
| `schedkit.atq` | `ATQ`, a bounded, locked task queue built on `RBTree`. It orders tasks either FIFO or by vtime and holds `QueuedTask` objects. Module-level `cancel(task)` takes a task out of whichever queue holds it. |
| `schedkit.dhq` | `DHQ`, a queue of two `MinHeap` strands (`Strand.A`, `Strand.B`, or `Strand.AUTO` for the emptier one). `pop` chooses a strand by `DhqMode.ALTERNATING`, `PRIORITY` or `BALANCED`. `max_imbalance` limits how far one strand may outgrow the other, and going past it raises `StrandImbalanceError`. |

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

### Heaps and CPU masks

```python
from schedkit.minheap import MinHeap
from schedkit.bitmap import Bitmap
from schedkit.cpumask import pick_any_cpu, vacate_cpu

heap = MinHeap(capacity=8)
heap.insert("task-a", 30)
heap.insert("task-b", 10)
print(heap.pop())            # ('task-b', 10)

mask = Bitmap(nr_cpu_ids=128)
mask.set_cpu(3)
mask.set_cpu(70)
print(list(mask.cpus()))     # [3, 70]
cpu = pick_any_cpu(mask)     # 3, now cleared from the mask
vacate_cpu(mask, cpu)        # put it back
```

### Trees

```python
from schedkit.rbtree import RBTree
from schedkit.btree import BTree

tree = RBTree()
tree.insert(5, "five")
tree.insert(1, "one")
print(tree.find(5))          # 'five'
print(list(tree))            # [(1, 'one'), (5, 'five')]

bt = BTree()
for key in range(20):
    bt.insert(key, key * key)
bt.remove(3)
print(bt.find(4))            # 16
```

### Task queues

```python
from schedkit.atq import ATQ, QueuedTask, cancel

queue = ATQ(fifo=False, capacity=16)
first, second = QueuedTask(data="a"), QueuedTask(data="b")
queue.insert_vtime(first, 50)
queue.insert_vtime(second, 20)
print(queue.pop().data)      # 'b'
print(cancel(first))         # True: removed from the queue
print(queue.pop())           # None: the queue is empty
```

## Errors

Invalid operations raise exceptions, not return codes. The package's own exceptions are `HeapFullError`, `NoCpuAvailableError`, `QueueCapacityError`, `IntegrityError`, `QueueFullError` and `StrandImbalanceError`. Python's built-in exceptions are raised where they fit:

- `KeyError` for a missing key.
- `IndexError` for popping from an empty heap, deque or tree.
- `ValueError` for misuse, such as giving a vtime to a FIFO queue.

There are three exceptions to that rule:

- `ATQ.pop`, `ATQ.peek` and the `DHQ` pop and peek methods return `None` when the queue is empty.
- `cancel` returns `False` when the task was not queued.
- `pick_any_cpu_from` returns a `(cpu, word_index)` pair.

## What this package does not do

- These are in-memory data structures only. They do not attach to or drive an operating-system scheduler.
- They do not read hardware performance counters. The caller passes counter readings to `PmuTracker.event_start` and `event_stop`.
- There is no command-line tool, and nothing is saved to disk.
- `ATQ` and `DHQ` guard their operations with a `threading.Lock`. The other structures are not synchronised.