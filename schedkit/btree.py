"""B+ tree mapping integer keys to values, with fixed node fan-out."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterator
from typing import Any

LEAF_SIZE = 10
"""Node fan-out: leaves split at this many keys, internal nodes one below."""

MAX_DEPTH = 20
"""Upper bound on the number of levels a single split may climb."""


class BTNode:
    """A tree node.

    Leaves keep their values in ``values``; internal nodes keep their child
    nodes there, always one more than they have keys.
    """

    __slots__ = ("keys", "values", "parent", "leaf")

    def __init__(self, leaf: bool = True, parent: BTNode | None = None) -> None:
        self.keys: list[int] = []
        self.values: list[Any] = []
        self.parent = parent
        self.leaf = leaf

    def __repr__(self) -> str:
        kind = "leaf" if self.leaf else "node"
        return f"BTNode({kind}, keys={self.keys!r})"

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def child_index(self, child: BTNode) -> int:
        """Position of ``child`` among this node's children."""
        for ind, value in enumerate(self.values):
            if value is child:
                return ind
        raise ValueError(f"{child!r} is not a child of {self!r}")

    def drop_child(self, ind: int) -> None:
        """Remove child ``ind`` along with the key that bounds it."""
        nkeys = len(self.keys)
        if not nkeys or ind > nkeys:
            raise IndexError(f"internal removal overflow ({ind}, {nkeys})")
        del self.keys[ind if ind < nkeys else nkeys - 1]
        del self.values[ind]


class BTree:
    """A B+ tree with unique integer keys."""

    def __init__(self) -> None:
        self.root = BTNode(leaf=True)

    def _find_leaf(self, key: int) -> BTNode:
        node = self.root
        while not node.leaf:
            # Keys equal to a separator live to its right.
            node = node.values[bisect_right(node.keys, key)]
        return node

    # Insertion

    @staticmethod
    def _split_leaf(new: BTNode, old: BTNode) -> int:
        off = LEAF_SIZE // 2
        new.keys = old.keys[off:]
        new.values = old.values[off:]
        del old.keys[off:]
        del old.values[off:]
        return new.keys[0]

    @staticmethod
    def _split_internal(new: BTNode, old: BTNode) -> int:
        off = LEAF_SIZE // 2
        key = old.keys[off]
        new.keys = old.keys[off + 1 :]
        new.values = old.values[off + 1 :]
        for child in new.values:
            child.parent = new
        del old.keys[off:]
        del old.values[off + 1 :]
        return key

    def _split(self, node: BTNode) -> None:
        for _ in range(MAX_DEPTH):
            parent = node.parent
            new = BTNode(leaf=node.leaf, parent=parent)
            if node.leaf:
                key = self._split_leaf(new, node)
            else:
                key = self._split_internal(new, node)

            if parent is None:
                root = BTNode(leaf=False)
                root.keys = [key]
                root.values = [node, new]
                node.parent = new.parent = root
                self.root = root
                return

            ind = bisect_right(parent.keys, key)
            parent.keys.insert(ind, key)
            parent.values.insert(ind + 1, new)

            node = parent
            if len(node.keys) < LEAF_SIZE - 1:
                return

        raise OverflowError("node still full after splitting")

    def insert(self, key: int, value: Any, update: bool = False) -> None:
        """Store ``value`` under ``key``.

        An existing key is overwritten only with ``update``; otherwise
        :class:`ValueError` is raised.
        """
        leaf = self._find_leaf(key)
        ind = bisect_left(leaf.keys, key)
        if ind < len(leaf.keys) and leaf.keys[ind] == key:
            if not update:
                raise ValueError(f"key {key!r} already present")
            leaf.values[ind] = value
            return

        leaf.keys.insert(ind, key)
        leaf.values.insert(ind, value)
        if len(leaf.keys) >= LEAF_SIZE:
            self._split(leaf)

    # Removal

    @staticmethod
    def _steal_left(parent: BTNode, ind: int, left: BTNode, right: BTNode) -> None:
        key = left.keys.pop()
        child = left.values.pop()
        right.keys.insert(0, parent.keys[ind])
        right.values.insert(0, child)
        child.parent = right
        parent.keys[ind] = key

    @staticmethod
    def _steal_right(parent: BTNode, ind: int, left: BTNode, right: BTNode) -> None:
        key = right.keys.pop(0)
        child = right.values.pop(0)
        left.keys.append(parent.keys[ind])
        left.values.append(child)
        child.parent = left
        parent.keys[ind] = key

    def _balance(self, node: BTNode, parent: BTNode, ind: int) -> bool:
        """Borrow a child from a sibling; report whether that worked."""
        if ind > 0:
            sibling = parent.values[ind - 1]
            if len(sibling.keys) - 1 >= LEAF_SIZE // 2:
                self._steal_left(parent, ind - 1, sibling, node)
                return True

        if ind >= len(parent.keys):
            return False
        sibling = parent.values[ind + 1]
        if len(sibling.keys) - 1 < LEAF_SIZE // 2:
            return False
        self._steal_right(parent, ind, node, sibling)
        return True

    @staticmethod
    def _merge(parent: BTNode, ind: int) -> None:
        if ind > 0:
            ind -= 1
        left = parent.values[ind]
        right = parent.values[ind + 1]

        # The merged node must keep room for further keys.
        if len(left.keys) + len(right.keys) + 1 >= LEAF_SIZE - 1:
            return

        left.keys.append(parent.keys[ind])
        left.keys.extend(right.keys)
        for child in right.values:
            child.parent = left
        left.values.extend(right.values)

        del parent.keys[ind]
        del parent.values[ind + 1]

    def _rebalance(self, parent: BTNode, node: BTNode) -> None:
        ind = parent.child_index(node)
        if not self._balance(node, parent, ind):
            self._merge(parent, ind)

    def remove(self, key: int) -> None:
        """Remove ``key``; raise :class:`KeyError` if it is absent."""
        leaf = self._find_leaf(key)
        ind = bisect_left(leaf.keys, key)
        if ind >= len(leaf.keys) or leaf.keys[ind] != key:
            raise KeyError(key)

        del leaf.keys[ind]
        del leaf.values[ind]

        # Leaves are not load balanced; only empty ones are unlinked.
        if leaf.keys or leaf.is_root:
            return

        parent = leaf.parent
        assert parent is not None
        parent.drop_child(parent.child_index(leaf))
        leaf.parent = None

        node = parent
        while not node.is_root and len(node.keys) < LEAF_SIZE // 2:
            parent = node.parent
            assert parent is not None
            self._rebalance(parent, node)
            node = parent

        if node.is_root and not node.leaf and not node.keys:
            self.root = node.values[0]
            self.root.parent = None

    # Queries

    def find(self, key: int) -> Any:
        """Return the value stored under ``key``."""
        leaf = self._find_leaf(key)
        ind = bisect_left(leaf.keys, key)
        if ind == len(leaf.keys) or leaf.keys[ind] != key:
            raise KeyError(key)
        return leaf.values[ind]

    def items(self) -> Iterator[tuple[int, Any]]:
        """Yield ``(key, value)`` pairs in key order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.leaf:
                yield from zip(node.keys, node.values)
            else:
                stack.extend(reversed(node.values))

    def format(self) -> str:
        """Return a pre-order dump of every node with its depth and position."""
        lines: list[str] = []
        stack: list[tuple[int, int, BTNode]] = [(0, 0, self.root)]
        while stack:
            depth, ind, node = stack.pop()
            kind = "LEAF" if node.leaf else "NODE"
            lines.append(f"==== [{depth}/{ind}] BTREE {kind} ====")
            lines.append("[KEY] " + " ".join(str(key) for key in node.keys))
            if node.leaf:
                lines.append("[VAL] " + " ".join(repr(v) for v in node.values))
            else:
                stack.extend(
                    (depth + 1, pos, child)
                    for pos, child in reversed(list(enumerate(node.values)))
                )
        return "\n".join(lines)