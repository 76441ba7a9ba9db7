"""Red-black tree keyed by integers, with caller-owned or tree-owned nodes."""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Any


class AllocMode(Enum):
    """Who owns the nodes of a tree."""

    ALLOC = "alloc"
    """The tree creates its nodes from ``insert(key, value)``."""
    NOALLOC = "noalloc"
    """The caller supplies nodes through ``insert_node``."""


class InsertMode(Enum):
    """What happens when a key being inserted is already present."""

    DEFAULT = "default"
    UPDATE = "update"
    DUPLICATE = "duplicate"


class IntegrityError(Exception):
    """Raised when the tree structure is found to be inconsistent."""


class RBNode:
    """A tree node. Nodes are compared by identity."""

    __slots__ = ("key", "value", "left", "right", "parent", "is_red")

    def __init__(self, key: int = 0, value: Any = None) -> None:
        self.key = key
        self.value = value
        self.left: RBNode | None = None
        self.right: RBNode | None = None
        self.parent: RBNode | None = None
        self.is_red = True

    def __repr__(self) -> str:
        color = "red" if self.is_red else "black"
        return f"RBNode(key={self.key!r}, value={self.value!r}, {color})"


def _child(node: RBNode, direction: int) -> RBNode | None:
    return node.right if direction else node.left


def _set_child(node: RBNode, direction: int, child: RBNode | None) -> None:
    if direction:
        node.right = child
    else:
        node.left = child


def _dir(node: RBNode) -> int:
    """Side of its parent ``node`` hangs on; 0 for the root."""
    parent = node.parent
    if parent is None:
        return 0
    return 0 if parent.left is node else 1


def _least(node: RBNode) -> RBNode:
    while node.left is not None:
        node = node.left
    return node


def _has_red_children(node: RBNode) -> bool:
    return any(c is not None and c.is_red for c in (node.left, node.right))


def _fix_self_refs(node: RBNode, other: RBNode) -> None:
    if node.left is node:
        node.left = other
    if node.right is node:
        node.right = other
    if node.parent is node:
        node.parent = other


class RBTree:
    """A red-black tree mapping integer keys to values."""

    def __init__(
        self,
        alloc: AllocMode = AllocMode.ALLOC,
        insert_mode: InsertMode = InsertMode.DEFAULT,
    ) -> None:
        self.alloc = AllocMode(alloc)
        self.insert_mode = InsertMode(insert_mode)
        self.root: RBNode | None = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[tuple[int, Any]]:
        """Yield ``(key, value)`` pairs in key order."""
        stack: list[RBNode] = []
        node = self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.key, node.value
            node = node.right

    # Structural helpers

    def _rotate(self, node: RBNode, direction: int) -> None:
        parent = node.parent
        parent_dir = _dir(node)
        if parent is None and self.root is not node:
            raise IntegrityError("rotating a parentless node that is not the root")
        pivot = _child(node, 1 - direction)
        if pivot is None:
            raise IntegrityError("rotation has no pivot node")

        moved = _child(pivot, direction)
        _set_child(node, 1 - direction, moved)
        if moved is not None:
            moved.parent = node

        _set_child(pivot, direction, node)
        node.parent = pivot

        pivot.parent = parent
        if parent is not None:
            _set_child(parent, parent_dir, pivot)
        else:
            self.root = pivot

    def _search(self, key: int) -> RBNode | None:
        """Node holding ``key``, or the last node visited looking for it."""
        node = self.root
        if node is None:
            return None
        while node.key != key:
            nxt = _child(node, 0 if key < node.key else 1)
            if nxt is None:
                break
            node = nxt
        return node

    def _least_upper_bound_leaf(self, key: int) -> RBNode:
        node = self.root
        assert node is not None
        while True:
            nxt = _child(node, 0 if key <= node.key else 1)
            if nxt is None:
                return node
            node = nxt

    def _adjust_neighbors(self, node: RBNode, direction: int) -> None:
        if node.left is not None:
            node.left.parent = node
        if node.right is not None:
            node.right.parent = node
        if node.parent is not None:
            _set_child(node.parent, direction, node)
        else:
            self.root = node

    def _replace(self, existing: RBNode, replacement: RBNode) -> None:
        direction = _dir(existing)
        replacement.is_red = existing.is_red
        replacement.left = existing.left
        replacement.right = existing.right
        replacement.parent = existing.parent
        self._adjust_neighbors(replacement, direction)
        existing.left = existing.right = existing.parent = None

    def _switch(self, a: RBNode, b: RBNode) -> None:
        """Exchange the positions of two nodes in the tree."""
        adir = _dir(a)
        bdir = _dir(b)
        a.is_red, b.is_red = b.is_red, a.is_red
        a.left, b.left = b.left, a.left
        a.right, b.right = b.right, a.right
        a.parent, b.parent = b.parent, a.parent
        _fix_self_refs(b, a)
        _fix_self_refs(a, b)
        self._adjust_neighbors(a, bdir)
        self._adjust_neighbors(b, adir)

    # Insertion

    def _link(self, node: RBNode) -> None:
        if self.root is None:
            self.root = node
            self._size += 1
            return

        key = node.key
        if self.insert_mode is InsertMode.DUPLICATE:
            parent = self._least_upper_bound_leaf(key)
        else:
            parent = self._search(key)
            assert parent is not None
            if parent.key == key:
                if self.insert_mode is InsertMode.UPDATE:
                    self._replace(parent, node)
                    return
                raise ValueError(f"key {key!r} already present")

        node.parent = parent
        if key <= parent.key:
            parent.left = node
        else:
            parent.right = node
        self._size += 1

        while True:
            parent = node.parent
            if parent is None or not parent.is_red:
                return
            grandparent = parent.parent
            if grandparent is None:
                parent.is_red = False
                return

            direction = _dir(parent)
            uncle = _child(grandparent, 1 - direction)
            if uncle is None or not uncle.is_red:
                if node is _child(parent, 1 - direction):
                    self._rotate(parent, direction)
                    node = parent
                    parent = _child(grandparent, direction)
                    assert parent is not None
                self._rotate(grandparent, 1 - direction)
                parent.is_red = False
                grandparent.is_red = True
                return

            parent.is_red = False
            uncle.is_red = False
            grandparent.is_red = True
            node = grandparent

    def insert(self, key: int, value: Any) -> None:
        """Insert ``key`` with ``value`` into a tree that owns its nodes."""
        if self.alloc is not AllocMode.ALLOC:
            raise ValueError("insert() needs a tree that allocates its nodes")
        self._link(RBNode(key, value))

    def insert_node(self, node: RBNode) -> None:
        """Insert a caller-owned node into a tree that does not allocate."""
        if self.alloc is AllocMode.ALLOC:
            raise ValueError("insert_node() needs a tree that does not allocate")
        node.is_red = True
        node.left = node.right = node.parent = None
        self._link(node)

    # Removal

    def _detach(self, node: RBNode) -> None:
        if node.left is not None and node.right is not None:
            # Move the node itself, not its payload, so embedded nodes stay valid.
            self._switch(_least(node.right), node)

        initial = node

        if (node.left is None) != (node.right is None):
            if node.is_red:
                raise IntegrityError("node with a single child is unexpectedly red")
            child = node.left if node.left is not None else node.right
            assert child is not None
            if not child.is_red:
                raise IntegrityError("only child is black")
            child.parent = node.parent
            if node.parent is not None:
                _set_child(node.parent, _dir(node), child)
            else:
                self.root = child
            child.is_red = False
            return

        parent = node.parent
        if parent is None:
            self.root = None
            return

        direction = _dir(node)
        _set_child(parent, direction, None)
        if node.is_red:
            return

        if _child(parent, 1 - direction) is None:
            raise IntegrityError("removed black node has no sibling")

        while True:
            if parent is None:
                return
            sibling = _child(parent, 1 - direction)
            if sibling is None:
                raise IntegrityError("removed black node has no sibling")

            if sibling.is_red:
                self._rotate(parent, direction)
                parent.is_red = True
                sibling.is_red = False
                sibling = _child(parent, 1 - direction)
                assert sibling is not None
                if _has_red_children(sibling):
                    break
                sibling.is_red = True
                parent.is_red = False
                return

            if _has_red_children(sibling):
                break

            if parent.is_red:
                parent.is_red = False
                sibling.is_red = True
                return

            sibling.is_red = True
            node = parent
            parent = node.parent
            direction = _dir(node)

        if node is not initial:
            direction = _dir(node)
            parent = node.parent
            assert parent is not None
            sibling = _child(parent, 1 - direction)
            assert sibling is not None

        close_nephew = _child(sibling, direction)
        distant_nephew = _child(sibling, 1 - direction)

        if distant_nephew is None or not distant_nephew.is_red:
            assert close_nephew is not None
            self._rotate(sibling, 1 - direction)
            sibling.is_red = True
            close_nephew.is_red = False
            distant_nephew = sibling
            sibling = close_nephew

        self._rotate(parent, direction)
        sibling.is_red = parent.is_red
        parent.is_red = False
        distant_nephew.is_red = False

    def _unlink(self, node: RBNode) -> None:
        self._detach(node)
        self._size -= 1
        node.left = node.right = node.parent = None

    def _owns(self, node: RBNode) -> bool:
        top = node
        while top.parent is not None:
            top = top.parent
        return top is self.root

    def remove(self, key: int) -> None:
        """Remove a node with ``key`` from a tree that owns its nodes."""
        if self.alloc is not AllocMode.ALLOC:
            raise ValueError("remove() needs a tree that allocates its nodes")
        node = self._search(key)
        if node is None or node.key != key:
            raise KeyError(key)
        self._unlink(node)

    def remove_node(self, node: RBNode) -> None:
        """Remove a caller-owned node from a tree that does not allocate."""
        if self.alloc is AllocMode.ALLOC:
            raise ValueError("remove_node() needs a tree that does not allocate")
        if self.root is None or not self._owns(node):
            raise ValueError("node is not in this tree")
        self._unlink(node)

    # Queries

    def find(self, key: int) -> Any:
        """Return the value stored under ``key``."""
        node = self._search(key)
        if node is None or node.key != key:
            raise KeyError(key)
        return node.value

    def least(self) -> tuple[int, Any]:
        """Return the ``(key, value)`` pair with the smallest key."""
        if self.root is None:
            raise IndexError("least of empty tree")
        node = _least(self.root)
        return node.key, node.value

    def pop(self) -> tuple[int, Any]:
        """Remove and return the ``(key, value)`` pair with the smallest key."""
        if self.root is None:
            raise IndexError("pop from empty tree")
        node = _least(self.root)
        key, value = node.key, node.value
        self._unlink(node)
        return key, value

    def destroy(self) -> None:
        """Remove every node."""
        while self.root is not None:
            self._unlink(self.root)

    def _preorder(self) -> Iterator[tuple[int, RBNode]]:
        if self.root is None:
            return
        stack = [(0, self.root)]
        while stack:
            depth, node = stack.pop()
            yield depth, node
            for child in (node.right, node.left):
                if child is not None:
                    stack.append((depth + 1, child))

    def integrity_check(self) -> None:
        """Raise :class:`IntegrityError` if the links or colours are inconsistent."""
        for _, node in self._preorder():
            parent = node.parent
            if parent is node:
                raise IntegrityError(f"{node!r} is its own parent")
            if node.left is node or node.right is node:
                raise IntegrityError(f"{node!r} is its own child")
            if parent is not None and parent.left is not node and parent.right is not node:
                raise IntegrityError(f"parent of {node!r} does not link back to it")
            if parent is None and self.root is not node:
                raise IntegrityError(f"{node!r} has no parent but is not the root")
            if node.is_red:
                if any(c is not None and c.is_red for c in (node.left, node.right)):
                    raise IntegrityError(f"red node {node!r} has a red child")
            elif parent is not None and _child(parent, 1 - _dir(node)) is None:
                raise IntegrityError(f"black node {node!r} has no sibling")

    def format(self) -> str:
        """Return one line per node, in pre-order, with depth and colour."""
        return "\n".join(
            f"[DEPTH {depth}] {node.key!r} -> {node.value!r} "
            f"({'red' if node.is_red else 'black'})"
            for depth, node in self._preorder()
        )