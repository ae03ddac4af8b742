from __future__ import annotations

from collections import deque
from typing import Deque, Iterator, List, Optional, Tuple

from txviz.core.models import CellNode, IllustrationData, Node, TransactionNode


class HierarchyNode:
    """
    A positioned node of a layout hierarchy.

    `data` is the payload (a TransactionNode or a CellNode), `depth` counts
    edges from the root, `height` counts edges to the deepest leaf below.
    `x` (stacking axis) and `y` (depth axis) are filled in by the layout.
    """

    __slots__ = ("data", "parent", "children", "depth", "height", "x", "y")

    def __init__(self, data: Node, parent: Optional["HierarchyNode"] = None) -> None:
        self.data = data
        self.parent = parent
        self.children: List[HierarchyNode] = []
        self.depth = 0 if parent is None else parent.depth + 1
        self.height = 0
        self.x = 0.0
        self.y = 0.0

    def __iter__(self) -> Iterator["HierarchyNode"]:
        return self.each()

    def __repr__(self) -> str:
        return f"HierarchyNode({self.data.kind}, depth={self.depth}, x={self.x}, y={self.y})"

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def each(self) -> Iterator["HierarchyNode"]:
        # breadth-first, children in input order
        q: Deque[HierarchyNode] = deque([self])
        while q:
            node = q.popleft()
            yield node
            q.extend(node.children)

    def each_before(self) -> Iterator["HierarchyNode"]:
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def each_after(self) -> Iterator["HierarchyNode"]:
        out: List[HierarchyNode] = []
        stack = [self]
        while stack:
            node = stack.pop()
            out.append(node)
            stack.extend(node.children)
        return reversed(out)

    def descendants(self) -> List["HierarchyNode"]:
        return list(self.each())

    def leaves(self) -> List["HierarchyNode"]:
        return [n for n in self.each() if n.is_leaf]

    def links(self) -> List[Tuple["HierarchyNode", "HierarchyNode"]]:
        return [(n.parent, n) for n in self.each() if n.parent is not None]


def _children_of(data: Node) -> Tuple[Node, ...]:
    if isinstance(data, TransactionNode):
        return data.children
    return ()


def hierarchy(root: Node) -> HierarchyNode:
    top = HierarchyNode(root)
    stack = [top]
    while stack:
        node = stack.pop()
        for child in _children_of(node.data):
            h = HierarchyNode(child, parent=node)
            node.children.append(h)
            stack.append(h)

    for node in top.each_after():
        if node.children:
            node.height = max(c.height for c in node.children) + 1
    return top


def build_trees(data: IllustrationData) -> Tuple[HierarchyNode, HierarchyNode]:
    """
    Two mirrored hierarchies: consumed cells under the transaction on the
    left, produced cells under an unlabelled copy of it on the right.
    """
    inputs_root = TransactionNode(
        tx_hash=data.tx_hash,
        children=tuple(CellNode.from_cell(c) for c in data.inputs),
    )
    # empty hash: the transaction is already labelled on the inputs side
    outputs_root = TransactionNode(
        tx_hash="",
        children=tuple(CellNode.from_cell(c) for c in data.outputs),
    )
    return hierarchy(inputs_root), hierarchy(outputs_root)
