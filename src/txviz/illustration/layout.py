"""
Tidy tree layout with a fixed node size.

This is the Buchheim, Jünger and Leipert improvement of the Walker
algorithm: a post-order walk places every subtree as close to its left
sibling as the contours allow, a pre-order walk turns the relative offsets
into absolute positions. Runs in linear time.

Coordinates follow the usual tree-drawing convention: `x` is the breadth
(sibling stacking) axis, `y` the depth axis. The root lands at x = 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from txviz.illustration.tree import HierarchyNode

ViewBox = Tuple[float, float, float, float]


def default_separation(a: HierarchyNode, b: HierarchyNode) -> float:
    return 1 if a.parent is b.parent else 2


class _WalkNode:
    __slots__ = ("node", "parent", "children", "A", "a", "z", "m", "c", "s", "t", "i")

    def __init__(self, node: Optional[HierarchyNode], i: int) -> None:
        self.node = node
        self.parent: Optional[_WalkNode] = None
        self.children: List[_WalkNode] = []
        self.A: Optional[_WalkNode] = None    # default ancestor
        self.a: _WalkNode = self              # ancestor
        self.z = 0.0                          # prelim
        self.m = 0.0                          # mod
        self.c = 0.0                          # change
        self.s = 0.0                          # shift
        self.t: Optional[_WalkNode] = None    # thread
        self.i = i                            # sibling index


def _next_left(v: _WalkNode) -> Optional[_WalkNode]:
    return v.children[0] if v.children else v.t


def _next_right(v: _WalkNode) -> Optional[_WalkNode]:
    return v.children[-1] if v.children else v.t


def _move_subtree(wm: _WalkNode, wp: _WalkNode, shift: float) -> None:
    change = shift / (wp.i - wm.i)
    wp.c -= change
    wp.s += shift
    wm.c += change
    wp.z += shift
    wp.m += shift


def _execute_shifts(v: _WalkNode) -> None:
    shift = 0.0
    change = 0.0
    for w in reversed(v.children):
        w.z += shift
        w.m += shift
        change += w.c
        shift += w.s + change


def _next_ancestor(vim: _WalkNode, v: _WalkNode, ancestor: _WalkNode) -> _WalkNode:
    return vim.a if vim.a.parent is v.parent else ancestor


def _walk_tree(root: HierarchyNode) -> _WalkNode:
    top = _WalkNode(root, 0)
    stack = [top]
    while stack:
        w = stack.pop()
        for i, child in enumerate(w.node.children):
            cw = _WalkNode(child, i)
            cw.parent = w
            w.children.append(cw)
            stack.append(cw)

    sentinel = _WalkNode(None, 0)
    sentinel.children = [top]
    top.parent = sentinel
    return top


def _post_order(top: _WalkNode) -> List[_WalkNode]:
    out: List[_WalkNode] = []
    stack = [top]
    while stack:
        w = stack.pop()
        out.append(w)
        stack.extend(w.children)
    out.reverse()
    return out


class TreeLayout:
    """
    Callable layout: `TreeLayout(dx, dy)(root)` positions `root` in place.

    Siblings sit `dx` apart (cousins `2 * dx` by default), depth levels `dy`
    apart. Children keep their input order.
    """

    def __init__(
        self,
        dx: float,
        dy: float,
        separation: Callable[[HierarchyNode, HierarchyNode], float] = default_separation,
    ) -> None:
        self.dx = dx
        self.dy = dy
        self.separation = separation

    def __call__(self, root: HierarchyNode) -> HierarchyNode:
        top = _walk_tree(root)

        for v in _post_order(top):
            self._first_walk(v)
        top.parent.m = -top.z

        stack = [top]
        while stack:
            v = stack.pop()
            self._second_walk(v)
            stack.extend(v.children)

        for node in root.each():
            node.x *= self.dx
            node.y = node.depth * self.dy
        return root

    def _first_walk(self, v: _WalkNode) -> None:
        siblings = v.parent.children
        w = siblings[v.i - 1] if v.i else None
        if v.children:
            _execute_shifts(v)
            midpoint = (v.children[0].z + v.children[-1].z) / 2
            if w is not None:
                v.z = w.z + self.separation(v.node, w.node)
                v.m = v.z - midpoint
            else:
                v.z = midpoint
        elif w is not None:
            v.z = w.z + self.separation(v.node, w.node)
        v.parent.A = self._apportion(v, w, v.parent.A or siblings[0])

    @staticmethod
    def _second_walk(v: _WalkNode) -> None:
        v.node.x = v.z + v.parent.m
        v.m += v.parent.m

    def _apportion(self, v: _WalkNode, w: Optional[_WalkNode], ancestor: _WalkNode) -> _WalkNode:
        if w is None:
            return ancestor

        vip = vop = v
        vim = w
        vom = vip.parent.children[0]
        sip = vip.m
        sop = vop.m
        sim = vim.m
        som = vom.m

        vim = _next_right(vim)
        vip = _next_left(vip)
        while vim is not None and vip is not None:
            vom = _next_left(vom)
            vop = _next_right(vop)
            vop.a = v
            shift = vim.z + sim - vip.z - sip + self.separation(vim.node, vip.node)
            if shift > 0:
                _move_subtree(_next_ancestor(vim, v, ancestor), v, shift)
                sip += shift
                sop += shift
            sim += vim.m
            sip += vip.m
            som += vom.m
            sop += vop.m
            vim = _next_right(vim)
            vip = _next_left(vip)

        if vim is not None and _next_right(vop) is None:
            vop.t = vim
            vop.m += sim - sop
        if vip is not None and _next_left(vom) is None:
            vom.t = vip
            vom.m += sip - som
            ancestor = v
        return ancestor


@dataclass(frozen=True)
class LayoutResult:
    inputs: HierarchyNode
    outputs: HierarchyNode
    width: float
    height: float
    dx: float
    dy: float
    x0: float
    x1: float

    @property
    def view_box(self) -> ViewBox:
        # centre the depth span (inputs at -y, outputs at +y); with equal depths
        # on both sides the tx node lands in the middle
        span = (self.inputs.height + self.outputs.height) * self.dy
        min_x = -self.inputs.height * self.dy - (self.width - span) / 2
        return (min_x, self.x0 - self.dx, self.width, self.height)


def compute_layout(
    inputs: HierarchyNode,
    outputs: HierarchyNode,
    width: float,
    dx: float,
) -> LayoutResult:
    """
    Lay out both halves with a shared level spacing and size one canvas that
    holds them. The level spacing divides the fixed width between the two
    trees so wide or deep transactions compress instead of overflowing.
    """
    dy = width / (inputs.height + outputs.height + 1)
    layout = TreeLayout(dx, dy)
    layout(inputs)
    layout(outputs)

    xs = [n.x for n in inputs.each()] + [n.x for n in outputs.each()]
    x0 = min(xs)
    x1 = max(xs)
    height = x1 - x0 + dx * 2

    return LayoutResult(
        inputs=inputs,
        outputs=outputs,
        width=width,
        height=height,
        dx=dx,
        dy=dy,
        x0=x0,
        x1=x1,
    )
