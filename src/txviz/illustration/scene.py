"""
Backend-independent scene graph.

A Scene is a plain tree of drawable records (layers of links and glyphs)
with the attributes a renderer needs. `txviz.io.svg` turns it into SVG;
anything else (a canvas, a notebook widget) can walk the same records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple, Union

from txviz.core.enums import Side
from txviz.illustration.encoding import brighter
from txviz.illustration.tree import HierarchyNode

ViewBox = Tuple[float, float, float, float]


def fmt_num(v: float) -> str:
    if float(v).is_integer():
        return str(int(v))
    return f"{v:.6f}".rstrip("0").rstrip(".")


def link_horizontal(x0: float, y0: float, x1: float, y1: float) -> str:
    """Cubic connector leaving and entering both ends horizontally."""
    mx = (x0 + x1) / 2
    return (
        f"M{fmt_num(x0)},{fmt_num(y0)}"
        f"C{fmt_num(mx)},{fmt_num(y0)},{fmt_num(mx)},{fmt_num(y1)},{fmt_num(x1)},{fmt_num(y1)}"
    )


@dataclass
class Circle:
    r: float
    fill: str
    _rest_fill: Optional[str] = field(default=None, repr=False, compare=False)

    @property
    def hover_fill(self) -> str:
        return brighter(self._rest_fill or self.fill)

    @property
    def hovered(self) -> bool:
        return self._rest_fill is not None

    def pointer_enter(self) -> None:
        if self._rest_fill is None:
            self._rest_fill = self.fill
            self.fill = brighter(self.fill)

    def pointer_leave(self) -> None:
        # restore, not darken: shading twice does not round-trip through hex
        if self._rest_fill is not None:
            self.fill = self._rest_fill
            self._rest_fill = None


@dataclass
class Label:
    text: str
    fill: str
    stroke: str
    anchor: str = "start"          # start | end
    dx: float = 5
    dy: float = 6
    stroke_width: float = 0.5


@dataclass
class Glyph:
    node: HierarchyNode
    side: Side
    x: float
    y: float
    circle: Circle
    label: Optional[Label] = None
    on_click: Optional[Callable[[], None]] = field(default=None, repr=False, compare=False)

    @property
    def kind(self) -> str:
        return self.node.data.kind

    def pointer_enter(self) -> None:
        self.circle.pointer_enter()

    def pointer_leave(self) -> None:
        self.circle.pointer_leave()

    def click(self) -> bool:
        """Run the click hook, if any. Returns whether one ran."""
        if self.on_click is None:
            return False
        self.on_click()
        return True


@dataclass
class Link:
    source: HierarchyNode
    target: HierarchyNode
    side: Side
    d: str


SceneItem = Union[Glyph, Link]


@dataclass
class Layer:
    name: str
    attrs: Dict[str, str]
    items: List[SceneItem] = field(default_factory=list)


@dataclass
class Scene:
    width: float
    height: float
    view_box: ViewBox
    layers: List[Layer] = field(default_factory=list)
    style: str = "max-width: 100%; height: auto;"

    @property
    def glyphs(self) -> List[Glyph]:
        return [i for layer in self.layers for i in layer.items if isinstance(i, Glyph)]

    @property
    def links(self) -> List[Link]:
        return [i for layer in self.layers for i in layer.items if isinstance(i, Link)]

    def layer(self, name: str) -> Layer:
        for layer in self.layers:
            if layer.name == name:
                return layer
        raise KeyError(name)
