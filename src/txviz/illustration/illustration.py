from __future__ import annotations

from functools import partial
from typing import Callable, Optional

from txviz.config import settings
from txviz.core.enums import Side
from txviz.core.models import CellInfo, CellNode, TransactionIllustrationConfig, TransactionNode
from txviz.illustration.encoding import ColorAssigner, darker, node_fill, node_radius
from txviz.illustration.labels import default_render_cell_info, default_render_transaction_info
from txviz.illustration.layout import compute_layout
from txviz.illustration.scene import Circle, Glyph, Label, Layer, Link, Scene, link_horizontal
from txviz.illustration.tree import HierarchyNode, build_trees
from txviz.utils.logging import get_logger

logger = get_logger(__name__)

LINK_ATTRS = {
    "fill": "none",
    "stroke": "#555",
    "stroke-opacity": "0.4",
    "stroke-width": "1.5",
}
NODE_ATTRS = {
    "stroke-linejoin": "round",
    "stroke-width": "3",
}

LABEL_OFFSET = 5
LABEL_BASELINE = 6


def create_transaction_illustration(config: TransactionIllustrationConfig) -> Scene:
    """
    Lay out a transaction as two mirrored trees and return the scene graph.

    Inputs hang off the left of the transaction node, outputs off the right.
    Circles are sized by log10 of the capacity in CKB and leaf cells are
    colored by lock args, so cells of the same owner share a color within
    this drawing.
    """
    data = config.data
    width = config.width if config.width is not None else settings.ILLUSTRATION_WIDTH
    dx = config.dx if config.dx is not None else settings.ILLUSTRATION_NODE_DX
    min_radius = config.min_radius if config.min_radius is not None else settings.ILLUSTRATION_MIN_RADIUS

    inputs_root, outputs_root = build_trees(data)
    layout = compute_layout(inputs_root, outputs_root, width=width, dx=dx)

    emitter = _SceneEmitter(config, min_radius)
    scene = Scene(
        width=layout.width,
        height=layout.height,
        view_box=layout.view_box,
        layers=[
            emitter.link_layer("inputs-links", layout.inputs, Side.INPUTS),
            emitter.link_layer("outputs-links", layout.outputs, Side.OUTPUTS),
            emitter.node_layer("inputs-nodes", layout.inputs, Side.INPUTS),
            emitter.node_layer("outputs-nodes", layout.outputs, Side.OUTPUTS),
        ],
    )
    logger.debug(
        "illustration_built",
        tx_hash=data.tx_hash,
        inputs=len(data.inputs),
        outputs=len(data.outputs),
        owners=len(emitter.dye),
        height=layout.height,
    )
    return scene


def _depth_axis(node: HierarchyNode, side: Side) -> float:
    return -node.y if side is Side.INPUTS else node.y


class _SceneEmitter:
    def __init__(self, config: TransactionIllustrationConfig, min_radius: float) -> None:
        self.config = config
        self.min_radius = min_radius
        self.render_transaction_info = config.render_transaction_info or default_render_transaction_info
        self.render_cell_info = config.render_cell_info or default_render_cell_info
        # fresh per drawing
        self.dye = ColorAssigner()

    def link_layer(self, name: str, root: HierarchyNode, side: Side) -> Layer:
        items = []
        for source, target in root.links():
            d = link_horizontal(
                _depth_axis(source, side), source.x,
                _depth_axis(target, side), target.x,
            )
            items.append(Link(source=source, target=target, side=side, d=d))
        return Layer(name=name, attrs=dict(LINK_ATTRS), items=items)

    def node_layer(self, name: str, root: HierarchyNode, side: Side) -> Layer:
        items = [self.glyph(node, side) for node in root.each()]
        return Layer(name=name, attrs=dict(NODE_ATTRS), items=items)

    def glyph(self, node: HierarchyNode, side: Side) -> Glyph:
        data = node.data
        fill = node_fill(data, bool(node.children), self.dye)
        circle = Circle(r=node_radius(data, self.min_radius), fill=fill)

        return Glyph(
            node=node,
            side=side,
            x=_depth_axis(node, side),
            y=node.x,
            circle=circle,
            label=self.label(data, side, fill),
            on_click=self.click_hook(data),
        )

    def label(self, data, side: Side, fill: str) -> Optional[Label]:
        if isinstance(data, TransactionNode):
            if not data.tx_hash:
                return None
            text = self.render_transaction_info(data.tx_hash)
        else:
            text = self.render_cell_info(data)

        if isinstance(data, CellNode) and side is Side.INPUTS:
            anchor, dx = "end", -LABEL_OFFSET
        else:
            anchor, dx = "start", LABEL_OFFSET
        return Label(text=text, fill=fill, stroke=darker(fill), anchor=anchor, dx=dx, dy=LABEL_BASELINE)

    def click_hook(self, data) -> Optional[Callable[[], None]]:
        if isinstance(data, CellNode):
            if self.config.on_cell_click is None:
                return None
            return partial(self.config.on_cell_click, _as_cell_info(data))
        if data.tx_hash and self.config.on_transaction_click is not None:
            return partial(self.config.on_transaction_click, data.tx_hash)
        return None


def _as_cell_info(node: CellNode) -> CellInfo:
    return CellInfo(
        capacity=node.capacity,
        lock=node.lock,
        type=node.type,
        data=node.data,
        out_point=node.out_point,
    )
