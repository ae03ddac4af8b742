from __future__ import annotations

from html import escape
from typing import Dict, List

from txviz.core.enums import NodeKind
from txviz.illustration.scene import Glyph, Layer, Link, Scene, fmt_num

SVG_NS = "http://www.w3.org/2000/svg"


def _attr_value(v: object) -> str:
    # single quotes stay literal: the hover handlers are JS inside "..."
    return escape(str(v), quote=False).replace('"', "&quot;")


def _attrs(attrs: Dict[str, str]) -> str:
    return "".join(f' {k}="{_attr_value(v)}"' for k, v in attrs.items())


def _link(link: Link) -> str:
    return f"<path{_attrs({'d': link.d})}/>"


def _glyph(g: Glyph) -> str:
    data = g.node.data
    group = {
        "class": data.kind,
        "data-side": g.side.value,
        "transform": f"translate({fmt_num(g.x)},{fmt_num(g.y)})",
    }
    if data.kind == NodeKind.TX.value:
        if data.tx_hash:
            group["data-tx-hash"] = data.tx_hash
    elif data.out_point is not None:
        group["data-tx-hash"] = data.out_point.tx_hash
        group["data-index"] = str(data.out_point.index)

    rest = g.circle.fill
    circle = {
        "fill": rest,
        "r": fmt_num(g.circle.r),
        # leave restores the resting color instead of darkening the hover color
        "onmouseover": f"this.setAttribute('fill','{g.circle.hover_fill}')",
        "onmouseout": f"this.setAttribute('fill','{rest}')",
    }
    parts: List[str] = [f"<g{_attrs(group)}>", f"<circle{_attrs(circle)}/>"]

    if g.label is not None:
        text = {
            "fill": g.label.fill,
            "stroke-width": fmt_num(g.label.stroke_width),
            "stroke": g.label.stroke,
            "text-anchor": g.label.anchor,
            "transform": f"translate({fmt_num(g.label.dx)},{fmt_num(g.label.dy)})",
        }
        parts.append(f"<text{_attrs(text)}>{escape(g.label.text, quote=False)}</text>")

    parts.append("</g>")
    return "".join(parts)


def _layer(layer: Layer) -> str:
    body = "".join(_glyph(i) if isinstance(i, Glyph) else _link(i) for i in layer.items)
    return f'<g data-layer="{_attr_value(layer.name)}"{_attrs(layer.attrs)}>{body}</g>'


def scene_to_svg(scene: Scene) -> str:
    """Serialise a scene into a standalone <svg> element."""
    root = {
        "xmlns": SVG_NS,
        "viewBox": " ".join(fmt_num(v) for v in scene.view_box),
        "width": fmt_num(scene.width),
        "height": fmt_num(scene.height),
        "style": scene.style,
    }
    layers = "\n".join(_layer(layer) for layer in scene.layers)
    return f"<svg{_attrs(root)}>\n{layers}\n</svg>\n"
