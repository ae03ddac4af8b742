from __future__ import annotations

from typing import Any, Dict, List, Optional

from txviz.core.dto import parse_index
from txviz.core.models import CellInfo, IllustrationData, OutPoint, Script
from txviz.illustration.scene import Glyph, Link, Scene


def _pick(d: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    # accept both the camelCase used by JS tooling and the RPC's snake_case
    for k in keys:
        if k in d:
            return d[k]
    return default


# -------------------------
# Illustration input
# -------------------------

def script_from_dict(d: Optional[Dict[str, Any]]) -> Optional[Script]:
    if not d:
        return None
    return Script(
        code_hash=str(_pick(d, "codeHash", "code_hash", default="")),
        args=str(_pick(d, "args", default="0x")),
        hash_type=str(_pick(d, "hashType", "hash_type", default="")),
    )


def cell_from_dict(d: Dict[str, Any]) -> CellInfo:
    op = _pick(d, "outPoint", "out_point")
    return CellInfo(
        capacity=str(d["capacity"]),
        lock=script_from_dict(d["lock"]),
        type=script_from_dict(d.get("type")),
        data=str(d.get("data") or "0x"),
        out_point=OutPoint(
            tx_hash=str(_pick(op, "txHash", "tx_hash")),
            index=parse_index(op["index"]),
        ) if op else None,
    )


def illustration_data_from_dict(d: Dict[str, Any]) -> IllustrationData:
    return IllustrationData(
        inputs=[cell_from_dict(c) for c in d.get("inputs", [])],
        outputs=[cell_from_dict(c) for c in d.get("outputs", [])],
        tx_hash=str(_pick(d, "txHash", "tx_hash", default="")),
    )


def script_to_dict(s: Optional[Script]) -> Optional[Dict[str, str]]:
    if s is None:
        return None
    return {"codeHash": s.code_hash, "args": s.args, "hashType": s.hash_type}


def cell_to_dict(c: CellInfo) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "capacity": c.capacity,
        "lock": script_to_dict(c.lock),
        "type": script_to_dict(c.type),
        "data": c.data,
    }
    if c.out_point is not None:
        out["outPoint"] = {"txHash": c.out_point.tx_hash, "index": c.out_point.index}
    return out


def illustration_data_to_dict(data: IllustrationData) -> Dict[str, Any]:
    return {
        "txHash": data.tx_hash,
        "inputs": [cell_to_dict(c) for c in data.inputs],
        "outputs": [cell_to_dict(c) for c in data.outputs],
    }


# -------------------------
# Scene graph
# -------------------------

def _glyph_to_dict(g: Glyph) -> Dict[str, Any]:
    data = g.node.data
    out: Dict[str, Any] = {
        "type": "glyph",
        "kind": data.kind,
        "side": g.side.value,
        "depth": g.node.depth,
        "x": g.x,
        "y": g.y,
        "circle": {"r": g.circle.r, "fill": g.circle.fill, "hoverFill": g.circle.hover_fill},
        "label": None,
    }
    if g.label is not None:
        out["label"] = {
            "text": g.label.text,
            "fill": g.label.fill,
            "stroke": g.label.stroke,
            "anchor": g.label.anchor,
            "dx": g.label.dx,
            "dy": g.label.dy,
        }
    if data.kind == "tx":
        out["txHash"] = data.tx_hash
    else:
        out["capacity"] = data.capacity
        out["lockArgs"] = data.lock.args
    return out


def _link_to_dict(l: Link) -> Dict[str, Any]:
    return {"type": "link", "side": l.side.value, "d": l.d}


def scene_to_dict(scene: Scene) -> Dict[str, Any]:
    layers: List[Dict[str, Any]] = []
    for layer in scene.layers:
        layers.append({
            "name": layer.name,
            "attrs": dict(layer.attrs),
            "items": [
                _glyph_to_dict(i) if isinstance(i, Glyph) else _link_to_dict(i)
                for i in layer.items
            ],
        })
    return {
        "width": scene.width,
        "height": scene.height,
        "viewBox": list(scene.view_box),
        "layers": layers,
    }
