from __future__ import annotations

import math
import re
from typing import Dict, List, Sequence, Tuple

from txviz.core.capacity import SHANNONS_PER_CKB, parse_capacity, total_capacity
from txviz.core.models import CellNode, Node, TransactionNode

# ColorBrewer "Accent"
ACCENT: Tuple[str, ...] = (
    "#7fc97f",
    "#beaed4",
    "#fdc086",
    "#ffff99",
    "#386cb0",
    "#f0027f",
    "#bf5b17",
    "#666666",
)

INTERNAL_FILL = "#555555"
LEAF_FILL = "#999999"

# one shade step, as in the usual sRGB brighter/darker helpers
SHADE_FACTOR = 0.7

_LOG10_SHANNONS_PER_CKB = math.log10(SHANNONS_PER_CKB)
_HEX6_RE = re.compile(r"#([0-9a-fA-F]{6})")
_HEX3_RE = re.compile(r"#([0-9a-fA-F]{3})")


# -------------------------
# Radius
# -------------------------

def capacity_radius(shannons: int, min_radius: float) -> float:
    """
    log10 of the capacity in CKB, never below `min_radius`.

    math.log10 takes Python ints of any size, so the shannon count is never
    squeezed through a float before the logarithm.
    """
    if shannons <= 0:
        return min_radius
    r = math.log10(shannons) - _LOG10_SHANNONS_PER_CKB
    return max(r, min_radius)


def node_capacity(node: Node) -> int:
    if isinstance(node, CellNode):
        return parse_capacity(node.capacity)
    if isinstance(node, TransactionNode):
        return total_capacity(c.capacity for c in node.children)
    return 0


def node_radius(node: Node, min_radius: float) -> float:
    return capacity_radius(node_capacity(node), min_radius)


# -------------------------
# Colors
# -------------------------

def parse_hex(color: str) -> Tuple[int, int, int]:
    m = _HEX6_RE.fullmatch(color)
    if m:
        v = m.group(1)
        return int(v[0:2], 16), int(v[2:4], 16), int(v[4:6], 16)
    m = _HEX3_RE.fullmatch(color)
    if m:
        v = m.group(1)
        return int(v[0] * 2, 16), int(v[1] * 2, 16), int(v[2] * 2, 16)
    raise ValueError(f"Unsupported color: {color!r}")


def _channel(v: float) -> int:
    # round half up, then clamp to a byte
    return max(0, min(255, int(math.floor(v + 0.5))))


def format_hex(rgb: Sequence[float]) -> str:
    return "#" + "".join(f"{_channel(v):02x}" for v in rgb)


def _scale(color: str, k: float) -> str:
    r, g, b = parse_hex(color)
    return format_hex((r * k, g * k, b * k))


def brighter(color: str, k: float = 1) -> str:
    return _scale(color, (1 / SHADE_FACTOR) ** k)


def darker(color: str, k: float = 1) -> str:
    return _scale(color, SHADE_FACTOR ** k)


class ColorAssigner:
    """
    Ordinal color scale: the first key seen gets the first palette entry,
    the second key the second, and so on, cycling once the palette runs out.

    Build one per illustration; the assignment only means something inside
    the drawing that produced it.
    """

    def __init__(self, palette: Sequence[str] = ACCENT) -> None:
        if not palette:
            raise ValueError("palette must not be empty")
        self._palette: List[str] = list(palette)
        self._index: Dict[str, int] = {}

    def __call__(self, key: str) -> str:
        i = self._index.get(key)
        if i is None:
            i = len(self._index)
            self._index[key] = i
        return self._palette[i % len(self._palette)]

    def __len__(self) -> int:
        return len(self._index)

    @property
    def domain(self) -> List[str]:
        return list(self._index)


def node_fill(node: Node, has_children: bool, dye: ColorAssigner) -> str:
    if has_children:
        return INTERNAL_FILL
    if isinstance(node, CellNode):
        return dye(node.lock.args)
    return LEAF_FILL
