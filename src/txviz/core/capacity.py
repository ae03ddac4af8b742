from __future__ import annotations

import re
from typing import Iterable, Union

from txviz.core.errors import CapacityParseError

SHANNONS_PER_CKB = 10 ** 8
CKB_DECIMALS = 8
UNIT = "CKB"

_DEC_RE = re.compile(r"[0-9]+")
_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_LABEL_RE = re.compile(r"([0-9]+)(?:\.([0-9]{%d}))?\s+(\S+)" % CKB_DECIMALS)


def parse_capacity(value: Union[str, int]) -> int:
    """
    Parse a capacity in shannons. The RPC reports 0x-hex, fixtures and the
    JS world tend to use decimal strings; both are accepted.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise CapacityParseError(f"Negative capacity: {value}")
        return value

    text = str(value).strip()
    if _HEX_RE.fullmatch(text):
        return int(text[2:], 16)
    if _DEC_RE.fullmatch(text):
        return int(text)
    raise CapacityParseError(f"Invalid capacity: {value!r}")


def total_capacity(values: Iterable[Union[str, int]]) -> int:
    return sum((parse_capacity(v) for v in values), 0)


def format_capacity(shannons: int, unit: str = UNIT) -> str:
    ckb, rest = divmod(shannons, SHANNONS_PER_CKB)
    if not rest:
        return f"{ckb} {unit}"
    return f"{ckb}.{rest:0{CKB_DECIMALS}d} {unit}"


def parse_capacity_label(label: str) -> int:
    """Inverse of `format_capacity`."""
    m = _LABEL_RE.fullmatch(label.strip())
    if not m:
        raise CapacityParseError(f"Invalid capacity label: {label!r}")
    whole, frac = m.group(1), m.group(2) or "0"
    return int(whole) * SHANNONS_PER_CKB + int(frac)
