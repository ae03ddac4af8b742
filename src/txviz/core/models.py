from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Callable, List, Optional, Tuple, Union


# Chain models

@dataclass(frozen=True)
class Script:
    code_hash: str
    args: str
    hash_type: str            # see HashType, passed through unchecked


@dataclass(frozen=True)
class OutPoint:
    tx_hash: str
    index: int


@dataclass(frozen=True)
class CellInfo:
    """
    A transaction output at a point in time.

    `capacity` is kept as the string the chain reported (decimal or 0x-hex
    shannons) and only parsed when a radius or label needs it.
    """

    capacity: str
    lock: Script
    type: Optional[Script] = None
    data: str = "0x"

    # where an input cell was created; None for outputs
    out_point: Optional[OutPoint] = None


@dataclass(frozen=True)
class IllustrationData:
    inputs: List[CellInfo] = field(default_factory=list)
    outputs: List[CellInfo] = field(default_factory=list)
    tx_hash: str = ""



# Hierarchy node payloads

@dataclass(frozen=True)
class CellNode(CellInfo):
    kind: str = "cell"

    @classmethod
    def from_cell(cls, cell: CellInfo) -> "CellNode":
        return cls(**{f.name: getattr(cell, f.name) for f in fields(CellInfo)})


@dataclass(frozen=True)
class TransactionNode:
    tx_hash: str
    children: Tuple[CellNode, ...] = ()
    kind: str = "tx"


Node = Union[TransactionNode, CellNode]



# Configuration model

@dataclass(frozen=True)
class TransactionIllustrationConfig:
    """
    Input of `create_transaction_illustration`.

    Label callbacks default to the raw hash and the formatted capacity.
    Geometry knobs left as None fall back to `txviz.config.settings`.
    """

    data: IllustrationData
    render_transaction_info: Optional[Callable[[str], str]] = None
    render_cell_info: Optional[Callable[[CellInfo], str]] = None

    # click hooks, see Glyph.click()
    on_cell_click: Optional[Callable[[CellInfo], None]] = None
    on_transaction_click: Optional[Callable[[str], None]] = None

    width: Optional[float] = None
    dx: Optional[float] = None
    min_radius: Optional[float] = None
