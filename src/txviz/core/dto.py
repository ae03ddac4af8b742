from dataclasses import dataclass, field
from typing import Any, List, Optional

from txviz.core.models import CellInfo, OutPoint

# CKB marks cellbase inputs with an all-zero hash and this index
NULL_TX_HASH = "0x" + "00" * 32
NULL_INDEX = 0xFFFFFFFF


def parse_index(value: Any) -> int:
    """Output indexes come as `0x` hex from the node and as plain ints from JSON files."""
    s = str(value)
    return int(s, 16) if s.lower().startswith("0x") else int(s)


@dataclass(frozen=True)
class RawCellInput:
    previous_output: OutPoint
    since: str = "0x0"

    @property
    def is_cellbase(self) -> bool:
        return (
            self.previous_output.tx_hash == NULL_TX_HASH
            and self.previous_output.index == NULL_INDEX
        )


@dataclass(frozen=True)
class RawTransaction:
    hash: str
    inputs: List[RawCellInput] = field(default_factory=list)
    outputs: List[CellInfo] = field(default_factory=list)   # data filled from outputs_data
    outputs_data: List[str] = field(default_factory=list)
    status: Optional[str] = None       # pending | proposed | committed

    def output_at(self, index: int) -> CellInfo:
        """The cell created by output `index`, with its data attached."""
        if index < 0 or index >= len(self.outputs):
            raise IndexError(f"{self.hash} has no output #{index} ({len(self.outputs)} outputs)")
        cell = self.outputs[index]
        data = self.outputs_data[index] if index < len(self.outputs_data) else "0x"
        return CellInfo(
            capacity=cell.capacity,
            lock=cell.lock,
            type=cell.type,
            data=data or "0x",
        )
