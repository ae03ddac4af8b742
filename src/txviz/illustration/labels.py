from typing import Optional

from txviz.core.capacity import format_capacity, parse_capacity
from txviz.core.models import CellInfo


def default_render_transaction_info(tx_hash: str) -> str:
    return tx_hash


def default_render_cell_info(cell: CellInfo) -> str:
    return format_capacity(parse_capacity(cell.capacity))


def truncate_middle(text: str, start: int = 6, end: Optional[int] = None) -> str:
    if end is None:
        end = start
    if len(text) <= start + end + 3:
        return text
    return f"{text[:start]}...{text[-end:] if end else ''}"


def short_transaction_info(tx_hash: str) -> str:
    return truncate_middle(tx_hash)


def short_cell_info(cell: CellInfo) -> str:
    """Capacity plus a shortened owner, e.g. `61 CKB | 0x1234...abcd`."""
    return f"{default_render_cell_info(cell)} | {truncate_middle(cell.lock.args, 6, 4)}"
