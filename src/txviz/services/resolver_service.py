from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from txviz.config import settings
from txviz.core.dto import RawCellInput, RawTransaction
from txviz.core.errors import InputResolutionError
from txviz.core.models import CellInfo, IllustrationData
from txviz.ports.chain_data_port import ChainDataPort
from txviz.utils.logging import get_logger

logger = get_logger(__name__)

ProgressFn = Callable[[str, dict], None]


@dataclass(frozen=True)
class _InputSlot:
    index: int
    input: RawCellInput


class TransactionResolver:
    """
    Turns a transaction hash into the data the illustration needs.

    - Outputs come straight from the transaction.
    - Inputs are resolved by fetching each referenced previous transaction
      and picking the output the input spends, one lookup per input.
    - Cellbase inputs spend nothing and are left out.

    A failed lookup is pinned to its input index. By default any failure
    aborts with InputResolutionError; with skip_unresolved the failed inputs
    are dropped and the rest are returned.
    """

    def __init__(
        self,
        chain: ChainDataPort,
        max_workers: int = settings.RESOLVER_MAX_WORKERS,
        skip_unresolved: bool = False,
    ) -> None:
        self.chain = chain
        self.max_workers = max(1, int(max_workers))
        self.skip_unresolved = skip_unresolved

    def resolve(self, tx_hash: str, on_progress: Optional[ProgressFn] = None) -> IllustrationData:
        progress = on_progress or _noop

        progress("fetch", {"tx_hash": tx_hash})
        tx = self.chain.get_transaction(tx_hash)
        outputs = [tx.output_at(i) for i in range(len(tx.outputs))]

        slots = [_InputSlot(i, inp) for i, inp in enumerate(tx.inputs) if not inp.is_cellbase]
        progress("start", {"tx_hash": tx.hash, "inputs": len(slots), "outputs": len(outputs)})

        resolved, failures = self._resolve_inputs(slots, progress)

        if failures:
            for index, err in sorted(failures.items()):
                logger.warning(
                    "input_unresolved",
                    tx_hash=tx.hash,
                    input_index=index,
                    error=f"{err.__class__.__name__}: {err}",
                )
            if not self.skip_unresolved:
                raise InputResolutionError(tx.hash, failures)

        inputs = [resolved[s.index] for s in slots if s.index in resolved]
        progress("done", {"inputs": len(inputs), "outputs": len(outputs), "failed": len(failures)})
        return IllustrationData(inputs=inputs, outputs=outputs, tx_hash=tx.hash)

    # -------------------------
    # Fan-out
    # -------------------------

    def _resolve_inputs(self, slots: List[_InputSlot], progress: ProgressFn):
        resolved: Dict[int, CellInfo] = {}
        failures: Dict[int, Exception] = {}
        if not slots:
            return resolved, failures

        workers = min(self.max_workers, len(slots))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="txviz-input") as pool:
            futures = {pool.submit(self._resolve_one, s): s for s in slots}
            for fut in as_completed(futures):
                slot = futures[fut]
                try:
                    resolved[slot.index] = fut.result()
                except Exception as e:
                    failures[slot.index] = e
                    progress("input_failed", {"index": slot.index, "error": str(e)})
                else:
                    progress("input_done", {"index": slot.index, "resolved": len(resolved)})
        return resolved, failures

    def _resolve_one(self, slot: _InputSlot) -> CellInfo:
        out_point = slot.input.previous_output
        logger.debug("input_fetch", input_index=slot.index, previous_tx=out_point.tx_hash)
        previous: RawTransaction = self.chain.get_transaction(out_point.tx_hash)
        cell = previous.output_at(out_point.index)
        return CellInfo(
            capacity=cell.capacity,
            lock=cell.lock,
            type=cell.type,
            data=cell.data,
            out_point=out_point,
        )


def _noop(event: str, data: dict) -> None:
    return None
