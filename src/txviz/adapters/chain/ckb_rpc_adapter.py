import itertools
import threading
from typing import Any, Dict, List, Optional

import requests

from txviz.config.settings import (
    CKB_MAINNET_RPC_URL,
    CKB_RPC_MAX_RETRIES,
    CKB_RPC_REQUESTS_PER_SEC,
    CKB_RPC_TIMEOUT_SEC,
    CKB_RPC_URL,
    CKB_TESTNET_RPC_URL,
)

from txviz.adapters.chain.rate_limiter import SimpleRateLimiter, backoff_sleep
from txviz.core.dto import RawCellInput, RawTransaction, parse_index
from txviz.core.errors import DataSourceError, RateLimitError, TransactionNotFoundError
from txviz.core.models import CellInfo, OutPoint, Script
from txviz.ports.chain_data_port import ChainDataPort
from txviz.utils.logging import get_logger

logger = get_logger(__name__)


def default_rpc_url(is_mainnet: bool = False) -> str:
    if CKB_RPC_URL:
        return CKB_RPC_URL
    return CKB_MAINNET_RPC_URL if is_mainnet else CKB_TESTNET_RPC_URL


class CkbRpcChainAdapter(ChainDataPort):
    """JSON-RPC client for a CKB full node (only `get_transaction` is used)."""

    def __init__(
        self,
        url: Optional[str] = None,
        requests_per_sec: float = CKB_RPC_REQUESTS_PER_SEC,
        timeout_sec: int = CKB_RPC_TIMEOUT_SEC,
        max_retries: int = CKB_RPC_MAX_RETRIES,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._url = url or default_rpc_url()
        self._timeout = timeout_sec
        self._max_retries = max_retries

        self._rl = SimpleRateLimiter(requests_per_sec)
        self._session = session or requests.Session()
        self._ids = itertools.count(1)
        self._ids_lock = threading.Lock()

    @property
    def url(self) -> str:
        return self._url

    # ---------- internal ----------

    def _next_id(self) -> int:
        with self._ids_lock:
            return next(self._ids)

    def _call(self, method: str, params: List[Any]) -> Any:
        payload = {
            "id": self._next_id(),
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
        }

        last_err: Optional[Exception] = None

        for attempt in range(self._max_retries):
            try:
                self._rl.wait()
                resp = self._session.post(self._url, json=payload, timeout=self._timeout)
                if resp.status_code == 429:
                    raise RateLimitError(f"{self._url} answered 429")
                resp.raise_for_status()
                data = resp.json()
            except (requests.RequestException, ValueError, RateLimitError) as e:
                last_err = e
                logger.warning("rpc_retry", method=method, attempt=attempt + 1, error=str(e))
                backoff_sleep(attempt)
                continue

            if not isinstance(data, dict):
                raise DataSourceError(f"Invalid JSON-RPC response: {data!r}")
            err = data.get("error")
            if err:
                # node-side errors are deterministic, retrying does not help
                raise DataSourceError(f"{method} failed: {err.get('message', err)}")
            return data.get("result")

        raise DataSourceError(f"CKB RPC {method} failed after retries: {last_err}")

    @staticmethod
    def _script(raw: Optional[Dict[str, Any]]) -> Optional[Script]:
        if not raw:
            return None
        return Script(
            code_hash=raw.get("code_hash", ""),
            args=raw.get("args", "0x"),
            hash_type=raw.get("hash_type", ""),
        )

    @classmethod
    def _transaction(cls, tx_hash: str, result: Dict[str, Any]) -> RawTransaction:
        try:
            tx = result["transaction"]
            inputs = [
                RawCellInput(
                    previous_output=OutPoint(
                        tx_hash=i["previous_output"]["tx_hash"],
                        index=parse_index(i["previous_output"]["index"]),
                    ),
                    since=i.get("since", "0x0"),
                )
                for i in tx.get("inputs", [])
            ]
            outputs_data = list(tx.get("outputs_data", []))
            outputs = [
                CellInfo(
                    capacity=o["capacity"],
                    lock=cls._script(o["lock"]),
                    type=cls._script(o.get("type")),
                    data=outputs_data[n] if n < len(outputs_data) else "0x",
                )
                for n, o in enumerate(tx.get("outputs", []))
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise DataSourceError(f"Invalid transaction payload for {tx_hash}") from e

        status = (result.get("tx_status") or {}).get("status")
        return RawTransaction(
            hash=tx.get("hash", tx_hash),
            inputs=inputs,
            outputs=outputs,
            outputs_data=outputs_data,
            status=status,
        )

    # ---------- port methods ----------

    def get_transaction(self, tx_hash: str) -> RawTransaction:
        result = self._call("get_transaction", [tx_hash])
        if not result or not result.get("transaction"):
            raise TransactionNotFoundError(tx_hash)
        return self._transaction(tx_hash, result)
