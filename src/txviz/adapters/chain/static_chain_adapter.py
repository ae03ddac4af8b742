from txviz.ports.chain_data_port import ChainDataPort
from txviz.core.dto import RawTransaction
from txviz.core.errors import TransactionNotFoundError
from typing import Dict, Iterable, Optional

class StaticChainAdapter(ChainDataPort):
    def __init__(self,
                 transactions: Optional[Iterable[RawTransaction]] = None,
                 failures: Optional[Dict[str, Exception]] = None,
                 ):
        self._txs = {t.hash.lower(): t for t in (transactions or [])}
        self._failures = {k.lower(): v for k, v in (failures or {}).items()}
        self.calls = []

    def add(self, tx: RawTransaction) -> None:
        self._txs[tx.hash.lower()] = tx

    def get_transaction(self, tx_hash):
        h = tx_hash.lower()
        self.calls.append(h)
        if h in self._failures:
            raise self._failures[h]
        tx = self._txs.get(h)
        if tx is None:
            raise TransactionNotFoundError(tx_hash)
        return tx
