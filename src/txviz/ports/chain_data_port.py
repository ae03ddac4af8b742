from __future__ import annotations

from abc import ABC, abstractmethod
from txviz.core.dto import RawTransaction

class ChainDataPort(ABC):
    """
    Abstract Class for fetching transactions from a CKB node.

    Implementations must be safe to call from several threads at once: the
    resolver fans out one lookup per input.
    """

    # --- Transactions ---

    @abstractmethod
    def get_transaction(self, tx_hash: str) -> RawTransaction:
        """Raise TransactionNotFoundError when the node does not know the hash."""
        raise NotImplementedError
