from __future__ import annotations

from typing import Dict


class IllustrationError(Exception):
    pass


class CapacityParseError(IllustrationError, ValueError):
    pass


class DataSourceError(IllustrationError):
    pass


class RateLimitError(DataSourceError):
    pass


class TransactionNotFoundError(DataSourceError):
    def __init__(self, tx_hash: str) -> None:
        super().__init__(f"Transaction not found: {tx_hash}")
        self.tx_hash = tx_hash


class InputResolutionError(IllustrationError):
    """
    One or more inputs of a transaction could not be resolved to the cell
    they spend. `failures` maps the input index to the underlying error.
    """

    def __init__(self, tx_hash: str, failures: Dict[int, Exception]) -> None:
        detail = ", ".join(
            f"#{i}: {e.__class__.__name__}: {e}" for i, e in sorted(failures.items())
        )
        super().__init__(f"Failed to resolve {len(failures)} input(s) of {tx_hash} ({detail})")
        self.tx_hash = tx_hash
        self.failures = dict(failures)
