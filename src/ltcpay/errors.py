"""
Exceptions raised by the payment pipeline.
"""

from __future__ import annotations


class PaymentsError(Exception):
    """Base class for all ltcpay errors."""

    pass


class ConfigurationError(PaymentsError):
    """Invalid configuration, raised while constructing the payments object."""

    pass


class NoUTXOsError(PaymentsError):
    """The address has nothing to spend."""

    pass


class InsufficientFundsError(PaymentsError):
    def __init__(self, total_balance: int, fee: int, message: str | None = None):
        self.total_balance = total_balance
        self.fee = fee
        super().__init__(message or f"Balance too small! {total_balance} {fee}")


class IndexerError(PaymentsError):
    """A balance, UTXO or history query against the indexer failed."""

    def __init__(self, message: str, url: str):
        self.url = url
        super().__init__(message)


class BroadcastError(PaymentsError):
    """Both the primary and the backup broadcast attempt failed."""

    def __init__(self, backup_body: str, primary_body: str):
        self.backup_body = backup_body
        self.primary_body = primary_body
        super().__init__(
            f"unable to broadcast. Some debug info: {backup_body} ---- {primary_body}"
        )
