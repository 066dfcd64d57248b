"""
Base indexer backend interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ltcpay.models import UTXO, Balance, TxHistoryEntry


class IndexerBackend(ABC):
    """
    Abstract ledger indexer interface.
    Implementations answer address-level queries; the payment flow never
    talks to a node directly.
    """

    @abstractmethod
    async def get_balance(self, address: str) -> Balance:
        """Get confirmed and unconfirmed balance for an address"""

    @abstractmethod
    async def get_utxos(self, address: str) -> list[UTXO]:
        """Get spendable outputs for an address, in indexer order"""

    @abstractmethod
    async def get_tx_history(self, address: str) -> list[TxHistoryEntry]:
        """Get transaction history for an address"""

    async def close(self) -> None:
        """Close backend connection"""
        pass
