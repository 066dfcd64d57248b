"""
Litecoin P2SH-P2WPKH payments.

Sequences a payment as:
1. Derive the wrapped-SegWit address for the key
2. Fetch its UTXOs from the indexer
3. Build and sign a transaction spending all of them
4. Broadcast, retrying once against the backup endpoint

A failure at any step is raised unchanged and skips the remaining steps.
Nothing external changes before a successful broadcast, so there is nothing
to roll back.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from loguru import logger

from ltcpay.address import pubkey_to_p2sh_p2wpkh_address
from ltcpay.backends import IndexerBackend, InsightBackend
from ltcpay.broadcast import Broadcaster
from ltcpay.config import PaymentsConfig, load_config
from ltcpay.errors import NoUTXOsError
from ltcpay.keys import KeyMaterial
from ltcpay.models import (
    UTXO,
    Balance,
    NetworkType,
    SignedTransaction,
    TxHistoryEntry,
    network_name,
)
from ltcpay.tx_builder import SegwitTxBuilder


class LitecoinSegwitPayments:
    """
    Payment facade over the indexer, transaction builder and broadcaster.

    Either pass a ready PaymentsConfig or keyword options (snake_case or the
    camelCase names used by older callers), e.g.
    ``LitecoinSegwitPayments(insightUrl="https://...", network="testnet")``.
    """

    def __init__(
        self,
        config: PaymentsConfig | None = None,
        *,
        backend: IndexerBackend | None = None,
        broadcaster: Broadcaster | None = None,
        **options: Any,
    ):
        self.config = config if config is not None else load_config(**options)
        self.backend = backend or InsightBackend(
            self.config.insight_url, timeout=self.config.http_timeout
        )
        self.broadcaster = broadcaster or Broadcaster(timeout=self.config.http_timeout)
        self.tx_builder = SegwitTxBuilder(self.config.network, self.config.fee_per_byte)

        logger.debug(
            f"Initialized {self.config.network} payments via {self.config.insight_url}, "
            f"{self.config.fee_per_byte} sat/byte"
        )

    async def __aenter__(self) -> LitecoinSegwitPayments:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _network(self, network: NetworkType | str | None) -> str:
        return network_name(network or self.config.network)

    def get_address(self, key: Any, network: NetworkType | str | None = None) -> str:
        """P2SH-P2WPKH address (M... / Q...) for a key or key node."""
        network = self._network(network)
        key_material = KeyMaterial.from_node(key, network)
        return pubkey_to_p2sh_p2wpkh_address(key_material.public_key_bytes, network)

    async def get_balance(self, address: str) -> Balance:
        return await self.backend.get_balance(address)

    async def get_utxos(self, key: Any, network: NetworkType | str | None = None) -> list[UTXO]:
        """
        Fetch the spendable outputs of the key's address.

        Raises:
            NoUTXOsError: If the indexer reports no unspent outputs
            IndexerError: If the query fails
        """
        address = self.get_address(key, network)
        utxos = await self.backend.get_utxos(address)

        if not utxos:
            raise NoUTXOsError(f"This address has no unspent outputs {address}")

        limit = self.config.testnet_utxo_limit
        if self.config.network == NetworkType.TESTNET.value and limit and len(utxos) > limit:
            logger.warning(f"Testnet: clipping UTXO list from {len(utxos)} to {limit}")
            utxos = utxos[:limit]

        return utxos

    def get_transaction(
        self,
        key: Any,
        network: NetworkType | str | None,
        to: str,
        amount: Decimal | int | float | str,
        utxos: list[UTXO],
        fee_per_byte: int | None = None,
    ) -> SignedTransaction:
        """Build and sign a transaction sending amount (LTC) minus fee to `to`."""
        network = self._network(network)
        builder = self.tx_builder
        if network != builder.network:
            builder = SegwitTxBuilder(network, self.config.fee_per_byte)

        return builder.build(key, to, amount, utxos, fee_per_byte)

    async def broadcast_transaction(
        self, signed_tx: SignedTransaction, retry_url: str | None = None
    ) -> str:
        """Broadcast via the configured endpoint, falling back to retry_url or the backup."""
        return await self.broadcaster.broadcast(
            signed_tx,
            self.config.broadcast_url,
            retry_url or self.config.backup_broadcast_url,
        )

    async def send_payment(
        self,
        key: Any,
        to: str,
        amount: Decimal | int | float | str,
        network: NetworkType | str | None = None,
        fee_per_byte: int | None = None,
    ) -> str:
        """
        Send amount (in LTC) from the key's P2SH-P2WPKH address to `to`.

        Returns:
            Transaction ID

        Raises:
            NoUTXOsError, InsufficientFundsError, IndexerError, BroadcastError
        """
        logger.info(f"Sending {amount} LTC to {to}")
        utxos = await self.get_utxos(key, network)
        signed_tx = self.get_transaction(key, network, to, amount, utxos, fee_per_byte)
        return await self.broadcast_transaction(signed_tx)

    transaction = send_payment

    async def get_tx_history(self, address: str) -> list[TxHistoryEntry]:
        return await self.backend.get_tx_history(address)

    async def get_fee(
        self,
        key: Any,
        network: NetworkType | str | None = None,
        fee_per_byte: int | None = None,
    ) -> int:
        """Fee in satoshis for sweeping the key's current UTXOs to one output."""
        utxos = await self.get_utxos(key, network)
        return self.tx_builder.calculate_fee(len(utxos), fee_per_byte)

    async def close(self) -> None:
        await self.backend.close()
        await self.broadcaster.close()
