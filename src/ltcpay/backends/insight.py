"""
Insight API indexer backend.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import httpx
from loguru import logger

from ltcpay.backends.base import IndexerBackend
from ltcpay.constants import DEFAULT_HTTP_TIMEOUT, DEFAULT_INSIGHT_URL
from ltcpay.errors import IndexerError
from ltcpay.models import UTXO, Balance, TxHistoryEntry


class InsightBackend(IndexerBackend):
    """
    Indexer backend for an Insight API instance (e.g. insight.litecore.io).

    Endpoints used:
    - GET {base}addr/{address}          balance
    - GET {base}addr/{address}/utxo     unspent outputs
    - GET {base}txs?address={address}   history
    """

    def __init__(
        self,
        insight_url: str = DEFAULT_INSIGHT_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        self.insight_url = insight_url.rstrip("/") + "/"
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """
        GET a JSON document from the indexer.

        Raises:
            IndexerError: On non-200 responses, transport errors and timeouts
        """
        logger.debug(f"Indexer request: {url} {params or ''}")
        try:
            response = await self.client.get(url, params=params, timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.error(f"Indexer request failed: {url} - {type(e).__name__}: {e}")
            raise IndexerError(f"Unable to reach indexer at {url}: {e}", url) from e

        if response.status_code != 200:
            logger.error(f"Indexer returned HTTP {response.status_code} for {url}")
            raise IndexerError(f"HTTP {response.status_code} from {url}", url)

        try:
            return response.json()
        except ValueError as e:
            raise IndexerError(f"Invalid JSON from {url}", url) from e

    async def get_balance(self, address: str) -> Balance:
        url = f"{self.insight_url}addr/{address}"
        try:
            body = await self._get(url)
            balance = Balance(
                balance=Decimal(str(body.get("balance", 0))),
                unconfirmed_balance=Decimal(str(body.get("unconfirmedBalance", 0))),
            )
        except (IndexerError, AttributeError, ArithmeticError) as e:
            raise IndexerError(f"Unable to get balance from {url}", url) from e

        logger.debug(f"Balance for {address}: {balance.balance} LTC")
        return balance

    async def get_utxos(self, address: str) -> list[UTXO]:
        url = f"{self.insight_url}addr/{address}/utxo"
        try:
            body = await self._get(url)
            utxos = [UTXO.from_insight(entry) for entry in body]
        except (IndexerError, KeyError, TypeError, ValueError) as e:
            raise IndexerError(f"Unable to get UTXOs from {url}", url) from e

        logger.debug(f"Found {len(utxos)} UTXOs for {address}")
        return utxos

    async def get_tx_history(self, address: str) -> list[TxHistoryEntry]:
        url = f"{self.insight_url}txs"
        try:
            body = await self._get(url, params={"address": address})
            return [TxHistoryEntry.from_insight(tx) for tx in body["txs"]]
        except (IndexerError, KeyError, TypeError) as e:
            raise IndexerError(f"unable to fetch transaction history: {e}", url) from e

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
