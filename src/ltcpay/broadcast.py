"""
Raw transaction broadcast with a single fallback endpoint.

The primary endpoint gets one attempt. Any failure there (non-200 status,
transport error, timeout) triggers exactly one attempt against the backup
endpoint with the same payload. If that fails too, BroadcastError carries
both response bodies.
"""

from __future__ import annotations

import httpx
from loguru import logger

from ltcpay.constants import DEFAULT_HTTP_TIMEOUT
from ltcpay.errors import BroadcastError
from ltcpay.models import BroadcastAttempt, SignedTransaction


class Broadcaster:
    """POSTs signed transaction hex to a push endpoint (Blockbook/Insight style)."""

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ):
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)

    async def _attempt(self, attempt: BroadcastAttempt) -> tuple[bool, str]:
        """
        Run one broadcast attempt.

        Returns:
            (success, response body or transport error text)
        """
        logger.debug(f"Broadcasting to {attempt.endpoint}")
        try:
            response = await self.client.post(
                attempt.endpoint, content=attempt.payload, timeout=self.timeout
            )
        except httpx.HTTPError as e:
            logger.warning(f"Broadcast to {attempt.endpoint} failed: {type(e).__name__}: {e}")
            return False, f"{type(e).__name__}: {e}"

        if response.status_code != 200:
            logger.warning(
                f"Broadcast to {attempt.endpoint} rejected: HTTP {response.status_code} "
                f"{response.text}"
            )
            return False, response.text

        return True, response.text

    async def broadcast(
        self, signed_tx: SignedTransaction, primary_url: str, backup_url: str
    ) -> str:
        """
        Broadcast a signed transaction.

        Args:
            signed_tx: Transaction from the builder
            primary_url: First endpoint to try
            backup_url: Endpoint used for the one retry

        Returns:
            The txid computed at build time (never parsed from the response)

        Raises:
            BroadcastError: If both attempts fail
        """
        attempt = BroadcastAttempt(endpoint=primary_url, payload=signed_tx.raw_hex)
        success, body = await self._attempt(attempt)

        if not success:
            logger.info(f"Retrying broadcast of {signed_tx.txid} via {backup_url}")
            attempt = BroadcastAttempt(
                endpoint=backup_url, payload=signed_tx.raw_hex, previous_body=body
            )
            success, body = await self._attempt(attempt)

            if not success:
                logger.error(f"Unable to broadcast {signed_tx.txid}")
                raise BroadcastError(body, attempt.previous_body or "")

        signed_tx.mark_broadcasted()
        logger.info(f"Broadcast transaction: {signed_tx.txid}")
        return signed_tx.txid

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()
