"""
Configuration management using pydantic-settings.

Options are resolved once, when the config is built, from (highest first)
explicit arguments, LTCPAY_* environment variables, a .env file and the
defaults in ltcpay.constants. The result is frozen.
"""

from __future__ import annotations

from typing import Any, Literal

from loguru import logger
from pydantic import Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ltcpay.constants import (
    DEFAULT_BACKUP_BROADCAST_URL,
    DEFAULT_BROADCAST_URL,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_INSIGHT_URL,
    DEFAULT_SAT_PER_BYTE,
    TESTNET_UTXO_LIMIT,
)
from ltcpay.errors import ConfigurationError

# camelCase option names accepted for older callers
CAMEL_CASE_OPTIONS = {
    "insightUrl": "insight_url",
    "feePerByte": "fee_per_byte",
    "backupBroadcastUrl": "backup_broadcast_url",
    "broadcastUrl": "broadcast_url",
    "httpTimeout": "http_timeout",
}


class PaymentsConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LTCPAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    insight_url: str = DEFAULT_INSIGHT_URL
    fee_per_byte: int = Field(default=DEFAULT_SAT_PER_BYTE, gt=0, description="sat/byte")
    network: Literal["mainnet", "testnet"] = "mainnet"

    broadcast_url: str = DEFAULT_BROADCAST_URL
    backup_broadcast_url: str = DEFAULT_BACKUP_BROADCAST_URL

    http_timeout: float = Field(default=DEFAULT_HTTP_TIMEOUT, gt=0, description="Seconds")
    # Only the first N UTXOs are spent on testnet; None spends all of them
    testnet_utxo_limit: int | None = Field(default=TESTNET_UTXO_LIMIT, ge=1)

    @model_validator(mode="before")
    @classmethod
    def resolve_options(cls, data: Any) -> Any:
        """Accept camelCase option names and warn when no indexer is configured."""
        if not isinstance(data, dict):
            return data

        data = {CAMEL_CASE_OPTIONS.get(key, key): value for key, value in data.items()}
        if not data.get("network"):
            data.pop("network", None)
        if not data.get("insight_url"):
            data.pop("insight_url", None)
            logger.warning(
                "Using default litecoin block explorer. It is highly suggested you set one "
                f"yourself! {DEFAULT_INSIGHT_URL}"
            )
        return data


def load_config(**options: Any) -> PaymentsConfig:
    """
    Build a PaymentsConfig.

    Raises:
        ConfigurationError: If any option is invalid (e.g. an unknown network)
    """
    try:
        return PaymentsConfig(**options)
    except ValidationError as e:
        for err in e.errors():
            if err["loc"] == ("network",):
                raise ConfigurationError(f"Invalid network provided {err['input']}") from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e
