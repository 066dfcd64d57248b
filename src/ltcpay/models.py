"""
Payment data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any


class NetworkType(str, Enum):
    MAINNET = "mainnet"
    TESTNET = "testnet"


def network_name(network: NetworkType | str) -> str:
    """Normalize a network argument to its plain string name.

    Raises:
        ValueError: If the network is not mainnet or testnet
    """
    return NetworkType(network).value


@dataclass(frozen=True)
class UTXO:
    """Spendable output as consumed by the transaction builder"""

    txid: str
    vout: int
    value: int  # satoshis

    @classmethod
    def from_insight(cls, data: dict[str, Any]) -> UTXO:
        """Keep txid/vout/satoshis, drop confirmations, height, ts and friends."""
        return cls(txid=data["txid"], vout=int(data["vout"]), value=int(data["satoshis"]))


class SignedTransaction:
    """
    A fully signed transaction ready for broadcast.

    raw_hex and txid are read-only, fixed when the builder creates the
    transaction. Only ``broadcasted`` changes, through mark_broadcasted().
    """

    def __init__(self, raw_hex: str, txid: str, broadcasted: bool = False):
        self._raw_hex = raw_hex
        self._txid = txid
        self.broadcasted = broadcasted

    @property
    def raw_hex(self) -> str:
        return self._raw_hex

    @property
    def txid(self) -> str:
        return self._txid

    def mark_broadcasted(self) -> None:
        self.broadcasted = True

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SignedTransaction):
            return NotImplemented
        return (self._raw_hex, self._txid, self.broadcasted) == (
            other._raw_hex,
            other._txid,
            other.broadcasted,
        )

    def __repr__(self) -> str:
        return f"SignedTransaction(txid={self._txid!r}, broadcasted={self.broadcasted})"


@dataclass
class BroadcastAttempt:
    endpoint: str
    payload: str
    previous_body: str | None = None


@dataclass(frozen=True)
class SizeEstimate:
    min: float
    max: float


@dataclass(frozen=True)
class Balance:
    """Address balance in whole coins, as reported by the indexer"""

    balance: Decimal
    unconfirmed_balance: Decimal


@dataclass(frozen=True)
class TxHistoryEntry:
    txid: str
    send_address: str | None
    receive_address: str | None
    fee: Decimal | None
    amount_sent: Decimal | None
    amount_received: Decimal | None
    date: int | None

    @classmethod
    def from_insight(cls, tx: dict[str, Any]) -> TxHistoryEntry:
        vout = tx.get("vout") or [{}]
        vin = tx.get("vin") or [{}]
        addresses = vout[0].get("addresses") or vout[0].get("scriptPubKey", {}).get("addresses")

        return cls(
            txid=tx["txid"],
            send_address=addresses[0] if addresses else None,
            receive_address=vin[0].get("addr"),
            fee=_to_decimal(tx.get("fees")),
            amount_sent=_to_decimal(tx.get("valueIn")),
            amount_received=_to_decimal(tx.get("valueOut")),
            date=tx.get("time"),
        )


def _to_decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))
