"""
ltcpay - Litecoin P2SH-P2WPKH payments

Derives wrapped-SegWit addresses, queries an Insight indexer, builds and
signs single-output transactions and broadcasts them with one fallback.
"""

__version__ = "0.1.0"

from ltcpay.address import address_to_scriptpubkey, pubkey_to_p2sh_p2wpkh_address
from ltcpay.backends import IndexerBackend, InsightBackend
from ltcpay.broadcast import Broadcaster
from ltcpay.config import PaymentsConfig, load_config
from ltcpay.constants import DEFAULT_SAT_PER_BYTE, MIN_RELAY_FEE
from ltcpay.errors import (
    BroadcastError,
    ConfigurationError,
    IndexerError,
    InsufficientFundsError,
    NoUTXOsError,
    PaymentsError,
)
from ltcpay.fees import apply_min_relay_fee, estimate_tx_fee, estimate_tx_size
from ltcpay.keys import HDKey, KeyMaterial
from ltcpay.log import setup_logging
from ltcpay.models import (
    UTXO,
    Balance,
    NetworkType,
    SignedTransaction,
    SizeEstimate,
    TxHistoryEntry,
)
from ltcpay.payments import LitecoinSegwitPayments
from ltcpay.tx_builder import SegwitTxBuilder, build_signed_transaction

__all__ = [
    "Balance",
    "Broadcaster",
    "BroadcastError",
    "ConfigurationError",
    "DEFAULT_SAT_PER_BYTE",
    "HDKey",
    "IndexerBackend",
    "IndexerError",
    "InsightBackend",
    "InsufficientFundsError",
    "KeyMaterial",
    "LitecoinSegwitPayments",
    "MIN_RELAY_FEE",
    "NetworkType",
    "NoUTXOsError",
    "PaymentsConfig",
    "PaymentsError",
    "SegwitTxBuilder",
    "SignedTransaction",
    "SizeEstimate",
    "TxHistoryEntry",
    "UTXO",
    "address_to_scriptpubkey",
    "apply_min_relay_fee",
    "build_signed_transaction",
    "estimate_tx_fee",
    "estimate_tx_size",
    "load_config",
    "pubkey_to_p2sh_p2wpkh_address",
    "setup_logging",
]
