"""
Litecoin network and payment constants.

Fee-related values match what existing callers of the segwit payment flow
expect:
- MIN_RELAY_FEE: floor applied to every fee that ends up in a transaction
- DEFAULT_SAT_PER_BYTE: fee rate used when none is configured
"""

from __future__ import annotations

# Fee policy
MIN_RELAY_FEE = 1000  # satoshis
DEFAULT_SAT_PER_BYTE = 30

# 1 LTC = 100,000,000 litoshis
SATOSHIS_PER_COIN = 100_000_000

# Public infrastructure used when nothing else is configured
DEFAULT_INSIGHT_URL = "https://insight.litecore.io/api/"
DEFAULT_BROADCAST_URL = "https://ltc1.trezor.io/api/sendtx/"
DEFAULT_BACKUP_BROADCAST_URL = "https://ltc1.trezor.io/api/sendtx/"

# Timeout for every indexer and broadcast request (seconds)
DEFAULT_HTTP_TIMEOUT = 30.0

# The indexer's testnet instance only gets the first few UTXOs spent per call
TESTNET_UTXO_LIMIT = 2

# Base58 version bytes per network
P2PKH_VERSION = {"mainnet": 0x30, "testnet": 0x6F}  # L..., m.../n...
P2SH_VERSION = {"mainnet": 0x32, "testnet": 0x3A}  # M..., Q...
# Bitcoin-style P2SH prefixes (3..., 2...) are still valid on Litecoin
LEGACY_P2SH_VERSION = {"mainnet": 0x05, "testnet": 0xC4}
WIF_VERSION = {"mainnet": 0xB0, "testnet": 0xEF}

# Bech32 human-readable parts
BECH32_HRP = {"mainnet": "ltc", "testnet": "tltc"}

# Transaction serialization
TX_VERSION = 2
SEQUENCE_FINAL = 0xFFFFFFFF
SIGHASH_ALL = 0x01
