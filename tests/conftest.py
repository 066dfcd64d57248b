"""
Test configuration for ltcpay tests.
"""

from __future__ import annotations

import base58
import pytest

from ltcpay.address import hash160
from ltcpay.keys import HDKey, KeyMaterial, mnemonic_to_seed
from ltcpay.models import UTXO


@pytest.fixture
def sample_mnemonic() -> str:
    """Test mnemonic (not for production use!)."""
    return (
        "abandon abandon abandon abandon abandon abandon "
        "abandon abandon abandon abandon abandon about"
    )


@pytest.fixture
def hd_key(sample_mnemonic: str) -> HDKey:
    return HDKey.from_seed(mnemonic_to_seed(sample_mnemonic)).derive("m/49'/2'/0'/0/0")


@pytest.fixture
def key() -> KeyMaterial:
    return KeyMaterial.from_secret(bytes([0x01] * 32))


@pytest.fixture
def destination_address() -> str:
    """Mainnet P2PKH (L...) address of an unrelated key."""
    other = KeyMaterial.from_secret(bytes([0x02] * 32))
    return base58.b58encode_check(bytes([0x30]) + hash160(other.public_key_bytes)).decode()


@pytest.fixture
def sample_utxos() -> list[UTXO]:
    return [
        UTXO(txid="aa" * 32, vout=0, value=500_000),
        UTXO(txid="bb" * 32, vout=3, value=300_000),
    ]
