"""
Litecoin address generation utilities for P2SH-wrapped SegWit (P2SH-P2WPKH).
"""

from __future__ import annotations

import hashlib

import base58
import bech32

from ltcpay.constants import BECH32_HRP, LEGACY_P2SH_VERSION, P2PKH_VERSION, P2SH_VERSION
from ltcpay.models import NetworkType, network_name


def hash160(data: bytes) -> bytes:
    """RIPEMD160(SHA256(data))"""
    h = hashlib.new("ripemd160")
    h.update(hashlib.sha256(data).digest())
    return h.digest()


def pubkey_to_p2wpkh_script(pubkey_bytes: bytes) -> bytes:
    """
    Witness program for a compressed pubkey (OP_0 <20-byte-hash>).

    Inside P2SH-P2WPKH this is the redeem script.
    """
    if len(pubkey_bytes) != 33:
        raise ValueError(f"Invalid compressed pubkey length: {len(pubkey_bytes)}")

    return bytes([0x00, 0x14]) + hash160(pubkey_bytes)


def script_to_p2sh_scriptpubkey(script: bytes) -> bytes:
    """OP_HASH160 <20-byte-scripthash> OP_EQUAL"""
    return bytes([0xA9, 0x14]) + hash160(script) + bytes([0x87])


def pubkey_to_p2sh_p2wpkh_address(
    pubkey_bytes: bytes, network: NetworkType | str = NetworkType.MAINNET
) -> str:
    """
    Convert a compressed public key to a P2SH-P2WPKH address.

    Uses Litecoin's native script prefix (M... on mainnet, Q... on testnet)
    rather than the Bitcoin-compatible 3.../2... alias.
    """
    redeem_script = pubkey_to_p2wpkh_script(pubkey_bytes)
    version = P2SH_VERSION[network_name(network)]
    return base58.b58encode_check(bytes([version]) + hash160(redeem_script)).decode("ascii")


def address_to_scriptpubkey(
    address: str, network: NetworkType | str = NetworkType.MAINNET
) -> bytes:
    """
    Convert a Litecoin address to scriptPubKey.

    Only addresses of the given network are accepted:
    - P2WPKH / P2WSH (ltc1... on mainnet, tltc1... on testnet)
    - P2PKH (L... on mainnet, m.../n... on testnet)
    - P2SH (M... / legacy 3... on mainnet, Q... / legacy 2... on testnet)

    Raises:
        ValueError: If the address is malformed or belongs to another network
    """
    network = network_name(network)
    hrp = BECH32_HRP[network]

    lowered = address.lower()
    # bech32 is single-case; mixed case means base58
    single_case = address in (lowered, address.upper())
    for other_hrp in BECH32_HRP.values():
        if single_case and lowered.startswith(other_hrp + "1"):
            if other_hrp != hrp:
                raise ValueError(f"Address {address} is not a {network} address")

            witver, witprog = bech32.decode(hrp, address)
            if witver is None or witprog is None:
                raise ValueError(f"Invalid bech32 address: {address}")

            if witver == 0 and len(witprog) in (20, 32):
                # OP_0 <20-byte-pubkeyhash> or OP_0 <32-byte-scripthash>
                return bytes([0x00, len(witprog)]) + bytes(witprog)

            raise ValueError(f"Unsupported witness version: {witver}")

    try:
        decoded = base58.b58decode_check(address)
    except ValueError as e:
        raise ValueError(f"Invalid address: {address}") from e

    if len(decoded) != 21:
        raise ValueError(f"Invalid address payload length: {address}")

    version = decoded[0]
    payload = decoded[1:]

    if version == P2PKH_VERSION[network]:
        # OP_DUP OP_HASH160 <20-byte-pubkeyhash> OP_EQUALVERIFY OP_CHECKSIG
        return bytes([0x76, 0xA9, 0x14]) + payload + bytes([0x88, 0xAC])
    if version in (P2SH_VERSION[network], LEGACY_P2SH_VERSION[network]):
        return bytes([0xA9, 0x14]) + payload + bytes([0x87])

    other_versions = {P2PKH_VERSION[n] for n in P2PKH_VERSION if n != network}
    other_versions |= {P2SH_VERSION[n] for n in P2SH_VERSION if n != network}
    other_versions |= {LEGACY_P2SH_VERSION[n] for n in LEGACY_P2SH_VERSION if n != network}
    if version in other_versions:
        raise ValueError(f"Address {address} is not a {network} address")
    raise ValueError(f"Unknown address version: {version}")
