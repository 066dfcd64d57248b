"""
Key material for signing: WIF handling, a thin coincurve wrapper and a BIP32
key node.

Payment calls accept whatever the caller holds (a WIF string, raw secret,
coincurve key, HDKey or any node exposing ``to_wif()``) and normalize it to
KeyMaterial. Nothing here is persisted.
"""

from __future__ import annotations

import hashlib
import hmac
from typing import Any

import base58
from coincurve import PrivateKey, PublicKey

from ltcpay.constants import WIF_VERSION
from ltcpay.models import NetworkType, network_name

# secp256k1 curve order
SECP256K1_N = int("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141", 16)


def encode_wif(secret: bytes, network: NetworkType | str = NetworkType.MAINNET) -> str:
    """Encode a 32-byte secret as compressed-pubkey WIF."""
    payload = bytes([WIF_VERSION[network_name(network)]]) + secret + b"\x01"
    return base58.b58encode_check(payload).decode("ascii")


def decode_wif(wif: str, network: NetworkType | str | None = None) -> tuple[bytes, bool]:
    """
    Decode a WIF string.

    Args:
        wif: Base58Check WIF
        network: If given, the WIF version byte must belong to this network

    Returns:
        (secret, compressed)
    """
    try:
        payload = base58.b58decode_check(wif)
    except ValueError as e:
        raise ValueError("Invalid WIF checksum") from e

    version = payload[0]
    if network is not None and version != WIF_VERSION[network_name(network)]:
        raise ValueError(f"WIF version {version:#x} does not match network {network_name(network)}")
    if version not in WIF_VERSION.values():
        raise ValueError(f"Unknown WIF version: {version:#x}")

    if len(payload) == 34 and payload[33] == 0x01:
        return payload[1:33], True
    if len(payload) == 33:
        return payload[1:33], False

    raise ValueError(f"Invalid WIF payload length: {len(payload)}")


class KeyMaterial:
    """
    Private key used to derive the spending pubkey and sign inputs.

    Always exposes the compressed public key; P2WPKH rejects uncompressed keys.
    """

    def __init__(self, private_key: PrivateKey):
        self._private_key = private_key

    @classmethod
    def from_wif(cls, wif: str, network: NetworkType | str | None = None) -> KeyMaterial:
        secret, _ = decode_wif(wif, network)
        return cls(PrivateKey(secret))

    @classmethod
    def from_secret(cls, secret: bytes) -> KeyMaterial:
        if len(secret) != 32:
            raise ValueError(f"Invalid private key length: {len(secret)}")
        return cls(PrivateKey(secret))

    @classmethod
    def from_node(cls, node: Any, network: NetworkType | str | None = None) -> KeyMaterial:
        """
        Build KeyMaterial from whatever key-bearing object the caller passed.

        Accepted: KeyMaterial, coincurve PrivateKey, HDKey (or anything with a
        ``private_key`` PrivateKey attribute), objects with ``to_wif()``,
        WIF strings and raw 32-byte secrets.
        """
        if isinstance(node, KeyMaterial):
            return node
        if isinstance(node, PrivateKey):
            return cls(node)
        if isinstance(getattr(node, "private_key", None), PrivateKey):
            return cls(node.private_key)
        if callable(getattr(node, "to_wif", None)):
            return cls.from_wif(node.to_wif())
        if isinstance(node, str):
            return cls.from_wif(node, network)
        if isinstance(node, bytes | bytearray):
            return cls.from_secret(bytes(node))

        raise TypeError(f"Unsupported key node type: {type(node).__name__}")

    @property
    def public_key_bytes(self) -> bytes:
        return self._private_key.public_key.format(compressed=True)

    def sign_digest(self, digest: bytes) -> bytes:
        """DER signature over an already-hashed 32-byte digest."""
        # hasher=None: the sighash is already SHA256d
        return self._private_key.sign(digest, hasher=None)

    def to_wif(self, network: NetworkType | str = NetworkType.MAINNET) -> str:
        return encode_wif(self._private_key.secret, network)


class HDKey:
    """
    Hierarchical Deterministic Key (BIP32).

    Litecoin P2SH-P2WPKH accounts live under BIP49: m/49'/2'/account'/change/index
    (coin type 1 on testnet).
    """

    def __init__(self, private_key: PrivateKey, chain_code: bytes, depth: int = 0):
        self._private_key = private_key
        self._public_key = private_key.public_key
        self.chain_code = chain_code
        self.depth = depth

    @property
    def private_key(self) -> PrivateKey:
        return self._private_key

    @property
    def public_key(self) -> PublicKey:
        return self._public_key

    @classmethod
    def from_seed(cls, seed: bytes) -> HDKey:
        """Create master HD key from seed"""
        hmac_result = hmac.new(b"Bitcoin seed", seed, hashlib.sha512).digest()
        return cls(PrivateKey(hmac_result[:32]), hmac_result[32:], depth=0)

    def derive(self, path: str) -> HDKey:
        """
        Derive child key from path notation (e.g., "m/49'/2'/0'/0/0")
        ' or h indicates hardened derivation
        """
        if not path.startswith("m"):
            raise ValueError("Path must start with 'm'")

        key = self
        for part in path.split("/")[1:]:
            if not part:
                continue

            hardened = part.endswith(("'", "h"))
            index = int(part.rstrip("'h"))
            if hardened:
                index += 0x80000000

            key = key._derive_child(index)

        return key

    def _derive_child(self, index: int) -> HDKey:
        if index >= 0x80000000:
            data = b"\x00" + self._private_key.secret + index.to_bytes(4, "big")
        else:
            data = self._public_key.format(compressed=True) + index.to_bytes(4, "big")

        hmac_result = hmac.new(self.chain_code, data, hashlib.sha512).digest()
        offset_int = int.from_bytes(hmac_result[:32], "big")
        parent_key_int = int.from_bytes(self._private_key.secret, "big")

        child_key_int = (parent_key_int + offset_int) % SECP256K1_N
        if child_key_int == 0:
            raise ValueError("Invalid child key")

        child_private_key = PrivateKey(child_key_int.to_bytes(32, "big"))
        return HDKey(child_private_key, hmac_result[32:], depth=self.depth + 1)

    def to_wif(self, network: NetworkType | str = NetworkType.MAINNET) -> str:
        return encode_wif(self._private_key.secret, network)

    def get_address(self, network: NetworkType | str = NetworkType.MAINNET) -> str:
        """Get P2SH-P2WPKH address for this key"""
        from ltcpay.address import pubkey_to_p2sh_p2wpkh_address

        return pubkey_to_p2sh_p2wpkh_address(self._public_key.format(compressed=True), network)


def mnemonic_to_seed(mnemonic: str, passphrase: str = "") -> bytes:
    """
    Convert BIP39 mnemonic to seed.
    Does not validate the wordlist checksum.
    """
    salt = ("mnemonic" + passphrase).encode("utf-8")
    return hashlib.pbkdf2_hmac("sha512", mnemonic.encode("utf-8"), salt, 2048, dklen=64)
