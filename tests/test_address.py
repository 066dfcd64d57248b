"""
Tests for address derivation and key handling.
"""

from __future__ import annotations

import base58
import bech32
import pytest
from coincurve import PrivateKey

from ltcpay.address import (
    address_to_scriptpubkey,
    hash160,
    pubkey_to_p2sh_p2wpkh_address,
    pubkey_to_p2wpkh_script,
    script_to_p2sh_scriptpubkey,
)
from ltcpay.keys import HDKey, KeyMaterial, decode_wif, encode_wif


class TestHash160:
    def test_length(self) -> None:
        assert len(hash160(b"")) == 20

    def test_known_value(self) -> None:
        # RIPEMD160(SHA256(""))
        assert hash160(b"").hex() == "b472a266d0bd89c13706a4132ccfb16f7c3b9fcb"


class TestP2shP2wpkhAddress:
    def test_mainnet_prefix(self, key: KeyMaterial) -> None:
        address = pubkey_to_p2sh_p2wpkh_address(key.public_key_bytes, "mainnet")
        assert address.startswith("M")

    def test_testnet_prefix(self, key: KeyMaterial) -> None:
        address = pubkey_to_p2sh_p2wpkh_address(key.public_key_bytes, "testnet")
        assert address.startswith("Q")

    def test_payload_is_redeem_script_hash(self, key: KeyMaterial) -> None:
        address = pubkey_to_p2sh_p2wpkh_address(key.public_key_bytes)
        decoded = base58.b58decode_check(address)

        redeem_script = bytes([0x00, 0x14]) + hash160(key.public_key_bytes)
        assert decoded[0] == 0x32
        assert decoded[1:] == hash160(redeem_script)

    def test_scriptpubkey_roundtrip(self, key: KeyMaterial) -> None:
        address = pubkey_to_p2sh_p2wpkh_address(key.public_key_bytes)
        redeem_script = pubkey_to_p2wpkh_script(key.public_key_bytes)
        assert address_to_scriptpubkey(address) == script_to_p2sh_scriptpubkey(redeem_script)

    def test_uncompressed_pubkey_rejected(self) -> None:
        pubkey = PrivateKey(bytes([0x01] * 32)).public_key.format(compressed=False)
        with pytest.raises(ValueError, match="compressed pubkey"):
            pubkey_to_p2wpkh_script(pubkey)

    def test_invalid_network(self, key: KeyMaterial) -> None:
        with pytest.raises(ValueError):
            pubkey_to_p2sh_p2wpkh_address(key.public_key_bytes, "regtest")


class TestAddressToScriptPubKey:
    def test_p2pkh(self, destination_address: str) -> None:
        script = address_to_scriptpubkey(destination_address)
        assert destination_address.startswith("L")
        assert len(script) == 25
        assert script[:3] == bytes([0x76, 0xA9, 0x14])
        assert script[-2:] == bytes([0x88, 0xAC])

    def test_legacy_p2sh_prefix(self) -> None:
        script_hash = bytes(range(20))
        address = base58.b58encode_check(bytes([0x05]) + script_hash).decode()
        assert address.startswith("3")
        assert address_to_scriptpubkey(address) == bytes([0xA9, 0x14]) + script_hash + b"\x87"

    def test_p2wpkh_bech32(self) -> None:
        program = bytes(range(20))
        address = bech32.encode("ltc", 0, program)
        assert address.startswith("ltc1")
        assert address_to_scriptpubkey(address) == bytes([0x00, 0x14]) + program

    def test_p2wsh_testnet_bech32(self) -> None:
        program = bytes(range(32))
        address = bech32.encode("tltc", 0, program)
        assert address_to_scriptpubkey(address, "testnet") == bytes([0x00, 0x20]) + program

    def test_testnet_p2pkh_and_p2sh(self) -> None:
        hash20 = bytes(range(20))
        p2pkh = base58.b58encode_check(bytes([0x6F]) + hash20).decode()
        p2sh = base58.b58encode_check(bytes([0x3A]) + hash20).decode()
        assert p2sh.startswith("Q")

        assert address_to_scriptpubkey(p2pkh, "testnet")[3:23] == hash20
        assert address_to_scriptpubkey(p2sh, "testnet") == bytes([0xA9, 0x14]) + hash20 + b"\x87"

    @pytest.mark.parametrize(
        "address",
        [
            bech32.encode("tltc", 0, bytes(20)),
            base58.b58encode_check(bytes([0x6F]) + bytes(20)).decode(),
            base58.b58encode_check(bytes([0x3A]) + bytes(20)).decode(),
            base58.b58encode_check(bytes([0xC4]) + bytes(20)).decode(),
        ],
    )
    def test_testnet_address_rejected_on_mainnet(self, address: str) -> None:
        with pytest.raises(ValueError, match="is not a mainnet address"):
            address_to_scriptpubkey(address, "mainnet")

    @pytest.mark.parametrize(
        "address",
        [
            bech32.encode("ltc", 0, bytes(20)),
            base58.b58encode_check(bytes([0x30]) + bytes(20)).decode(),
            base58.b58encode_check(bytes([0x32]) + bytes(20)).decode(),
            base58.b58encode_check(bytes([0x05]) + bytes(20)).decode(),
        ],
    )
    def test_mainnet_address_rejected_on_testnet(self, address: str) -> None:
        with pytest.raises(ValueError, match="is not a testnet address"):
            address_to_scriptpubkey(address, "testnet")

    def test_bad_checksum(self, destination_address: str) -> None:
        broken = destination_address[:-1] + ("1" if destination_address[-1] != "1" else "2")
        with pytest.raises(ValueError):
            address_to_scriptpubkey(broken)

    def test_unknown_version(self) -> None:
        address = base58.b58encode_check(bytes([0x99]) + bytes(20)).decode()
        with pytest.raises(ValueError, match="Unknown address version"):
            address_to_scriptpubkey(address)


class TestWif:
    def test_roundtrip(self) -> None:
        secret = bytes([0x01] * 32)
        wif = encode_wif(secret, "mainnet")
        assert decode_wif(wif) == (secret, True)
        assert decode_wif(wif, "mainnet") == (secret, True)

    def test_wrong_network(self) -> None:
        wif = encode_wif(bytes([0x01] * 32), "testnet")
        with pytest.raises(ValueError, match="does not match"):
            decode_wif(wif, "mainnet")

    def test_bitcoin_wif_rejected(self) -> None:
        wif = base58.b58encode_check(b"\x80" + bytes([0x01] * 32) + b"\x01").decode()
        with pytest.raises(ValueError, match="Unknown WIF version"):
            decode_wif(wif)


class TestKeyMaterial:
    def test_from_wif(self, key: KeyMaterial) -> None:
        restored = KeyMaterial.from_wif(key.to_wif("testnet"), "testnet")
        assert restored.public_key_bytes == key.public_key_bytes

    def test_compressed_pubkey(self, key: KeyMaterial) -> None:
        assert len(key.public_key_bytes) == 33
        assert key.public_key_bytes[0] in (0x02, 0x03)

    def test_from_node_variants(self, key: KeyMaterial, hd_key: HDKey) -> None:
        secret = bytes([0x01] * 32)
        assert KeyMaterial.from_node(key) is key
        assert KeyMaterial.from_node(secret).public_key_bytes == key.public_key_bytes
        assert KeyMaterial.from_node(PrivateKey(secret)).public_key_bytes == key.public_key_bytes
        assert KeyMaterial.from_node(key.to_wif()).public_key_bytes == key.public_key_bytes

        from_hd = KeyMaterial.from_node(hd_key)
        assert from_hd.public_key_bytes == hd_key.public_key.format(compressed=True)

    def test_from_node_with_to_wif(self, key: KeyMaterial) -> None:
        class Node:
            def to_wif(self) -> str:
                return key.to_wif()

        assert KeyMaterial.from_node(Node()).public_key_bytes == key.public_key_bytes

    def test_from_node_unsupported(self) -> None:
        with pytest.raises(TypeError, match="Unsupported key node"):
            KeyMaterial.from_node(42)


class TestHDKey:
    def test_derivation_depth(self, hd_key: HDKey) -> None:
        assert hd_key.depth == 5

    def test_derivation_deterministic(self, sample_mnemonic: str) -> None:
        from ltcpay.keys import mnemonic_to_seed

        master = HDKey.from_seed(mnemonic_to_seed(sample_mnemonic))
        a = master.derive("m/49'/2'/0'/0/0")
        b = master.derive("m/49h/2h/0h/0/0")
        c = master.derive("m/49'/2'/0'/0/1")
        assert a.to_wif() == b.to_wif()
        assert a.to_wif() != c.to_wif()

    def test_invalid_path(self, hd_key: HDKey) -> None:
        with pytest.raises(ValueError, match="must start with"):
            hd_key.derive("49'/2'")

    def test_address(self, hd_key: HDKey) -> None:
        assert hd_key.get_address().startswith("M")
        assert hd_key.get_address("testnet").startswith("Q")
