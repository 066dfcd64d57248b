"""
Transaction serialization and signing for P2SH-P2WPKH inputs.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from ltcpay.address import hash160
from ltcpay.constants import SIGHASH_ALL
from ltcpay.keys import KeyMaterial


class TransactionSigningError(Exception):
    pass


@dataclass
class TxInput:
    txid_le: bytes
    vout: int
    script: bytes
    sequence: bytes

    @property
    def txid(self) -> str:
        """Previous txid in RPC (big-endian) hex form"""
        return self.txid_le[::-1].hex()


@dataclass
class TxOutput:
    value: int
    script: bytes


@dataclass
class Transaction:
    version: bytes
    marker_flag: bool
    inputs: list[TxInput]
    outputs: list[TxOutput]
    locktime: bytes
    raw: bytes = b""
    witnesses: list[list[bytes]] = field(default_factory=list)


def hash256(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def read_varint(data: bytes, offset: int) -> tuple[int, int]:
    first = data[offset]
    offset += 1

    if first < 0xFD:
        return first, offset
    if first == 0xFD:
        value = int.from_bytes(data[offset : offset + 2], "little")
        return value, offset + 2
    if first == 0xFE:
        value = int.from_bytes(data[offset : offset + 4], "little")
        return value, offset + 4
    value = int.from_bytes(data[offset : offset + 8], "little")
    return value, offset + 8


def encode_varint(value: int) -> bytes:
    if value < 0xFD:
        return bytes([value])
    if value <= 0xFFFF:
        return b"\xfd" + value.to_bytes(2, "little")
    if value <= 0xFFFFFFFF:
        return b"\xfe" + value.to_bytes(4, "little")
    return b"\xff" + value.to_bytes(8, "little")


def push_data(data: bytes) -> bytes:
    """Minimal script push for payloads up to 75 bytes."""
    if len(data) > 75:
        raise ValueError(f"Push too large for direct opcode: {len(data)} bytes")
    return bytes([len(data)]) + data


def deserialize_transaction(tx_bytes: bytes) -> Transaction:
    try:
        offset = 0
        version = tx_bytes[offset : offset + 4]
        offset += 4

        marker_flag = False
        if tx_bytes[offset] == 0x00 and tx_bytes[offset + 1] == 0x01:
            marker_flag = True
            offset += 2

        input_count, offset = read_varint(tx_bytes, offset)
        inputs: list[TxInput] = []

        for _ in range(input_count):
            txid_le = tx_bytes[offset : offset + 32]
            offset += 32

            vout = int.from_bytes(tx_bytes[offset : offset + 4], "little")
            offset += 4

            script_len, offset = read_varint(tx_bytes, offset)
            script = tx_bytes[offset : offset + script_len]
            offset += script_len

            sequence = tx_bytes[offset : offset + 4]
            offset += 4

            inputs.append(TxInput(txid_le, vout, script, sequence))

        output_count, offset = read_varint(tx_bytes, offset)
        outputs: list[TxOutput] = []

        for _ in range(output_count):
            value = int.from_bytes(tx_bytes[offset : offset + 8], "little")
            offset += 8

            script_len, offset = read_varint(tx_bytes, offset)
            script = tx_bytes[offset : offset + script_len]
            offset += script_len

            outputs.append(TxOutput(value, script))

        witnesses: list[list[bytes]] = []
        if marker_flag:
            for _ in range(input_count):
                stack_count, offset = read_varint(tx_bytes, offset)
                stack: list[bytes] = []
                for _ in range(stack_count):
                    item_len, offset = read_varint(tx_bytes, offset)
                    stack.append(tx_bytes[offset : offset + item_len])
                    offset += item_len
                witnesses.append(stack)

        locktime = tx_bytes[offset : offset + 4]
        return Transaction(version, marker_flag, inputs, outputs, locktime, tx_bytes, witnesses)

    except Exception as e:
        raise TransactionSigningError(f"Failed to parse transaction: {e}") from e


def serialize_transaction(tx: Transaction, include_witness: bool = True) -> bytes:
    """
    Serialize a transaction.

    With include_witness the segwit marker/flag and witness stacks are written
    (inputs without a stack get an empty one); without it the result is the
    legacy serialization the txid is computed from.
    """
    with_witness = include_witness and any(tx.witnesses)

    result = tx.version
    if with_witness:
        result += b"\x00\x01"

    result += encode_varint(len(tx.inputs))
    for inp in tx.inputs:
        result += inp.txid_le
        result += inp.vout.to_bytes(4, "little")
        result += encode_varint(len(inp.script))
        result += inp.script
        result += inp.sequence

    result += encode_varint(len(tx.outputs))
    for out in tx.outputs:
        result += out.value.to_bytes(8, "little")
        result += encode_varint(len(out.script))
        result += out.script

    if with_witness:
        for i in range(len(tx.inputs)):
            stack = tx.witnesses[i] if i < len(tx.witnesses) else []
            result += encode_varint(len(stack))
            for item in stack:
                result += encode_varint(len(item))
                result += item

    return result + tx.locktime


def compute_txid(tx: Transaction) -> str:
    """Double SHA256 of the non-witness serialization, displayed big-endian."""
    return hash256(serialize_transaction(tx, include_witness=False))[::-1].hex()


def compute_sighash_segwit(
    tx: Transaction,
    input_index: int,
    script_code: bytes,
    value: int,
    sighash_type: int,
) -> bytes:
    """BIP143 signature hash for a segwit v0 input."""
    try:
        if input_index >= len(tx.inputs):
            raise TransactionSigningError("Input index out of range")

        hash_prevouts = hash256(
            b"".join(inp.txid_le + inp.vout.to_bytes(4, "little") for inp in tx.inputs)
        )
        hash_sequence = hash256(b"".join(inp.sequence for inp in tx.inputs))
        hash_outputs = hash256(
            b"".join(
                out.value.to_bytes(8, "little") + encode_varint(len(out.script)) + out.script
                for out in tx.outputs
            )
        )

        target_input = tx.inputs[input_index]

        preimage = (
            tx.version
            + hash_prevouts
            + hash_sequence
            + target_input.txid_le
            + target_input.vout.to_bytes(4, "little")
            + encode_varint(len(script_code))
            + script_code
            + value.to_bytes(8, "little")
            + target_input.sequence
            + hash_outputs
            + tx.locktime
            + sighash_type.to_bytes(4, "little")
        )

        return hash256(preimage)

    except TransactionSigningError:
        raise
    except Exception as e:
        raise TransactionSigningError(f"Failed to compute sighash: {e}") from e


def sign_p2wpkh_input(
    tx: Transaction,
    input_index: int,
    script_code: bytes,
    value: int,
    key: KeyMaterial,
    sighash_type: int = SIGHASH_ALL,
) -> bytes:
    """Sign a P2WPKH (or P2SH-wrapped P2WPKH) input.

    Args:
        tx: The transaction to sign
        input_index: Index of the input to sign
        script_code: The scriptCode for signing (P2PKH script for P2WPKH)
        value: The value of the input being spent (in satoshis)
        key: Signing key
        sighash_type: Sighash type (default SIGHASH_ALL = 1)

    Returns:
        DER-encoded signature with sighash type byte appended
    """
    sighash = compute_sighash_segwit(tx, input_index, script_code, value, sighash_type)
    return key.sign_digest(sighash) + bytes([sighash_type])


def create_p2wpkh_script_code(pubkey_bytes: bytes) -> bytes:
    """Create the scriptCode for P2WPKH signing (BIP 143).

    For P2WPKH, the scriptCode is the P2PKH script:
    OP_DUP OP_HASH160 <20-byte-pubkeyhash> OP_EQUALVERIFY OP_CHECKSIG
    """
    return b"\x76\xa9\x14" + hash160(pubkey_bytes) + b"\x88\xac"


def create_p2sh_p2wpkh_script_sig(redeem_script: bytes) -> bytes:
    """scriptSig of a P2SH-P2WPKH spend: a single push of the witness program."""
    return push_data(redeem_script)


def create_witness_stack(signature: bytes, pubkey_bytes: bytes) -> list[bytes]:
    return [signature, pubkey_bytes]
