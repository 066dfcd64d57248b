"""
Transaction builder for P2SH-P2WPKH funding transactions.

Spends every supplied UTXO, in order, to a single destination output:
- no coin selection, all inputs are consumed
- no change output, anything above the requested amount goes to the miner
- the fee is taken out of the requested amount (the output is amount - fee)
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from loguru import logger

from ltcpay.address import address_to_scriptpubkey, pubkey_to_p2wpkh_script
from ltcpay.constants import DEFAULT_SAT_PER_BYTE, SEQUENCE_FINAL, TX_VERSION
from ltcpay.errors import InsufficientFundsError, NoUTXOsError
from ltcpay.fees import apply_min_relay_fee, estimate_tx_fee
from ltcpay.keys import KeyMaterial
from ltcpay.models import UTXO, NetworkType, SignedTransaction, network_name
from ltcpay.signing import (
    Transaction,
    TxInput,
    TxOutput,
    compute_txid,
    create_p2sh_p2wpkh_script_sig,
    create_p2wpkh_script_code,
    create_witness_stack,
    serialize_transaction,
    sign_p2wpkh_input,
)
from ltcpay.units import to_satoshis


class SegwitTxBuilder:
    """
    Builds and signs single-output transactions spending P2SH-P2WPKH UTXOs.
    """

    def __init__(
        self,
        network: NetworkType | str = NetworkType.MAINNET,
        fee_per_byte: int = DEFAULT_SAT_PER_BYTE,
    ):
        self.network = network_name(network)
        self.fee_per_byte = fee_per_byte

    def calculate_fee(self, inputs_count: int, fee_per_byte: int | None = None) -> int:
        """Fee for spending inputs_count inputs to one output, floored at the relay fee."""
        rate = fee_per_byte or self.fee_per_byte
        return apply_min_relay_fee(estimate_tx_fee(rate, inputs_count, 1, segwit=True))

    def build(
        self,
        key: Any,
        destination_address: str,
        amount: Decimal | int | float | str,
        utxos: Sequence[UTXO],
        fee_per_byte: int | None = None,
    ) -> SignedTransaction:
        """
        Build and sign a transaction paying amount - fee to destination_address.

        Args:
            key: Signing key or key node (see KeyMaterial.from_node)
            destination_address: Litecoin address receiving the single output
            amount: Amount in whole LTC; callers must pass a positive value
            utxos: Outputs to spend, all of them, in this order
            fee_per_byte: Overrides the builder's default fee rate

        Returns:
            SignedTransaction with broadcasted=False

        Raises:
            NoUTXOsError: If utxos is empty
            InsufficientFundsError: If amount - fee exceeds the total input value
            ValueError: If destination_address is not an address on the builder's network
        """
        amount_sat = to_satoshis(amount)
        script_pubkey = address_to_scriptpubkey(destination_address, self.network)

        if not utxos:
            raise NoUTXOsError("no UTXOs")

        total_balance = 0
        inputs: list[TxInput] = []
        for utxo in utxos:
            total_balance += utxo.value
            inputs.append(
                TxInput(
                    txid_le=bytes.fromhex(utxo.txid)[::-1],
                    vout=utxo.vout,
                    script=b"",
                    sequence=SEQUENCE_FINAL.to_bytes(4, "little"),
                )
            )

        fee = self.calculate_fee(len(utxos), fee_per_byte)

        # Compares the net spend, not amount + fee
        if amount_sat - fee > total_balance:
            logger.warning(
                f"Insufficient funds: amount {amount_sat} - fee {fee} > balance {total_balance}"
            )
            raise InsufficientFundsError(total_balance, fee)

        output_value = amount_sat - fee
        if output_value <= 0:
            raise InsufficientFundsError(
                total_balance, fee, f"Amount {amount_sat} does not cover the fee {fee}"
            )

        tx = Transaction(
            version=TX_VERSION.to_bytes(4, "little"),
            marker_flag=True,
            inputs=inputs,
            outputs=[TxOutput(output_value, script_pubkey)],
            locktime=(0).to_bytes(4, "little"),
        )

        key_material = KeyMaterial.from_node(key, self.network)
        self._sign_inputs(tx, key_material, utxos)

        raw = serialize_transaction(tx)
        txid = compute_txid(tx)

        logger.debug(
            f"Built tx {txid}: {len(inputs)} inputs, output {output_value} sats, fee {fee} sats, "
            f"{len(raw)} bytes"
        )
        return SignedTransaction(raw_hex=raw.hex(), txid=txid)

    def _sign_inputs(self, tx: Transaction, key: KeyMaterial, utxos: Sequence[UTXO]) -> None:
        """Attach scriptSig (redeem script push) and witness to every input."""
        pubkey = key.public_key_bytes
        redeem_script = pubkey_to_p2wpkh_script(pubkey)
        script_code = create_p2wpkh_script_code(pubkey)

        # BIP143 sighashes do not cover scriptSigs
        witnesses: list[list[bytes]] = []
        for i, utxo in enumerate(utxos):
            signature = sign_p2wpkh_input(tx, i, script_code, utxo.value, key)
            tx.inputs[i].script = create_p2sh_p2wpkh_script_sig(redeem_script)
            witnesses.append(create_witness_stack(signature, pubkey))

        tx.witnesses = witnesses


def build_signed_transaction(
    key: Any,
    network: NetworkType | str,
    destination_address: str,
    amount: Decimal | int | float | str,
    utxos: Sequence[UTXO],
    fee_per_byte: int = DEFAULT_SAT_PER_BYTE,
) -> SignedTransaction:
    """Build and sign a transaction with a one-off builder."""
    return SegwitTxBuilder(network, fee_per_byte).build(key, destination_address, amount, utxos)
