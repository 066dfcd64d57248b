"""
Transaction size and fee estimation.

The size model is the Ledger webtool heuristic (estimateTransactionSize):
a [min, max] byte band built from fixed per-input and per-output weights,
with witness bytes discounted as (3 * non_witness + witness) / 4. The fee is
the mean of that band times the fee rate. This is an estimate existing fee
expectations are built on, not a protocol-exact vsize.
"""

from __future__ import annotations

import math

from ltcpay.constants import MIN_RELAY_FEE
from ltcpay.models import SizeEstimate

# Per-element byte weights
SEGWIT_INPUT_BASE = 59
SEGWIT_WITNESS_MIN = 106
SEGWIT_WITNESS_MAX = 108
LEGACY_INPUT_MIN = 146
LEGACY_INPUT_MAX = 148
OUTPUT_MIN = 31
OUTPUT_MAX = 33


def varint_length(count: int) -> int:
    if count < 0xFD:
        return 1
    if count < 0xFFFF:
        return 3
    return 5


def estimate_tx_size(inputs_count: int, outputs_count: int, segwit: bool) -> SizeEstimate:
    """
    Estimate the serialized size band of a transaction.

    Args:
        inputs_count: Number of inputs
        outputs_count: Number of outputs
        segwit: Apply the witness discount (P2SH-P2WPKH inputs)

    Returns:
        SizeEstimate with min/max byte counts (fractional in segwit mode)
    """
    if inputs_count < 0 or outputs_count < 0:
        raise ValueError("Input and output counts must be non-negative")

    varint_len = varint_length(inputs_count)

    if segwit:
        # version (4) + marker/flag (2) + inputs + output count (1) + outputs + locktime (4)
        fixed = varint_len + 4 + 2 + SEGWIT_INPUT_BASE * inputs_count + 1 + 4
        min_no_witness = fixed + OUTPUT_MIN * outputs_count
        max_no_witness = fixed + OUTPUT_MAX * outputs_count
        min_witness = min_no_witness + SEGWIT_WITNESS_MIN * inputs_count
        max_witness = max_no_witness + SEGWIT_WITNESS_MAX * inputs_count

        return SizeEstimate(
            min=(min_no_witness * 3 + min_witness) / 4,
            max=(max_no_witness * 3 + max_witness) / 4,
        )

    return SizeEstimate(
        min=varint_len + 4 + LEGACY_INPUT_MIN * inputs_count + 1 + OUTPUT_MIN * outputs_count + 4,
        max=varint_len + 4 + LEGACY_INPUT_MAX * inputs_count + 1 + OUTPUT_MAX * outputs_count + 4,
    )


def estimate_tx_fee(
    sat_per_byte: int, inputs_count: int, outputs_count: int, segwit: bool = True
) -> int:
    """
    Estimate the fee for a transaction in satoshis.

    Uses the mean of the size band, not the worst case. The result is NOT
    clamped; pass it through apply_min_relay_fee() before using it as the
    fee of a real transaction.
    """
    if sat_per_byte <= 0:
        raise ValueError(f"Fee rate must be positive, got {sat_per_byte}")

    size = estimate_tx_size(inputs_count, outputs_count, segwit)
    mean = math.ceil((size.min + size.max) / 2)
    return mean * sat_per_byte


def apply_min_relay_fee(fee: int) -> int:
    """Raise a fee to the relay floor if it is below it."""
    return max(fee, MIN_RELAY_FEE)
