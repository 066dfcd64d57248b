"""
Unit conversion between whole coins and satoshis.

Amounts enter the library in whole LTC and are converted exactly once, here.
Everything past this point works in integer satoshis.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from ltcpay.constants import SATOSHIS_PER_COIN


def to_satoshis(amount: Decimal | int | float | str) -> int:
    """
    Convert a whole-coin amount to satoshis.

    Floats go through str() first so 0.1 stays 10,000,000 instead of
    picking up binary rounding noise.

    Raises:
        ValueError: If the amount is not a number or has sub-satoshi precision
    """
    try:
        value = Decimal(str(amount)) * SATOSHIS_PER_COIN
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e

    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    if value != value.to_integral_value():
        raise ValueError(f"Amount {amount} has more precision than 1 satoshi")

    return int(value)
