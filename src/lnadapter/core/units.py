"""
Amount denomination conversions.

Three denominations cross the adapter: base-currency units (BTC, as reported
by bitcoind), satoshis and millisatoshis. Reads never round up.
"""

from decimal import Decimal, ROUND_HALF_EVEN
from typing import Union

SATS_PER_BTC = 100_000_000
MSAT_PER_SAT = 1000

Number = Union[int, float, str, Decimal]


def _check_non_negative(value: Number, name: str) -> None:
    if Decimal(str(value)) < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def base_to_sats(amount: Number) -> int:
    """
    Convert a base-currency amount to satoshis.

    The amount is parsed through its decimal string form so that values such
    as 0.00001 convert to exactly 1000 sats, then rounded to the nearest
    satoshi.

    Args:
        amount: Amount in BTC

    Returns:
        Amount in satoshis
    """
    _check_non_negative(amount, "amount")
    sats = Decimal(str(amount)) * SATS_PER_BTC
    return int(sats.quantize(Decimal(1), rounding=ROUND_HALF_EVEN))


def sats_to_msat(amount: Number) -> int:
    """Convert whole satoshis to millisatoshis."""
    _check_non_negative(amount, "amount")
    sats = Decimal(str(amount))
    if sats != sats.to_integral_value():
        raise ValueError(f"amount must be a whole number of satoshis, got {amount}")
    return int(sats) * MSAT_PER_SAT


def msat_to_sats(amount: Number) -> int:
    """Convert millisatoshis to satoshis, flooring any sub-satoshi remainder."""
    _check_non_negative(amount, "amount")
    return int(Decimal(str(amount))) // MSAT_PER_SAT
