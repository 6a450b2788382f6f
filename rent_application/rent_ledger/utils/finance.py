"""
Currency and VAT utilities
Whole-unit (KRW) rounding on exact decimal arithmetic
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple, Union

Number = Union[int, float, Decimal]

VAT_RATE = Decimal('0.1')
VAT_MULTIPLIER = Decimal('1') + VAT_RATE


def to_decimal(value: Number) -> Decimal:
    """Convert to Decimal without picking up binary float noise"""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round_half_up(value: Number) -> int:
    """
    Round to the nearest whole currency unit, halves away from zero
    (not Python's round(), which rounds halves to even)
    """
    return int(to_decimal(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def prorate(monthly_amount: Number, billable_days: int, month_days: int) -> int:
    """
    Day-count proration of a monthly amount
    round(monthly_amount / month_days * billable_days)
    """
    if month_days <= 0:
        raise ValueError(f"month_days must be positive, got {month_days}")
    return round_half_up(to_decimal(monthly_amount) * billable_days / month_days)


def split_vat_included(gross: Number) -> Tuple[int, int]:
    """
    Split a VAT-inclusive amount into (supply value, VAT)
    supply = round(gross / 1.1), vat = gross - supply
    """
    supply_value = round_half_up(to_decimal(gross) / VAT_MULTIPLIER)
    return supply_value, int(to_decimal(gross)) - supply_value


def vat_on(net: Number) -> int:
    """VAT due on a net (VAT-exclusive) amount"""
    return round_half_up(to_decimal(net) * VAT_RATE)


def gross_up(net: Number) -> int:
    """Net amount plus VAT, rounded to whole units"""
    return round_half_up(to_decimal(net) * VAT_MULTIPLIER)
