"""
Utility functions for rent ledger calculations
"""

from .date_utils import (
    eomonth,
    start_of_month,
    add_months,
    days_in_month,
    inclusive_days,
    overlap_days,
    month_label,
    parse_date,
    calculate_payment_dates,
)

from .finance import (
    round_half_up,
    prorate,
    split_vat_included,
    vat_on,
    gross_up,
)

__all__ = [
    # Date utilities
    'eomonth',
    'start_of_month',
    'add_months',
    'days_in_month',
    'inclusive_days',
    'overlap_days',
    'month_label',
    'parse_date',
    'calculate_payment_dates',

    # Currency / VAT utilities
    'round_half_up',
    'prorate',
    'split_vat_included',
    'vat_on',
    'gross_up',
]
