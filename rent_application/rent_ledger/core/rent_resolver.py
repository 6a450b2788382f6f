"""
Applicable-rent resolution
Which rent and which end date apply to a lease, renewals considered
"""

from datetime import date
from typing import List, Optional, Tuple
import logging
from rent_application.rent_ledger.core.models import LeaseAgreement, LeaseDetails, Renewal, VatTreatment
from rent_application.rent_ledger.utils.finance import gross_up

logger = logging.getLogger(__name__)


def sorted_renewals(lease: LeaseAgreement) -> List[Renewal]:
    """Renewals in ascending renewal_date order (stable for equal dates)"""
    return sorted(lease.renewals, key=lambda r: r.renewal_date)


def get_applicable_rent(lease: LeaseAgreement, on_date: date) -> Tuple[int, bool]:
    """
    Rent in effect on a date

    Scans renewals from the most recent backward and returns the first one
    whose renewal_date is on or before on_date.

    Returns:
        (rent amount, True if the amount comes from a renewal)
    """
    for renewal in reversed(sorted_renewals(lease)):
        if renewal.renewal_date <= on_date:
            return renewal.new_rent_amount, True
    return lease.rent_amount, False


def get_effective_end_date(lease: LeaseAgreement) -> Optional[date]:
    """Latest of the base end date and every renewal's new end date"""
    candidates = [lease.lease_end_date] + [r.new_lease_end_date for r in lease.renewals]
    candidates = [d for d in candidates if d is not None]
    return max(candidates) if candidates else None


def get_lease_details(lease: LeaseAgreement, as_of: date) -> LeaseDetails:
    rent_amount, is_renewed = get_applicable_rent(lease, as_of)
    return LeaseDetails(
        rent_amount=rent_amount,
        lease_end_date=get_effective_end_date(lease),
        is_renewed=is_renewed,
    )


def suggested_payment_amount(lease: LeaseAgreement, as_of: date) -> int:
    """
    Default amount for a new payment: the current monthly rent,
    plus VAT when the quoted rent excludes it
    """
    rent_amount, _ = get_applicable_rent(lease, as_of)
    if lease.vat_treatment == VatTreatment.excluded:
        return gross_up(rent_amount)
    return rent_amount
