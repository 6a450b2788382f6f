"""
Due Generation
Turns a lease and its rent adjustments into monthly billing events

One due per calendar month from the lease-start month through the month of
min(effective end date, as_of). Each due is dated the last day of its month.
Precedence inside a month:
  1. A manual adjustment for the month is authoritative
  2. Rent-free days are removed from the billable days
  3. Partial months are prorated by day count
"""

from datetime import date, timedelta
from typing import List, Optional, Sequence
import logging
from rent_application.rent_ledger.core.models import (
    DueEvent,
    LeaseAgreement,
    RentAdjustment,
    RentCalculationMethod,
    RentFreeUnit,
)
from rent_application.rent_ledger.core.rent_resolver import get_applicable_rent, get_effective_end_date
from rent_application.rent_ledger.utils.date_utils import (
    add_months,
    days_in_month,
    eomonth,
    inclusive_days,
    is_month_end,
    iter_month_starts,
    month_label,
    overlap_days,
    previous_day,
    same_month,
    start_of_month,
)
from rent_application.rent_ledger.utils.finance import prorate, round_half_up

logger = logging.getLogger(__name__)

RENT_FREE_NOTE = "렌트프리"
ADJUSTMENT_NOTE_PREFIX = "조정: "


def proration_note(billable_days: int) -> str:
    return f"일할계산 ({billable_days}일)"


def normalize_adjustment_date(d: date) -> date:
    """Adjustments are keyed by month: store them on the 1st"""
    return start_of_month(d)


def get_rent_free_end_date(lease: LeaseAgreement) -> Optional[date]:
    """
    Last rent-free day, or None when the lease has no rent-free period

    days:   start + N days - 1 day
    months: start + N months - 1 day
    A window reaching past the last representable date ends on date.max
    """
    if not lease.rent_free_period or lease.rent_free_period <= 0 or not lease.lease_start_date:
        return None
    start = lease.lease_start_date
    period = lease.rent_free_period
    if lease.rent_free_unit == RentFreeUnit.months:
        months_left = (date.max.year - start.year) * 12 + (date.max.month - start.month)
        if period > months_left:
            return date.max
        return previous_day(add_months(start, period))
    if period - 1 > (date.max - start).days:
        return date.max
    return start + timedelta(days=period - 1)


def find_adjustment_for_month(adjustments: Sequence[RentAdjustment], month_start: date) -> Optional[RentAdjustment]:
    """
    First adjustment (in input order) targeting the month of month_start
    Extra adjustments for the same month are ignored and logged
    """
    matches = [adj for adj in adjustments if same_month(adj.adjustment_date, month_start)]
    if len(matches) > 1:
        logger.warning(
            f"⚠️  {len(matches)} rent adjustments target {month_start:%Y-%m}; "
            f"using {matches[0].id}, ignoring {[m.id for m in matches[1:]]}"
        )
    return matches[0] if matches else None


def find_orphaned_adjustments(lease: LeaseAgreement, adjustments: Sequence[RentAdjustment]) -> List[RentAdjustment]:
    """
    Adjustments whose month lies outside the lease term (after renewals)
    These never reach the ledger; typically left behind by an edited lease
    """
    start = lease.lease_start_date
    end = get_effective_end_date(lease)
    if not start or not end or end < start:
        return list(adjustments)
    first_month = start_of_month(start)
    last_month = start_of_month(end)
    return [
        adj for adj in adjustments
        if not first_month <= start_of_month(adj.adjustment_date) <= last_month
    ]


def _is_end_of_month_boundary(lease: LeaseAgreement, month_start: date, effective_end: date) -> bool:
    """
    end_of_month billing treats the first and last lease months as prorated
    when the lease does not start on the 1st / end on a month end
    """
    if lease.rent_calculation_method != RentCalculationMethod.end_of_month:
        return False
    start = lease.lease_start_date
    first_month_partial = same_month(month_start, start) and start.day != 1
    last_month_partial = same_month(month_start, effective_end) and not is_month_end(effective_end)
    return first_month_partial or last_month_partial


def calculate_dues(
    lease: LeaseAgreement,
    adjustments: Sequence[RentAdjustment],
    as_of: date,
) -> List[DueEvent]:
    """
    Generate the monthly dues of a lease up to as_of

    Args:
        lease: Lease agreement, renewals included
        adjustments: Rent adjustments of this lease (any order)
        as_of: Cutoff date ("today"); nothing after it is billed
    Returns:
        Dues in month order. Empty when the effective end date is before the
        lease start, or when as_of is before the lease start.
    """
    start = lease.lease_start_date
    effective_end = get_effective_end_date(lease)
    if not start or not effective_end:
        return []

    if effective_end < start:
        logger.info(f"Lease {lease.id}: end date {effective_end} before start {start}, no dues")
        return []

    final_billable_date = min(effective_end, as_of)
    if final_billable_date < start:
        return []

    rent_free_end = get_rent_free_end_date(lease)
    dues: List[DueEvent] = []

    for month_start in iter_month_starts(start, final_billable_date):
        base_rent, _ = get_applicable_rent(lease, month_start)
        month_end = eomonth(month_start)
        description = month_label(month_start)

        adjustment = find_adjustment_for_month(adjustments, month_start)
        if adjustment:
            dues.append(DueEvent(
                date=month_end,
                amount=round_half_up(adjustment.adjusted_rent_amount),
                description=description,
                notes=f"{ADJUSTMENT_NOTE_PREFIX}{adjustment.notes}",
                is_adjustment=True,
                adjustment_id=adjustment.id,
            ))
            continue

        period_start = max(month_start, start)
        period_end = min(month_end, final_billable_date)
        month_days = days_in_month(month_start)
        billable_days = inclusive_days(period_start, period_end)

        if rent_free_end and rent_free_end >= month_start:
            free_days = overlap_days(period_start, period_end, start, rent_free_end)
            billable_days = max(0, billable_days - free_days)

        notes = None
        amount = base_rent
        if billable_days <= 0:
            amount = 0
            notes = RENT_FREE_NOTE
        elif billable_days < month_days:
            amount = prorate(base_rent, billable_days, month_days)
            notes = proration_note(billable_days)
        elif _is_end_of_month_boundary(lease, month_start, effective_end):
            amount = prorate(base_rent, billable_days, month_days)
            notes = proration_note(billable_days)
            logger.warning(
                f"⚠️  Lease {lease.id}: {month_start:%Y-%m} is a full month flagged as prorated "
                f"by end_of_month billing - review"
            )

        dues.append(DueEvent(
            date=month_end,
            amount=round_half_up(amount),
            description=description,
            notes=notes,
        ))

    logger.debug(f"Lease {lease.id}: generated {len(dues)} dues through {final_billable_date}")
    return dues
