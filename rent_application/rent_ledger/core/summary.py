"""
Tenant and portfolio summaries
Figures for the tenant list and the owner dashboard, built from real ledgers
"""

from datetime import date
from typing import Dict, List, Sequence
import logging
from rent_application.rent_ledger.core.models import (
    LeaseAgreement,
    PortfolioStats,
    TenantLedger,
    TenantStatus,
    TenantSummary,
)
from rent_application.rent_ledger.core.rent_resolver import get_lease_details

logger = logging.getLogger(__name__)


def tenant_status(lease_end_date, balance: int, as_of: date) -> TenantStatus:
    """vacant once the (effective) lease end has passed, else overdue while money is owed"""
    if lease_end_date is not None and lease_end_date < as_of:
        return TenantStatus.vacant
    if balance > 0:
        return TenantStatus.overdue
    return TenantStatus.paid


def summarize_tenant(lease: LeaseAgreement, ledger: TenantLedger, as_of: date) -> TenantSummary:
    details = get_lease_details(lease, as_of)
    balance = ledger.balance
    return TenantSummary(
        lease_id=lease.id,
        tenant_name=lease.tenant_name,
        status=tenant_status(details.lease_end_date, balance, as_of),
        total_due=ledger.total_due,
        total_paid=ledger.total_paid,
        balance=balance,
        current_rent=details.rent_amount,
        lease_end_date=details.lease_end_date,
        is_renewed=details.is_renewed,
        unit_ids=list(lease.unit_ids),
    )


def summarize_portfolio(summaries: Sequence[TenantSummary]) -> PortfolioStats:
    """
    Aggregate tenant summaries

    Active tenants are those not vacant. Monthly rent and overdue rent only
    count active tenants; total_outstanding sums every balance, credits
    included.
    """
    counts: Dict[str, int] = {status.value: 0 for status in TenantStatus}
    active: List[TenantSummary] = []
    for summary in summaries:
        counts[summary.status.value] += 1
        if summary.status != TenantStatus.vacant:
            active.append(summary)

    occupied_units = {unit_id for summary in active for unit_id in summary.unit_ids}

    stats = PortfolioStats(
        active_tenants=len(active),
        occupied_units=len(occupied_units),
        total_monthly_rent=sum(s.current_rent for s in active),
        overdue_rent=sum(s.balance for s in active if s.balance > 0),
        total_outstanding=sum(s.balance for s in summaries),
        counts=counts,
    )
    logger.debug(f"Portfolio: {stats.active_tenants} active tenants, overdue {stats.overdue_rent}")
    return stats
