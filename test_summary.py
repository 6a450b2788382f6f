"""
Tests for tenant status and portfolio figures
"""

from datetime import date

from rent_application.rent_ledger.core.ledger import compute_tenant_ledger
from rent_application.rent_ledger.core.models import LeaseAgreement, Payment, TenantStatus, TenantSummary
from rent_application.rent_ledger.core.summary import summarize_portfolio, summarize_tenant, tenant_status


def _summary(lease_id, status, balance, rent=1_000_000, units=('101',)):
    return TenantSummary(
        lease_id=lease_id,
        tenant_name=lease_id,
        status=status,
        total_due=0,
        total_paid=0,
        balance=balance,
        current_rent=rent,
        lease_end_date=None,
        unit_ids=list(units),
    )


def test_tenant_status():
    as_of = date(2023, 6, 15)
    assert tenant_status(date(2023, 6, 14), 500, as_of) == TenantStatus.vacant
    assert tenant_status(date(2023, 6, 15), 500, as_of) == TenantStatus.overdue
    assert tenant_status(date(2023, 12, 31), 0, as_of) == TenantStatus.paid
    assert tenant_status(date(2023, 12, 31), -100, as_of) == TenantStatus.paid


def test_summarize_tenant_overdue(renewed_lease):
    as_of = date(2023, 7, 31)
    payments = [Payment('p1', 'lease-1', date(2023, 6, 30), 6_000_000)]
    ledger = compute_tenant_ledger(renewed_lease, [], payments, as_of)
    summary = summarize_tenant(renewed_lease, ledger, as_of)

    assert summary.total_due == 7_200_000
    assert summary.total_paid == 6_000_000
    assert summary.balance == 1_200_000
    assert summary.status == TenantStatus.overdue
    assert summary.current_rent == 1_200_000
    assert summary.is_renewed is True
    assert summary.lease_end_date == date(2024, 6, 30)
    assert summary.to_dict()['status'] == 'overdue'


def test_summarize_tenant_vacant_after_end():
    lease = LeaseAgreement(id='old', lease_start_date=date(2022, 1, 1), lease_end_date=date(2022, 12, 31),
                           rent_amount=500_000)
    as_of = date(2023, 3, 1)
    ledger = compute_tenant_ledger(lease, [], [Payment('p', 'old', date(2022, 12, 31), 6_000_000)], as_of)
    summary = summarize_tenant(lease, ledger, as_of)

    assert summary.status == TenantStatus.vacant
    assert summary.balance == 0


def test_summarize_portfolio():
    summaries = [
        _summary('a', TenantStatus.overdue, 300_000, units=('101', '102')),
        _summary('b', TenantStatus.paid, -50_000, rent=800_000, units=('102',)),
        _summary('c', TenantStatus.vacant, 700_000, units=('201',)),
    ]
    stats = summarize_portfolio(summaries)

    assert stats.active_tenants == 2
    assert stats.occupied_units == 2
    assert stats.total_monthly_rent == 1_800_000
    assert stats.overdue_rent == 300_000
    assert stats.total_outstanding == 950_000
    assert stats.counts == {'paid': 1, 'overdue': 1, 'vacant': 1}


def test_summarize_empty_portfolio():
    stats = summarize_portfolio([])
    assert stats.active_tenants == 0
    assert stats.total_outstanding == 0
    assert stats.to_dict()['counts'] == {'paid': 0, 'overdue': 0, 'vacant': 0}
