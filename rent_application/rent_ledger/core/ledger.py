"""
Ledger Merge & Balance Computation
Combines dues and payments into one chronological ledger with a running balance

Ordering: date ascending; on the same day a due comes before a payment, so
the due raises the balance before the payment lowers it. Ties of the same
kind keep their input order.
"""

from datetime import date
from typing import List, Optional, Sequence, Tuple
import logging
from rent_application.rent_ledger.core.dues import calculate_dues, find_orphaned_adjustments
from rent_application.rent_ledger.core.models import (
    DueEvent,
    LeaseAgreement,
    LedgerRow,
    Payment,
    RentAdjustment,
    TenantLedger,
    VatTreatment,
)
from rent_application.rent_ledger.utils.finance import split_vat_included, vat_on

logger = logging.getLogger(__name__)

PAYMENT_DESCRIPTION = "입금"

# Flat export layout: (column key, header label)
LEDGER_TABLE_COLUMNS: List[Tuple[str, str]] = [
    ('date', '일자'),
    ('description', '내용'),
    ('supply_value', '공급가액'),
    ('vat', '부가세'),
    ('total_due', '합계 (차변)'),
    ('payment', '납부액 (대변)'),
    ('balance', '잔액'),
    ('notes', '비고'),
]
LEDGER_TABLE_HEADERS = [label for _, label in LEDGER_TABLE_COLUMNS]

_DUE, _PAYMENT = 0, 1


def decompose_vat(rent: int, vat_treatment: VatTreatment) -> Tuple[Optional[int], Optional[int]]:
    """
    Split a due amount into (supply value, VAT)

    included: supply = round(rent / 1.1), vat = rent - supply
    excluded: supply = rent, vat = round(rent * 0.1)
    none:     supply = rent, vat = 0
    Zero (rent-free) dues carry no breakdown: (None, None)
    """
    if rent <= 0:
        return None, None
    if vat_treatment == VatTreatment.included:
        return split_vat_included(rent)
    if vat_treatment == VatTreatment.excluded:
        return rent, vat_on(rent)
    return rent, 0


def _due_row(due: DueEvent, vat_treatment: VatTreatment, balance: int) -> LedgerRow:
    supply_value, vat = decompose_vat(due.amount, vat_treatment)
    # rent == supply_value + vat on every non-zero due
    rent = supply_value + vat if supply_value is not None else due.amount
    return LedgerRow(
        date=due.date,
        description=due.description,
        supply_value=supply_value,
        vat=vat,
        rent=rent,
        balance=balance + rent,
        notes=due.notes,
        is_adjustment=due.is_adjustment,
        is_due=True,
        adjustment_id=due.adjustment_id,
    )


def _payment_row(payment: Payment, balance: int) -> LedgerRow:
    return LedgerRow(
        date=payment.payment_date,
        description=PAYMENT_DESCRIPTION,
        payment=payment.payment_amount,
        balance=balance - payment.payment_amount,
        is_due=False,
    )


def build_ledger(
    lease: LeaseAgreement,
    dues: Sequence[DueEvent],
    payments: Sequence[Payment],
) -> List[LedgerRow]:
    """
    Merge dues and payments into ledger rows with a running balance

    Args:
        lease: Lease the dues were generated from (VAT treatment)
        dues: Output of calculate_dues
        payments: Payments of the lease (any order)
    Returns:
        Ledger rows in display order; balance may go negative (credit)
    """
    events = [(due.date, _DUE, due) for due in dues]
    events += [(payment.payment_date, _PAYMENT, payment) for payment in payments]
    events.sort(key=lambda event: (event[0], event[1]))

    rows: List[LedgerRow] = []
    balance = 0
    for _, kind, event in events:
        if kind == _DUE:
            row = _due_row(event, lease.vat_treatment, balance)
        else:
            row = _payment_row(event, balance)
        balance = row.balance
        rows.append(row)

    return rows


def compute_tenant_ledger(
    lease: LeaseAgreement,
    adjustments: Sequence[RentAdjustment],
    payments: Sequence[Payment],
    as_of: date,
) -> TenantLedger:
    """
    Full ledger run for one lease: dues up to as_of, merged with payments
    Pure: the same inputs always give the same ledger
    """
    orphaned = find_orphaned_adjustments(lease, adjustments)
    if orphaned:
        logger.warning(
            f"⚠️  Lease {lease.id}: {len(orphaned)} adjustment(s) outside the lease term "
            f"are not applied: {[a.id for a in orphaned]}"
        )

    dues = calculate_dues(lease, adjustments, as_of)
    rows = build_ledger(lease, dues, payments)
    logger.debug(f"Lease {lease.id}: {len(dues)} dues, {len(payments)} payments, balance {rows[-1].balance if rows else 0}")
    return TenantLedger(lease_id=lease.id, as_of=as_of, dues=dues, rows=rows)


def ledger_to_table(rows: Sequence[LedgerRow]) -> List[dict]:
    """
    Flatten ledger rows for spreadsheet-style export
    One dict per row, keyed by LEDGER_TABLE_COLUMNS; missing amounts are None
    """
    table = []
    for row in rows:
        table.append({
            'date': row.date.isoformat(),
            'description': row.description,
            'supply_value': row.supply_value,
            'vat': row.vat,
            'total_due': row.rent,
            'payment': row.payment,
            'balance': row.balance,
            'notes': row.notes or '',
        })
    return table
