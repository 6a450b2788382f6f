"""
Data models for the rent ledger
Lease, renewal, payment and adjustment records plus the derived due/ledger rows
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, List, Dict, Any


class VatTreatment(str, Enum):
    none = "none"
    included = "included"
    excluded = "excluded"


class RentCalculationMethod(str, Enum):
    contract_date = "contract_date"
    end_of_month = "end_of_month"


class RentFreeUnit(str, Enum):
    days = "days"
    months = "months"


class TenantStatus(str, Enum):
    paid = "paid"
    overdue = "overdue"
    vacant = "vacant"


def _iso(d: Optional[date]) -> Optional[str]:
    return d.isoformat() if d else None


@dataclass
class Renewal:
    """Amends rent and/or end date from renewal_date onward"""
    renewal_date: date
    new_rent_amount: int
    new_lease_end_date: date

    def to_dict(self) -> dict:
        return {
            'renewal_date': _iso(self.renewal_date),
            'new_rent_amount': self.new_rent_amount,
            'new_lease_end_date': _iso(self.new_lease_end_date),
        }


@dataclass
class LeaseAgreement:
    """A tenancy contract - the ledger engine only reads it"""

    # Identifiers
    id: str
    owner_id: str = ""
    building_id: str = ""
    building_name: str = ""

    # Tenant
    tenant_name: str = ""
    tenant_contact: str = ""
    tenant_address: str = ""
    unit_ids: List[str] = field(default_factory=list)

    # Term
    lease_start_date: Optional[date] = None
    lease_end_date: Optional[date] = None

    # Money
    lease_deposit_amount: int = 0
    rent_amount: int = 0
    vat_treatment: VatTreatment = VatTreatment.none
    payment_method: str = ""
    rent_calculation_method: RentCalculationMethod = RentCalculationMethod.contract_date

    # Rent-free period, counted from lease_start_date
    rent_free_period: int = 0
    rent_free_unit: RentFreeUnit = RentFreeUnit.days

    # Renewals in insertion order
    renewals: List[Renewal] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'building_id': self.building_id,
            'building_name': self.building_name,
            'tenant_name': self.tenant_name,
            'tenant_contact': self.tenant_contact,
            'tenant_address': self.tenant_address,
            'unit_ids': list(self.unit_ids),
            'lease_start_date': _iso(self.lease_start_date),
            'lease_end_date': _iso(self.lease_end_date),
            'lease_deposit_amount': self.lease_deposit_amount,
            'rent_amount': self.rent_amount,
            'vat_treatment': self.vat_treatment.value,
            'payment_method': self.payment_method,
            'rent_calculation_method': self.rent_calculation_method.value,
            'rent_free_period': self.rent_free_period,
            'rent_free_unit': self.rent_free_unit.value,
            'renewals': [r.to_dict() for r in self.renewals],
        }


@dataclass
class RentAdjustment:
    """Manual override of the rent due for one calendar month"""
    id: str
    lease_id: str
    adjustment_date: date  # first day of the target month
    adjusted_rent_amount: int
    notes: str = ""
    owner_id: str = ""

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'lease_id': self.lease_id,
            'adjustment_date': _iso(self.adjustment_date),
            'adjusted_rent_amount': self.adjusted_rent_amount,
            'notes': self.notes,
        }


@dataclass
class Payment:
    """A recorded receipt of money, not linked to any particular due"""
    id: str
    lease_id: str
    payment_date: date
    payment_amount: int
    owner_id: str = ""

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'lease_id': self.lease_id,
            'payment_date': _iso(self.payment_date),
            'payment_amount': self.payment_amount,
        }


@dataclass
class DueEvent:
    """One monthly billing event generated from a lease"""
    date: date
    amount: int
    description: str
    notes: Optional[str] = None
    is_adjustment: bool = False
    adjustment_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'date': _iso(self.date),
            'amount': self.amount,
            'description': self.description,
            'notes': self.notes,
            'is_adjustment': self.is_adjustment,
            'is_due': True,
            'adjustment_id': self.adjustment_id,
        }


@dataclass
class LedgerRow:
    """Single ledger line - a due or a payment with the balance after it"""
    date: date
    description: str
    balance: int
    supply_value: Optional[int] = None
    vat: Optional[int] = None
    rent: Optional[int] = None  # supply_value + vat, due rows only
    payment: Optional[int] = None  # payment rows only
    notes: Optional[str] = None
    is_adjustment: bool = False
    is_due: bool = False
    adjustment_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization"""
        return {
            'date': _iso(self.date),
            'description': self.description,
            'supply_value': self.supply_value,
            'vat': self.vat,
            'rent': self.rent,
            'payment': self.payment,
            'balance': self.balance,
            'notes': self.notes,
            'is_adjustment': self.is_adjustment,
            'is_due': self.is_due,
            'adjustment_id': self.adjustment_id,
        }


@dataclass
class LeaseDetails:
    """Current rent and effective end date of a lease, renewals considered"""
    rent_amount: int
    lease_end_date: Optional[date]
    is_renewed: bool = False

    def to_dict(self) -> dict:
        return {
            'rent_amount': self.rent_amount,
            'lease_end_date': _iso(self.lease_end_date),
            'is_renewed': self.is_renewed,
        }


@dataclass
class TenantLedger:
    """Output of a ledger run: the raw dues and the merged ledger rows"""
    lease_id: str
    as_of: date
    dues: List[DueEvent] = field(default_factory=list)
    rows: List[LedgerRow] = field(default_factory=list)

    @property
    def total_due(self) -> int:
        return sum(row.rent or 0 for row in self.rows if row.is_due)

    @property
    def total_paid(self) -> int:
        return sum(row.payment or 0 for row in self.rows if not row.is_due)

    @property
    def balance(self) -> int:
        return self.rows[-1].balance if self.rows else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lease_id': self.lease_id,
            'as_of': _iso(self.as_of),
            'dues': [d.to_dict() for d in self.dues],
            'ledger': [r.to_dict() for r in self.rows],
            'total_due': self.total_due,
            'total_paid': self.total_paid,
            'balance': self.balance,
        }


@dataclass
class TenantSummary:
    """Per-tenant figures for the tenant list and dashboard"""
    lease_id: str
    tenant_name: str
    status: TenantStatus
    total_due: int
    total_paid: int
    balance: int
    current_rent: int
    lease_end_date: Optional[date]
    is_renewed: bool = False
    unit_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'lease_id': self.lease_id,
            'tenant_name': self.tenant_name,
            'status': self.status.value,
            'total_due': self.total_due,
            'total_paid': self.total_paid,
            'balance': self.balance,
            'current_rent': self.current_rent,
            'lease_end_date': _iso(self.lease_end_date),
            'is_renewed': self.is_renewed,
            'unit_ids': list(self.unit_ids),
        }


@dataclass
class PortfolioStats:
    """Owner-level totals over all tenant summaries"""
    active_tenants: int = 0
    occupied_units: int = 0
    total_monthly_rent: int = 0
    overdue_rent: int = 0
    total_outstanding: int = 0
    counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'active_tenants': self.active_tenants,
            'occupied_units': self.occupied_units,
            'total_monthly_rent': self.total_monthly_rent,
            'overdue_rent': self.overdue_rent,
            'total_outstanding': self.total_outstanding,
            'counts': dict(self.counts),
        }
