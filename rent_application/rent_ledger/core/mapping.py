"""
Record mapping
Converts JSON payload dicts into ledger records

Dates must be 'YYYY-MM-DD' calendar dates. A bad date raises
DataIntegrityError naming the record and the field; it is never replaced by
a default. Amounts and options are validated here, before the engine runs.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
import math
from typing import Any, Dict, List, Optional, Type
import logging
from rent_application.rent_ledger.core.dues import normalize_adjustment_date
from rent_application.rent_ledger.core.exceptions import DataIntegrityError, RecordValidationError
from rent_application.rent_ledger.core.models import (
    LeaseAgreement,
    Payment,
    Renewal,
    RentAdjustment,
    RentCalculationMethod,
    RentFreeUnit,
    VatTreatment,
)
from rent_application.rent_ledger.utils.date_utils import parse_date

logger = logging.getLogger(__name__)

# Largest integer a JSON float carries exactly
MAX_EXACT_FLOAT = 2 ** 53


def _require_object(data: Any, label: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise RecordValidationError(f"{label} must be an object, got {type(data).__name__}")
    return data


def _record_id(data: Dict[str, Any], key: str = 'id') -> Optional[str]:
    value = data.get(key)
    return str(value) if value not in (None, '') else None


def _date(record_type: str, record_id: Optional[str], data: Dict[str, Any], field: str,
          required: bool = True) -> Optional[date]:
    value = data.get(field)
    try:
        parsed = parse_date(value)
    except (ValueError, TypeError) as e:
        raise DataIntegrityError(record_type, record_id, field, value, str(e)) from e
    if parsed is None and required:
        raise DataIntegrityError(record_type, record_id, field, value, "date is required")
    return parsed


def _amount(record_type: str, record_id: Optional[str], data: Dict[str, Any], field: str,
            default: Optional[int] = None, minimum: int = 0) -> int:
    """
    Whole currency amount; accepts ints, integral floats and '1,000,000' strings
    Ints and strings are taken exactly; floats only up to 2**53
    """
    label = f"{record_type} {record_id or '<no id>'}: {field}"
    value = data.get(field)
    if value is None or value == '':
        if default is not None:
            return default
        raise RecordValidationError(f"{label} is required")

    if isinstance(value, bool):
        raise RecordValidationError(f"{label} must be a number, got {value!r}")

    if isinstance(value, int):
        amount = value
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer() or abs(value) > MAX_EXACT_FLOAT:
            raise RecordValidationError(f"{label} must be a whole amount, got {value!r}")
        amount = int(value)
    elif isinstance(value, str):
        try:
            number = Decimal(value.replace(',', '').strip())
        except InvalidOperation:
            raise RecordValidationError(f"{label} must be a number, got {value!r}")
        if not number.is_finite() or number != number.to_integral_value():
            raise RecordValidationError(f"{label} must be a whole amount, got {value!r}")
        amount = int(number)
    else:
        raise RecordValidationError(f"{label} must be a number, got {value!r}")

    if amount < minimum:
        raise RecordValidationError(f"{label} must be >= {minimum}, got {amount}")
    return amount


def _choice(record_type: str, record_id: Optional[str], data: Dict[str, Any], field: str,
            enum_cls: Type, default):
    value = data.get(field)
    if value in (None, ''):
        return default
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ', '.join(member.value for member in enum_cls)
        raise RecordValidationError(f"{record_type} {record_id or '<no id>'}: {field} must be one of {allowed}, got {value!r}")


def _renewal_ref(lease_id: Optional[str], index: Optional[int]) -> Optional[str]:
    """'[2] of lease lease-1' so a bad renewal can be found in its lease"""
    if index is None:
        return lease_id
    return f"[{index}] of lease {lease_id or '<no id>'}"


def renewal_from_dict(data: Dict[str, Any], lease_id: Optional[str] = None,
                      index: Optional[int] = None) -> Renewal:
    ref = _renewal_ref(lease_id, index)
    data = _require_object(data, f"renewal {ref or '<no id>'}")
    return Renewal(
        renewal_date=_date('renewal', ref, data, 'renewal_date'),
        new_rent_amount=_amount('renewal', ref, data, 'new_rent_amount'),
        new_lease_end_date=_date('renewal', ref, data, 'new_lease_end_date'),
    )


def lease_from_dict(data: Dict[str, Any]) -> LeaseAgreement:
    """Map a lease payload to LeaseAgreement"""
    data = _require_object(data, "lease payload")

    lease_id = _record_id(data)
    if lease_id is None:
        raise RecordValidationError("lease: id is required")

    unit_ids = data.get('unit_ids') or []
    if not isinstance(unit_ids, list):
        raise RecordValidationError(f"lease {lease_id}: unit_ids must be a list")

    renewals = data.get('renewals') or []
    if not isinstance(renewals, list):
        raise RecordValidationError(f"lease {lease_id}: renewals must be a list")

    return LeaseAgreement(
        id=lease_id,
        owner_id=_record_id(data, 'owner_id') or '',
        building_id=_record_id(data, 'building_id') or '',
        building_name=data.get('building_name') or '',
        tenant_name=data.get('tenant_name') or '',
        tenant_contact=data.get('tenant_contact') or '',
        tenant_address=data.get('tenant_address') or '',
        unit_ids=[str(u) for u in unit_ids],

        lease_start_date=_date('lease', lease_id, data, 'lease_start_date'),
        lease_end_date=_date('lease', lease_id, data, 'lease_end_date'),

        lease_deposit_amount=_amount('lease', lease_id, data, 'lease_deposit_amount', default=0),
        rent_amount=_amount('lease', lease_id, data, 'rent_amount'),
        vat_treatment=_choice('lease', lease_id, data, 'vat_treatment', VatTreatment, VatTreatment.none),
        payment_method=data.get('payment_method') or '',
        rent_calculation_method=_choice('lease', lease_id, data, 'rent_calculation_method',
                                        RentCalculationMethod, RentCalculationMethod.contract_date),

        rent_free_period=_amount('lease', lease_id, data, 'rent_free_period', default=0),
        rent_free_unit=_choice('lease', lease_id, data, 'rent_free_unit', RentFreeUnit, RentFreeUnit.days),

        renewals=[renewal_from_dict(r, lease_id, i) for i, r in enumerate(renewals)],
    )


def payment_from_dict(data: Dict[str, Any], lease_id: Optional[str] = None) -> Payment:
    """Map a payment payload; lease_id fills in a missing lease reference"""
    data = _require_object(data, "payment")
    payment_id = _record_id(data)
    return Payment(
        id=payment_id or '',
        owner_id=_record_id(data, 'owner_id') or '',
        lease_id=_record_id(data, 'lease_id') or lease_id or '',
        payment_date=_date('payment', payment_id, data, 'payment_date'),
        payment_amount=_amount('payment', payment_id, data, 'payment_amount', minimum=1),
    )


def adjustment_from_dict(data: Dict[str, Any], lease_id: Optional[str] = None) -> RentAdjustment:
    """Map an adjustment payload; the date is moved to the 1st of its month"""
    data = _require_object(data, "adjustment")
    adjustment_id = _record_id(data)

    notes = data.get('notes')
    if notes is not None and not isinstance(notes, str):
        raise RecordValidationError(f"adjustment {adjustment_id or '<no id>'}: notes must be text, got {notes!r}")
    notes = (notes or '').strip()
    if not notes:
        raise RecordValidationError(f"adjustment {adjustment_id or '<no id>'}: notes are required")

    return RentAdjustment(
        id=adjustment_id or '',
        owner_id=_record_id(data, 'owner_id') or '',
        lease_id=_record_id(data, 'lease_id') or lease_id or '',
        adjustment_date=normalize_adjustment_date(_date('adjustment', adjustment_id, data, 'adjustment_date')),
        adjusted_rent_amount=_amount('adjustment', adjustment_id, data, 'adjusted_rent_amount'),
        notes=notes,
    )


def _records(payload: Any, name: str) -> List[Dict[str, Any]]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise RecordValidationError(f"{name} must be a list")
    for index, item in enumerate(payload):
        _require_object(item, f"{name}[{index}]")
    return payload


def payments_from_list(payload: Any, lease_id: Optional[str] = None) -> List[Payment]:
    return [payment_from_dict(p, lease_id) for p in _records(payload, 'payments')]


def adjustments_from_list(payload: Any, lease_id: Optional[str] = None) -> List[RentAdjustment]:
    return [adjustment_from_dict(a, lease_id) for a in _records(payload, 'adjustments')]


def leases_from_list(payload: Any) -> List[LeaseAgreement]:
    return [lease_from_dict(lease) for lease in _records(payload, 'leases')]
