"""
Exceptions raised around the rent ledger

Two separate families:
  - RentLedgerError: problems with the records handed to the engine
  - LeaseLookupError: the requested lease is missing or belongs to someone else
"""

from typing import Any, Optional


class RentLedgerError(Exception):
    """Base class for record and computation errors"""


class DataIntegrityError(RentLedgerError):
    """A record carries a value the engine cannot use (e.g. an unparseable date)"""

    def __init__(self, record_type: str, record_id: Optional[str], field: str, value: Any, reason: str = ""):
        self.record_type = record_type
        self.record_id = record_id
        self.field = field
        self.value = value
        self.reason = reason
        message = f"{record_type} {record_id or '<no id>'}: invalid {field} {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            'record_type': self.record_type,
            'record_id': self.record_id,
            'field': self.field,
            'value': repr(self.value),
            'reason': self.reason,
        }


class RecordValidationError(RentLedgerError):
    """A record fails boundary validation (negative amount, unknown option, missing notes)"""


class LeaseLookupError(Exception):
    """Base class for lease lookup failures"""

    def __init__(self, lease_id: str, message: str):
        self.lease_id = lease_id
        super().__init__(message)


class LeaseNotFoundError(LeaseLookupError):
    def __init__(self, lease_id: str):
        super().__init__(lease_id, f"Lease {lease_id} not found")


class LeaseAccessDeniedError(LeaseLookupError):
    def __init__(self, lease_id: str, requested_by: Optional[str]):
        self.requested_by = requested_by
        super().__init__(lease_id, f"Lease {lease_id} is not accessible to {requested_by or 'anonymous caller'}")
