"""
Record selection
Picks one lease and its own payments/adjustments out of a record batch
"""

from dataclasses import dataclass, field
from typing import List, Sequence
import logging
from rent_application.rent_ledger.core.exceptions import LeaseAccessDeniedError, LeaseNotFoundError
from rent_application.rent_ledger.core.models import LeaseAgreement, Payment, RentAdjustment

logger = logging.getLogger(__name__)


@dataclass
class LeaseRecords:
    """A lease with the payments and adjustments that belong to it"""
    lease: LeaseAgreement
    payments: List[Payment] = field(default_factory=list)
    adjustments: List[RentAdjustment] = field(default_factory=list)


def select_lease_records(
    lease_id: str,
    requested_by: str,
    leases: Sequence[LeaseAgreement],
    payments: Sequence[Payment],
    adjustments: Sequence[RentAdjustment],
) -> LeaseRecords:
    """
    Look up a lease by id and check the requester owns it

    Raises:
        LeaseNotFoundError: no lease with lease_id
        LeaseAccessDeniedError: the lease belongs to another owner
    """
    lease = next((l for l in leases if l.id == lease_id), None)
    if lease is None:
        raise LeaseNotFoundError(lease_id)

    if lease.owner_id != requested_by:
        logger.warning(f"🚫 {requested_by or '<anonymous>'} requested lease {lease_id} owned by another user")
        raise LeaseAccessDeniedError(lease_id, requested_by)

    return LeaseRecords(
        lease=lease,
        payments=[p for p in payments if p.lease_id == lease_id],
        adjustments=[a for a in adjustments if a.lease_id == lease_id],
    )
