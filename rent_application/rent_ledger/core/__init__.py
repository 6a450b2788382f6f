"""
Rent ledger engine
"""

from .models import (
    VatTreatment,
    RentCalculationMethod,
    RentFreeUnit,
    TenantStatus,
    Renewal,
    LeaseAgreement,
    RentAdjustment,
    Payment,
    DueEvent,
    LedgerRow,
    LeaseDetails,
    TenantLedger,
    TenantSummary,
    PortfolioStats,
)

from .exceptions import (
    RentLedgerError,
    DataIntegrityError,
    RecordValidationError,
    LeaseLookupError,
    LeaseNotFoundError,
    LeaseAccessDeniedError,
)

from .rent_resolver import (
    get_applicable_rent,
    get_effective_end_date,
    get_lease_details,
    suggested_payment_amount,
)

from .dues import (
    calculate_dues,
    find_adjustment_for_month,
    find_orphaned_adjustments,
    normalize_adjustment_date,
)

from .ledger import (
    build_ledger,
    compute_tenant_ledger,
    ledger_to_table,
    LEDGER_TABLE_COLUMNS,
    LEDGER_TABLE_HEADERS,
)

from .summary import (
    summarize_tenant,
    summarize_portfolio,
)
