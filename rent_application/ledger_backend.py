"""
Rent Ledger Backend API
Computes tenant ledgers, export rows, lease details and dashboard figures
from the records carried in each request
"""

from flask import Blueprint, request, jsonify
from datetime import date
from typing import Optional
import logging
from rent_application.rent_ledger.core.exceptions import (
    DataIntegrityError,
    LeaseAccessDeniedError,
    LeaseNotFoundError,
    RecordValidationError,
)
from rent_application.rent_ledger.core.ledger import (
    LEDGER_TABLE_COLUMNS,
    LEDGER_TABLE_HEADERS,
    compute_tenant_ledger,
    ledger_to_table,
)
from rent_application.rent_ledger.core.mapping import (
    adjustments_from_list,
    lease_from_dict,
    leases_from_list,
    payments_from_list,
)
from rent_application.rent_ledger.core.records import select_lease_records
from rent_application.rent_ledger.core.rent_resolver import get_lease_details, suggested_payment_amount
from rent_application.rent_ledger.core.summary import summarize_portfolio, summarize_tenant
from rent_application.rent_ledger.utils.date_utils import calculate_payment_dates, parse_date

# Create blueprint
ledger_bp = Blueprint('ledger', __name__, url_prefix='/api')

logger = logging.getLogger(__name__)


def _request_json() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise RecordValidationError("Request body must be a JSON object")
    return data


def _request_date(data: dict, key: str, default: Optional[date] = None) -> Optional[date]:
    """Optional date parameter of the request itself (not of a record)"""
    try:
        value = parse_date(data.get(key))
    except (ValueError, TypeError):
        raise RecordValidationError(f"Invalid {key}: {data.get(key)!r}. Expected YYYY-MM-DD.")
    return value if value is not None else default


def _error_response(e: Exception, action: str):
    """Map an exception to a JSON error response"""
    if isinstance(e, RecordValidationError):
        logger.warning(f"⚠️  {action}: {e}")
        return jsonify({'success': False, 'error': str(e)}), 400
    if isinstance(e, DataIntegrityError):
        logger.warning(f"⚠️  {action}: {e}")
        return jsonify({'success': False, 'error': str(e), 'details': e.to_dict()}), 422
    if isinstance(e, LeaseAccessDeniedError):
        return jsonify({'success': False, 'error': 'Access denied'}), 403
    if isinstance(e, LeaseNotFoundError):
        logger.info(f"🔍 {action}: {e}")
        return jsonify({'success': False, 'error': str(e)}), 404
    logger.error(f"❌ {action} failed: {e}", exc_info=True)
    return jsonify({'success': False, 'error': str(e)}), 500


def _ledger_response(lease, payments, adjustments, as_of: date) -> dict:
    ledger = compute_tenant_ledger(lease, adjustments, payments, as_of)
    summary = summarize_tenant(lease, ledger, as_of)
    return {
        'success': True,
        'lease_id': lease.id,
        'as_of': as_of.isoformat(),
        'lease_details': get_lease_details(lease, as_of).to_dict(),
        'dues': [due.to_dict() for due in ledger.dues],
        'ledger': [row.to_dict() for row in ledger.rows],
        'summary': summary.to_dict(),
    }


@ledger_bp.route('/calculate_ledger', methods=['POST'])
def calculate_ledger():
    """
    Main endpoint for the tenant ledger
    Body: {lease, payments, adjustments, as_of?}; as_of defaults to today
    """
    try:
        data = _request_json()
        lease = lease_from_dict(data.get('lease'))
        payments = payments_from_list(data.get('payments'), lease.id)
        adjustments = adjustments_from_list(data.get('adjustments'), lease.id)
        as_of = _request_date(data, 'as_of', date.today())

        logger.info(f"📥 Ledger request: lease {lease.id} ({lease.tenant_name or 'unnamed'}), as_of {as_of}")
        logger.info(f"   payments: {len(payments)}, adjustments: {len(adjustments)}, renewals: {len(lease.renewals)}")

        response = _ledger_response(lease, payments, adjustments, as_of)
        logger.info(f"✅ Ledger computed: {len(response['ledger'])} rows, balance {response['summary']['balance']}")
        return jsonify(response)

    except Exception as e:
        return _error_response(e, "Ledger calculation")


@ledger_bp.route('/ledger_table', methods=['POST'])
def ledger_table():
    """Flat ledger rows with export column labels"""
    try:
        data = _request_json()
        lease = lease_from_dict(data.get('lease'))
        payments = payments_from_list(data.get('payments'), lease.id)
        adjustments = adjustments_from_list(data.get('adjustments'), lease.id)
        as_of = _request_date(data, 'as_of', date.today())

        logger.info(f"📄 Ledger table request: lease {lease.id}, as_of {as_of}")
        ledger = compute_tenant_ledger(lease, adjustments, payments, as_of)

        return jsonify({
            'success': True,
            'lease_id': lease.id,
            'columns': [key for key, _ in LEDGER_TABLE_COLUMNS],
            'headers': LEDGER_TABLE_HEADERS,
            'rows': ledger_to_table(ledger.rows),
        })

    except Exception as e:
        return _error_response(e, "Ledger table")


@ledger_bp.route('/leases/<lease_id>/ledger', methods=['POST'])
def lease_ledger(lease_id):
    """
    Ledger of one lease out of a fetched record batch
    Body: {requested_by, leases, payments, adjustments, as_of?}
    """
    try:
        data = _request_json()
        requested_by = str(data.get('requested_by') or '')
        leases = leases_from_list(data.get('leases'))
        payments = payments_from_list(data.get('payments'))
        adjustments = adjustments_from_list(data.get('adjustments'))
        as_of = _request_date(data, 'as_of', date.today())

        logger.info(f"📥 Ledger fetch: lease {lease_id} by {requested_by or '<anonymous>'} from {len(leases)} lease(s)")
        records = select_lease_records(lease_id, requested_by, leases, payments, adjustments)

        return jsonify(_ledger_response(records.lease, records.payments, records.adjustments, as_of))

    except Exception as e:
        return _error_response(e, f"Ledger fetch for lease {lease_id}")


@ledger_bp.route('/lease_details', methods=['POST'])
def lease_details():
    """Applicable rent, effective end date and renewal flag on a date"""
    try:
        data = _request_json()
        lease = lease_from_dict(data.get('lease'))
        on_date = _request_date(data, 'on_date', date.today())

        details = get_lease_details(lease, on_date)
        logger.debug(f"Lease {lease.id} on {on_date}: rent {details.rent_amount}, renewed={details.is_renewed}")

        return jsonify({
            'success': True,
            'lease_id': lease.id,
            'on_date': on_date.isoformat(),
            **details.to_dict(),
        })

    except Exception as e:
        return _error_response(e, "Lease details")


@ledger_bp.route('/portfolio_stats', methods=['POST'])
def portfolio_stats():
    """
    Dashboard figures over every lease in the batch
    Payments and adjustments are matched to leases by lease_id
    """
    try:
        data = _request_json()
        leases = leases_from_list(data.get('leases'))
        payments = payments_from_list(data.get('payments'))
        adjustments = adjustments_from_list(data.get('adjustments'))
        as_of = _request_date(data, 'as_of', date.today())

        logger.info(f"📊 Portfolio request: {len(leases)} lease(s), as_of {as_of}")

        summaries = []
        for lease in leases:
            ledger = compute_tenant_ledger(
                lease,
                [a for a in adjustments if a.lease_id == lease.id],
                [p for p in payments if p.lease_id == lease.id],
                as_of,
            )
            summaries.append(summarize_tenant(lease, ledger, as_of))

        stats = summarize_portfolio(summaries)
        logger.info(f"✅ Portfolio: {stats.active_tenants} active, overdue {stats.overdue_rent}")

        return jsonify({
            'success': True,
            'as_of': as_of.isoformat(),
            'tenants': [s.to_dict() for s in summaries],
            'stats': stats.to_dict(),
        })

    except Exception as e:
        return _error_response(e, "Portfolio stats")


@ledger_bp.route('/payment_dates', methods=['POST'])
def payment_dates():
    """
    Preview of bulk payment dates
    Body: {start_date, end_date, day_of_month, lease?, as_of?}
    With a lease, the suggested amount per payment is included
    """
    try:
        data = _request_json()
        start_date = _request_date(data, 'start_date')
        end_date = _request_date(data, 'end_date')
        if start_date is None or end_date is None:
            raise RecordValidationError("start_date and end_date are required")
        if end_date < start_date:
            raise RecordValidationError(f"end_date ({end_date}) must not be before start_date ({start_date})")

        try:
            day_of_month = int(data.get('day_of_month', 1))
            dates = calculate_payment_dates(start_date, end_date, day_of_month)
        except (ValueError, TypeError) as e:
            raise RecordValidationError(f"Invalid day_of_month: {e}")

        response = {
            'success': True,
            'dates': [d.isoformat() for d in dates],
        }
        if data.get('lease'):
            lease = lease_from_dict(data['lease'])
            as_of = _request_date(data, 'as_of', date.today())
            response['suggested_amount'] = suggested_payment_amount(lease, as_of)

        logger.info(f"📅 Payment dates: {len(dates)} between {start_date} and {end_date} on day {day_of_month}")
        return jsonify(response)

    except Exception as e:
        return _error_response(e, "Payment dates")
