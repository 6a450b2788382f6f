"""
Test ledger API endpoints through the Flask test client
Request/response matching for the /api ledger routes
"""

import pytest


@pytest.fixture
def ledger_payload(lease_payload):
    lease_payload['renewals'] = [
        {'renewal_date': '2023-07-01', 'new_rent_amount': 1200000, 'new_lease_end_date': '2024-06-30'},
    ]
    return {
        'lease': lease_payload,
        'payments': [
            {'id': 'p1', 'payment_date': '2023-02-10', 'payment_amount': 1500000},
        ],
        'adjustments': [
            {'id': 'a1', 'adjustment_date': '2023-03-01', 'adjusted_rent_amount': 800000, 'notes': 'friend discount'},
        ],
        'as_of': '2023-07-31',
    }


def test_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'ok'


def test_calculate_ledger(client, ledger_payload):
    response = client.post('/api/calculate_ledger', json=ledger_payload)
    assert response.status_code == 200, f"Unexpected status: {response.get_data(as_text=True)}"

    data = response.get_json()
    assert data['success'] is True
    assert data['as_of'] == '2023-07-31'
    assert data['lease_details'] == {'rent_amount': 1200000, 'lease_end_date': '2024-06-30', 'is_renewed': True}

    dues = data['dues']
    assert len(dues) == 7
    assert dues[2]['amount'] == 800000
    assert dues[2]['notes'] == '조정: friend discount'
    assert dues[5]['amount'] == 1000000
    assert dues[6]['amount'] == 1200000

    ledger = data['ledger']
    assert [row['balance'] for row in ledger[:3]] == [1000000, -500000, 500000]
    assert ledger[1]['description'] == '입금'
    assert ledger[-1]['date'] == '2023-07-31'

    summary = data['summary']
    # 1,000,000 x 5 + 800,000 + 1,200,000 - 1,500,000
    assert summary['balance'] == 5500000
    assert summary['status'] == 'overdue'
    assert summary['total_paid'] == 1500000


def test_calculate_ledger_is_repeatable(client, ledger_payload):
    first = client.post('/api/calculate_ledger', json=ledger_payload).get_json()
    second = client.post('/api/calculate_ledger', json=ledger_payload).get_json()
    assert first == second


def test_ledger_table(client, ledger_payload):
    response = client.post('/api/ledger_table', json=ledger_payload)
    assert response.status_code == 200

    data = response.get_json()
    assert data['columns'] == ['date', 'description', 'supply_value', 'vat', 'total_due', 'payment', 'balance', 'notes']
    assert data['headers'][0] == '일자'
    assert data['rows'][0]['total_due'] == 1000000
    assert data['rows'][1]['payment'] == 1500000


def test_invalid_date_returns_422(client, ledger_payload):
    ledger_payload['payments'][0]['payment_date'] = '10/02/2023'
    response = client.post('/api/calculate_ledger', json=ledger_payload)

    assert response.status_code == 422
    data = response.get_json()
    assert data['success'] is False
    assert data['details']['record_type'] == 'payment'
    assert data['details']['record_id'] == 'p1'
    assert data['details']['field'] == 'payment_date'


def test_negative_payment_returns_400(client, ledger_payload):
    ledger_payload['payments'][0]['payment_amount'] = -5
    response = client.post('/api/calculate_ledger', json=ledger_payload)
    assert response.status_code == 400
    assert response.get_json()['success'] is False


def test_bad_as_of_returns_400(client, ledger_payload):
    ledger_payload['as_of'] = 'today'
    response = client.post('/api/calculate_ledger', json=ledger_payload)
    assert response.status_code == 400


def test_missing_body_returns_400(client):
    response = client.post('/api/calculate_ledger', data='not json', content_type='text/plain')
    assert response.status_code == 400


def _batch_payload(ledger_payload, requested_by):
    other = dict(ledger_payload['lease'], id='lease-2', owner_id='owner-2', renewals=[])
    payments = [dict(p, lease_id='lease-1') for p in ledger_payload['payments']]
    payments.append({'id': 'p2', 'lease_id': 'lease-2', 'payment_date': '2023-01-05', 'payment_amount': 99})
    return {
        'requested_by': requested_by,
        'leases': [ledger_payload['lease'], other],
        'payments': payments,
        'adjustments': [dict(a, lease_id='lease-1') for a in ledger_payload['adjustments']],
        'as_of': ledger_payload['as_of'],
    }


def test_lease_ledger_fetch(client, ledger_payload):
    response = client.post('/api/leases/lease-1/ledger', json=_batch_payload(ledger_payload, 'owner-1'))
    assert response.status_code == 200

    data = response.get_json()
    assert data['lease_id'] == 'lease-1'
    assert data['summary']['total_paid'] == 1500000


def test_lease_ledger_not_found(client, ledger_payload):
    response = client.post('/api/leases/nope/ledger', json=_batch_payload(ledger_payload, 'owner-1'))
    assert response.status_code == 404


def test_lease_ledger_access_denied(client, ledger_payload):
    response = client.post('/api/leases/lease-2/ledger', json=_batch_payload(ledger_payload, 'owner-1'))
    assert response.status_code == 403
    assert response.get_json()['error'] == 'Access denied'


def test_lease_details_endpoint(client, ledger_payload):
    response = client.post('/api/lease_details', json={'lease': ledger_payload['lease'], 'on_date': '2023-06-30'})
    assert response.status_code == 200

    data = response.get_json()
    assert data['rent_amount'] == 1000000
    assert data['is_renewed'] is False
    assert data['lease_end_date'] == '2024-06-30'


def test_portfolio_stats(client, ledger_payload):
    payload = _batch_payload(ledger_payload, 'owner-1')
    payload['leases'][1]['lease_end_date'] = '2023-03-31'
    response = client.post('/api/portfolio_stats', json=payload)
    assert response.status_code == 200

    data = response.get_json()
    assert len(data['tenants']) == 2
    assert data['tenants'][1]['status'] == 'vacant'
    assert data['stats']['active_tenants'] == 1
    assert data['stats']['occupied_units'] == 1
    assert data['stats']['total_monthly_rent'] == 1200000
    assert data['stats']['overdue_rent'] == 5500000
    # lease-2: 3,000,000 billed, 99 paid
    assert data['stats']['total_outstanding'] == 5500000 + 3000000 - 99


def test_payment_dates_endpoint(client, ledger_payload):
    response = client.post('/api/payment_dates', json={
        'start_date': '2023-01-01',
        'end_date': '2023-03-31',
        'day_of_month': 31,
        'lease': dict(ledger_payload['lease'], vat_treatment='excluded'),
        'as_of': '2023-01-01',
    })
    assert response.status_code == 200

    data = response.get_json()
    assert data['dates'] == ['2023-01-31', '2023-02-28', '2023-03-31']
    assert data['suggested_amount'] == 1100000


def test_payment_dates_bad_day(client):
    response = client.post('/api/payment_dates', json={
        'start_date': '2023-01-01', 'end_date': '2023-03-31', 'day_of_month': 40,
    })
    assert response.status_code == 400


def test_non_object_payment_returns_400(client, ledger_payload):
    ledger_payload['payments'] = ['oops']
    response = client.post('/api/calculate_ledger', json=ledger_payload)
    assert response.status_code == 400
    assert 'payments[0]' in response.get_json()['error']


def test_non_text_adjustment_notes_returns_400(client, ledger_payload):
    ledger_payload['adjustments'][0]['notes'] = 5
    response = client.post('/api/calculate_ledger', json=ledger_payload)
    assert response.status_code == 400


def test_huge_rent_free_period_is_fully_waived(client, ledger_payload):
    ledger_payload['lease']['rent_free_period'] = 10 ** 7
    ledger_payload['adjustments'] = []
    response = client.post('/api/calculate_ledger', json=ledger_payload)
    assert response.status_code == 200, f"Unexpected status: {response.get_data(as_text=True)}"
    assert all(due['amount'] == 0 for due in response.get_json()['dues'])
