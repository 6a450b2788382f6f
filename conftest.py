"""
Shared pytest fixtures
"""

import pytest
from datetime import date

from rent_application.app import create_app
from rent_application.rent_ledger.core.models import LeaseAgreement, Renewal


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    app = create_app('testing', {'LOG_DIR': tmp_path_factory.mktemp('logs')})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def basic_lease():
    """2023-01-01 .. 2023-12-31 at 1,000,000 per month, no VAT"""
    return LeaseAgreement(
        id='lease-1',
        owner_id='owner-1',
        tenant_name='Kim',
        unit_ids=['101'],
        lease_start_date=date(2023, 1, 1),
        lease_end_date=date(2023, 12, 31),
        rent_amount=1_000_000,
    )


@pytest.fixture
def renewed_lease(basic_lease):
    basic_lease.renewals = [
        Renewal(renewal_date=date(2023, 7, 1), new_rent_amount=1_200_000, new_lease_end_date=date(2024, 6, 30)),
    ]
    return basic_lease


@pytest.fixture
def lease_payload():
    return {
        'id': 'lease-1',
        'owner_id': 'owner-1',
        'tenant_name': 'Kim',
        'unit_ids': ['101'],
        'lease_start_date': '2023-01-01',
        'lease_end_date': '2023-12-31',
        'rent_amount': 1000000,
        'vat_treatment': 'none',
        'renewals': [],
    }
