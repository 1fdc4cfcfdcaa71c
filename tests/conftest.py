"""Pytest fixtures for Purifai tests."""
import pytest
import os
from datetime import date

from purifai import create_app
from purifai.db import get_db
from purifai.services.nisab import NisabReference
from purifai.services.time_provider import TimeProvider


# Fixed "today" for deterministic tests - the default nisab reference date
FROZEN_TODAY = date(2026, 2, 8)


@pytest.fixture
def app(tmp_path):
    """Create application for testing.

    Yields:
        Flask application configured for testing, storing its database
        in a temporary directory.
    """
    app = create_app({'TESTING': True, 'DATA_DIR': str(tmp_path)})
    yield app


@pytest.fixture
def client(app):
    """Create test client.

    Args:
        app: Flask application fixture.

    Yields:
        Flask test client for making requests.
    """
    with app.test_client() as client:
        yield client


@pytest.fixture
def db_app(tmp_path):
    """Create application with a seeded household for testing.

    The household has the self member (created by the app factory) and a
    wife; the self member already holds a saved cash record.

    Yields:
        Flask application with seeded database.
    """
    data_dir = str(tmp_path)

    app = create_app({
        'TESTING': True,
        'DATA_DIR': data_dir,
    })

    # Set environment variable for db module
    old_data_dir = os.environ.get('DATA_DIR')
    os.environ['DATA_DIR'] = data_dir

    with app.app_context():
        from purifai.services.calc import save_calculation
        from purifai.services.records import parse_record
        from purifai.services.repository import (
            load_household,
            save_household,
            load_nisab,
            save_record,
        )

        db = get_db()
        household = load_household(db)
        self_member = household.get_self_member()
        household.add_member('Aisha', 'wife')
        save_household(db, household)

        record = parse_record('cash', {
            'accounts': [
                {'name': 'DBS', 'account_type': 'savings', 'lowest_balance_in_year': 20000},
            ],
        })
        saved, _ = save_calculation(record, load_nisab(db))
        save_record(db, self_member.id, saved)

    yield app

    # Restore environment
    if old_data_dir:
        os.environ['DATA_DIR'] = old_data_dir
    elif 'DATA_DIR' in os.environ:
        del os.environ['DATA_DIR']


@pytest.fixture
def db_client(db_app):
    """Create test client with seeded database.

    Yields:
        Flask test client with seeded household.
    """
    with db_app.test_client() as client:
        yield client


@pytest.fixture
def frozen_time():
    """Fixture that freezes time to FROZEN_TODAY (2026-02-08).

    Yields the TimeProvider for use in tests. Automatically resets
    the default TimeProvider after the test completes.
    """
    provider = TimeProvider(frozen_date=FROZEN_TODAY)
    TimeProvider.set_default(provider)
    yield provider
    TimeProvider.reset_default()


@pytest.fixture
def frozen_today():
    """Returns the frozen date value for assertions."""
    return FROZEN_TODAY


@pytest.fixture
def nisab():
    """Default nisab reference: SGD 17,230.10 and 86g of gold at 200.35/g."""
    return NisabReference(
        monetary_threshold=17230.10,
        gold_weight_threshold=86,
        gold_price_per_gram=200.35,
        currency='SGD',
        updated_date='2026-02-08',
    )
