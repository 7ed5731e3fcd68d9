"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import pytest
import tempfile
from datetime import date, timedelta

# Set test database path BEFORE importing app
# This ensures all tests use an isolated database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'venue_reservations_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with isolated database."""
    from app import create_app
    from database import init_db

    os.environ['DATABASE_PATH'] = TEST_DB_PATH

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture(autouse=True)
def clear_listeners():
    """No change listener outlives its test."""
    from models import reservation_events

    yield
    reservation_events._listeners.clear()


@pytest.fixture
def resources(app):
    """Seed organizations, venues, equipment and an organization user."""
    from models.organization import create_organization
    from models.venue import create_venue
    from models.equipment import create_equipment
    from models.user import create_user

    org_id = create_organization('Junior Philippine Computer Society', 'JPCS')
    other_org_id = create_organization('Student Council', 'SC')
    gym_id = create_venue('Gymnasium', capacity=500)
    avr_id = create_venue('Audio-Visual Room', capacity=80)
    projector_id = create_equipment('Projector')
    speaker_id = create_equipment('Sound System')
    create_user('jpcs', 'jpcs@example.edu', 'secret123', full_name='JPCS Officer', org_id=org_id)

    return {
        'org_id': org_id,
        'other_org_id': other_org_id,
        'admin_org_id': 1,
        'gym_id': gym_id,
        'avr_id': avr_id,
        'projector_id': projector_id,
        'speaker_id': speaker_id,
    }


class Actor:
    """Stand-in for the logged-in user."""

    def __init__(self, is_administrator, username='tester'):
        self.is_administrator = is_administrator
        self.username = username


@pytest.fixture
def admin_actor():
    return Actor(True, 'admin')


@pytest.fixture
def org_actor():
    return Actor(False, 'jpcs')


def future_weekday(days_ahead: int = 14) -> date:
    """A weekday at least days_ahead days from today."""
    day = date.today() + timedelta(days=days_ahead)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def reservation_payload(resources: dict, activity_date, **overrides) -> dict:
    """A complete, valid submission for the gymnasium."""
    payload = {
        'purpose': 'General Assembly',
        'start_date': activity_date.isoformat() if hasattr(activity_date, 'isoformat') else activity_date,
        'start_time': '09:00',
        'end_time': '10:00',
        'org_id': resources['org_id'],
        'venue_id': resources['gym_id'],
        'equipment_ids': [],
        'reserved_by': 'Juan Dela Cruz',
        'officer_in_charge': 'Maria Santos',
        'contact_no': '09123456789',
    }
    payload.update(overrides)
    return payload


def _login(app, username, password):
    client = app.test_client()
    response = client.post('/login', data={'username': username, 'password': password})
    assert response.status_code == 200
    return client


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def admin_client(app, resources):
    """Client signed in as the seeded administrator."""
    return _login(app, 'admin', 'admin123')


@pytest.fixture
def org_client(app, resources):
    """Client signed in as an organization member."""
    return _login(app, 'jpcs', 'secret123')
