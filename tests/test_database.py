"""
Database tests.
Tests database initialization and data integrity.
"""

import sqlite3
import pytest

from database import get_db


def test_database_tables(app):
    """Test that all required tables exist."""
    db = get_db()
    cursor = db.cursor()

    cursor.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
    tables = [row[0] for row in cursor.fetchall()]

    required_tables = [
        'organizations', 'venues', 'equipment', 'users',
        'reservation_status', 'reservations', 'reservation_equipment',
    ]

    for table in required_tables:
        assert table in tables, f"Table {table} should exist"


def test_seed_data(app):
    """Test that seed data was created correctly."""
    db = get_db()
    cursor = db.cursor()

    cursor.execute('SELECT reservation_status_id, reservation_status FROM reservation_status')
    statuses = {row[0]: row[1] for row in cursor.fetchall()}
    assert statuses == {1: 'Reserved', 2: 'Rejected', 3: 'Pending', 4: 'Cancelled'}

    cursor.execute('SELECT org_code FROM organizations WHERE org_id = 1')
    assert cursor.fetchone()[0] == 'CSAO'

    cursor.execute("SELECT role, org_id FROM users WHERE username = 'admin'")
    admin = cursor.fetchone()
    assert admin['role'] == 'admin'
    assert admin['org_id'] == 1


def _insert(db, resources, start='09:00', end='10:00', venue_id=None):
    cursor = db.execute('''
        INSERT INTO reservations (
            purpose, activity_date, start_time, end_time, org_id, venue_id,
            reserved_by, officer_in_charge, contact_no, reservation_ts
        ) VALUES ('Seminar', '2025-06-10', ?, ?, ?, ?, 'A', 'B', '+639123456789', '2025-06-01')
    ''', (start, end, resources['org_id'], venue_id))
    db.commit()
    return cursor.lastrowid


def test_end_after_start_is_enforced(app, resources):
    db = get_db()
    with pytest.raises(sqlite3.IntegrityError):
        _insert(db, resources, start='10:00', end='09:00')
    db.rollback()


def test_new_reservations_default_to_pending(app, resources):
    db = get_db()
    reservation_id = _insert(db, resources)

    row = db.execute(
        'SELECT reservation_status_id FROM reservations WHERE reservation_id = ?', (reservation_id,)
    ).fetchone()
    assert row[0] == 3


def test_deleting_venue_clears_reference(app, resources):
    db = get_db()
    reservation_id = _insert(db, resources, venue_id=resources['gym_id'])

    db.execute('DELETE FROM venues WHERE venue_id = ?', (resources['gym_id'],))
    db.commit()

    row = db.execute(
        'SELECT venue_id FROM reservations WHERE reservation_id = ?', (reservation_id,)
    ).fetchone()
    assert row is not None
    assert row[0] is None


def test_deleting_reservation_removes_equipment_links(app, resources):
    db = get_db()
    reservation_id = _insert(db, resources)
    db.execute(
        'INSERT INTO reservation_equipment (reservation_id, equipment_id) VALUES (?, ?)',
        (reservation_id, resources['projector_id'])
    )
    db.commit()

    db.execute('DELETE FROM reservations WHERE reservation_id = ?', (reservation_id,))
    db.commit()

    count = db.execute('SELECT COUNT(*) FROM reservation_equipment').fetchone()[0]
    assert count == 0
