"""
Venue data access functions.
Handles venue lookups and removal with its reservation cascade.
"""

import logging

from database import get_db
from models.reservation_events import publish, EVENT_UPDATE
from models.reservation_queries import store_operation, get_reservation_with_details
from models.reservation_state import STATUS_CANCELLED, STATUS_PENDING, STATUS_RESERVED
from utils.datetime_helpers import get_timestamp

logger = logging.getLogger(__name__)


def get_all_venues(active_only: bool = True) -> list:
    """
    Get all venues.

    Args:
        active_only: If True, only return active venues

    Returns:
        List of venue dicts ordered by name
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM venues'
    if active_only:
        query += ' WHERE active = 1'
    query += ' ORDER BY venue_name'

    cursor.execute(query)
    return [dict(row) for row in cursor.fetchall()]


def get_venue_by_id(venue_id: int) -> dict:
    """
    Get venue by ID.

    Args:
        venue_id: Venue ID

    Returns:
        Venue dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM venues WHERE venue_id = ?', (venue_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


def create_venue(venue_name: str, description: str = None, capacity: int = None) -> int:
    """
    Create a venue.

    Args:
        venue_name: Display name
        description: Optional description
        capacity: Seating capacity (informational)

    Returns:
        New venue ID
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO venues (venue_name, description, capacity)
        VALUES (?, ?, ?)
    ''', (venue_name, description, capacity))
    db.commit()
    return cursor.lastrowid


def update_venue(venue_id: int, **kwargs) -> bool:
    """
    Update venue fields.

    Args:
        venue_id: Venue ID to update
        **kwargs: Fields to update (venue_name, description, capacity, active)

    Returns:
        True if a row was updated
    """
    db = get_db()

    allowed_fields = ['venue_name', 'description', 'capacity', 'active']
    updates = []
    values = []

    for field in allowed_fields:
        if field in kwargs:
            updates.append(f'{field} = ?')
            values.append(kwargs[field])

    if not updates:
        return False

    values.append(venue_id)
    query = f'UPDATE venues SET {", ".join(updates)} WHERE venue_id = ?'

    cursor = db.cursor()
    cursor.execute(query, values)
    db.commit()

    return cursor.rowcount > 0


def remove_venue(venue_id: int) -> int:
    """
    Delete a venue, cancelling its open reservations first.

    Pending and Reserved reservations of the venue become Cancelled (the
    decision time is stamped if none was recorded). Rejected and Cancelled
    ones are left as they are. Deleting the venue then clears venue_id on
    all of them.

    Args:
        venue_id: Venue ID to delete

    Returns:
        int: Number of reservations cancelled

    Raises:
        ValueError: If the venue does not exist
        InfrastructureError: If the store is unavailable
    """
    db = get_db()
    cursor = db.cursor()
    now = get_timestamp()

    with store_operation(f'venue {venue_id} removal'):
        try:
            cursor.execute('BEGIN IMMEDIATE')

            cursor.execute('SELECT venue_id FROM venues WHERE venue_id = ?', (venue_id,))
            if not cursor.fetchone():
                raise ValueError('Venue not found')

            cursor.execute('''
                SELECT reservation_id FROM reservations
                WHERE venue_id = ? AND reservation_status_id IN (?, ?)
            ''', (venue_id, STATUS_PENDING, STATUS_RESERVED))
            cancelled_ids = [row['reservation_id'] for row in cursor.fetchall()]

            cursor.execute('''
                UPDATE reservations
                SET reservation_status_id = ?,
                    decision_ts = COALESCE(decision_ts, ?),
                    edit_ts = ?
                WHERE venue_id = ? AND reservation_status_id IN (?, ?)
            ''', (STATUS_CANCELLED, now, now, venue_id, STATUS_PENDING, STATUS_RESERVED))

            # reservations.venue_id is ON DELETE SET NULL
            cursor.execute('DELETE FROM venues WHERE venue_id = ?', (venue_id,))
            db.commit()

        except Exception:
            db.rollback()
            raise

        cancelled = [get_reservation_with_details(rid) for rid in cancelled_ids]

    logger.info(f'Removed venue {venue_id}; cancelled {len(cancelled_ids)} reservation(s)')
    for reservation in cancelled:
        publish(EVENT_UPDATE, reservation)
    return len(cancelled_ids)
