"""
Reservation query functions.
Handles overlap lookups, single-reservation reads and filtered listings.
"""

import logging
import sqlite3
from contextlib import contextmanager

from database import get_db
from models.reservation_errors import InfrastructureError, ValidationError
from models.reservation_request import RESOURCE_VENUE, RESOURCE_EQUIPMENT
from models.reservation_state import (
    RELEASING_STATUSES, STATUS_PENDING, get_status_label
)

logger = logging.getLogger(__name__)


# =============================================================================
# STORE ERRORS
# =============================================================================

@contextmanager
def store_operation(description: str):
    """
    Translate sqlite3 failures raised inside the block.

    Integrity failures (a referenced row vanished, a CHECK failed) become
    ValidationError; anything else (locked database, timeout, I/O) becomes
    a retryable InfrastructureError.

    Args:
        description: What was being attempted, for the log
    """
    try:
        yield
    except sqlite3.IntegrityError as e:
        logger.warning(f'Integrity error during {description}: {e}')
        raise ValidationError({'reservation': 'A referenced record is missing or invalid'}) from e
    except sqlite3.Error as e:
        logger.error(f'Database error during {description}: {e}', exc_info=True)
        raise InfrastructureError() from e


# =============================================================================
# OVERLAP LOOKUPS
# =============================================================================

_OVERLAP_COLUMNS = '''
    SELECT r.reservation_id, r.org_id, o.org_name, o.org_code,
           r.activity_date, r.start_time, r.end_time, r.reservation_status_id
    FROM reservations r
    LEFT JOIN organizations o ON o.org_id = r.org_id
'''


def find_overlapping(
    resource_type: str,
    resource_id: int,
    activity_date: str,
    start_time: str,
    end_time: str,
    exclude_reservation_id: int = None,
    cursor=None
) -> list:
    """
    Find live reservations of a resource that overlap a window.

    Two windows overlap when existing.start < end and existing.end > start,
    so back-to-back bookings do not collide. Rejected and Cancelled
    reservations are ignored.

    Args:
        resource_type: 'venue' or 'equipment'
        resource_id: Venue or equipment id
        activity_date: Date (YYYY-MM-DD)
        start_time: Window start (HH:MM)
        end_time: Window end (HH:MM)
        exclude_reservation_id: Reservation to ignore (the one being edited)
        cursor: Active transaction cursor (default: new cursor)

    Returns:
        list: Overlapping reservations, earliest start first
    """
    cur = cursor or get_db().cursor()

    if resource_type == RESOURCE_VENUE:
        query = _OVERLAP_COLUMNS + ' WHERE r.venue_id = ?'
    elif resource_type == RESOURCE_EQUIPMENT:
        query = _OVERLAP_COLUMNS + '''
            JOIN reservation_equipment re ON re.reservation_id = r.reservation_id
            WHERE re.equipment_id = ?
        '''
    else:
        raise ValueError(f'Unknown resource type: {resource_type}')

    placeholders = ','.join('?' * len(RELEASING_STATUSES))
    query += f'''
          AND r.activity_date = ?
          AND r.start_time < ?
          AND r.end_time > ?
          AND r.reservation_status_id NOT IN ({placeholders})
    '''
    params = [resource_id, activity_date, end_time, start_time]
    params.extend(RELEASING_STATUSES)

    if exclude_reservation_id:
        query += ' AND r.reservation_id != ?'
        params.append(exclude_reservation_id)

    query += ' ORDER BY r.start_time, r.reservation_id'

    cur.execute(query, params)
    return [dict(row) for row in cur.fetchall()]


# =============================================================================
# SINGLE RESERVATION
# =============================================================================

_DETAIL_QUERY = '''
    SELECT r.*,
           o.org_name, o.org_code,
           v.venue_name,
           s.reservation_status AS status,
           s.color AS status_color,
           s.background_color AS status_background
    FROM reservations r
    LEFT JOIN organizations o ON o.org_id = r.org_id
    LEFT JOIN venues v ON v.venue_id = r.venue_id
    LEFT JOIN reservation_status s ON s.reservation_status_id = r.reservation_status_id
'''


def _load_equipment(cursor, reservation_ids: list) -> dict:
    """Map reservation_id -> [{'equipment_id', 'equipment_name'}]."""
    if not reservation_ids:
        return {}

    placeholders = ','.join('?' * len(reservation_ids))
    cursor.execute(f'''
        SELECT re.reservation_id, e.equipment_id, e.equipment_name
        FROM reservation_equipment re
        JOIN equipment e ON e.equipment_id = re.equipment_id
        WHERE re.reservation_id IN ({placeholders})
        ORDER BY e.equipment_name
    ''', list(reservation_ids))

    equipment = {}
    for row in cursor.fetchall():
        equipment.setdefault(row['reservation_id'], []).append({
            'equipment_id': row['equipment_id'],
            'equipment_name': row['equipment_name'],
        })
    return equipment


def _with_equipment(cursor, rows) -> list:
    reservations = [dict(row) for row in rows]
    equipment = _load_equipment(cursor, [r['reservation_id'] for r in reservations])
    for res in reservations:
        items = equipment.get(res['reservation_id'], [])
        res['equipment'] = items
        res['equipment_ids'] = [item['equipment_id'] for item in items]
        if not res.get('status'):
            res['status'] = get_status_label(res.get('reservation_status_id'))
    return reservations


def get_reservation_by_id(reservation_id: int, cursor=None) -> dict | None:
    """
    Get a reservation row with its equipment ids.

    Args:
        reservation_id: Reservation id
        cursor: Active transaction cursor (default: new cursor)

    Returns:
        dict or None if not found
    """
    cur = cursor or get_db().cursor()
    cur.execute('SELECT * FROM reservations WHERE reservation_id = ?', (reservation_id,))
    row = cur.fetchone()
    if not row:
        return None

    res = dict(row)
    cur.execute(
        'SELECT equipment_id FROM reservation_equipment WHERE reservation_id = ? ORDER BY equipment_id',
        (reservation_id,)
    )
    res['equipment_ids'] = [r['equipment_id'] for r in cur.fetchall()]
    return res


def get_reservation_with_details(reservation_id: int, cursor=None) -> dict | None:
    """
    Get a reservation with organization, venue, equipment and status names.

    Args:
        reservation_id: Reservation id
        cursor: Active transaction cursor (default: new cursor)

    Returns:
        dict or None if not found
    """
    cur = cursor or get_db().cursor()
    cur.execute(_DETAIL_QUERY + ' WHERE r.reservation_id = ?', (reservation_id,))
    row = cur.fetchone()
    if not row:
        return None
    return _with_equipment(cur, [row])[0]


# =============================================================================
# LIST QUERIES
# =============================================================================

def list_reservations(
    date_from: str = None,
    date_to: str = None,
    status_ids: list = None,
    org_id: int = None,
    venue_id: int = None,
    equipment_id: int = None,
    oldest_first: bool = False
) -> list:
    """
    List reservations with joined names.

    Args:
        date_from: Earliest activity date (inclusive)
        date_to: Latest activity date (inclusive)
        status_ids: Only these statuses
        org_id: Only this organization
        venue_id: Only this venue
        equipment_id: Only reservations that include this equipment
        oldest_first: Order by submission time instead of activity date

    Returns:
        list: Reservation dicts as returned by get_reservation_with_details
    """
    db = get_db()
    cursor = db.cursor()

    query = _DETAIL_QUERY + ' WHERE 1=1'
    params = []

    if date_from:
        query += ' AND r.activity_date >= ?'
        params.append(date_from)
    if date_to:
        query += ' AND r.activity_date <= ?'
        params.append(date_to)

    if status_ids:
        placeholders = ','.join('?' * len(status_ids))
        query += f' AND r.reservation_status_id IN ({placeholders})'
        params.extend(status_ids)

    if org_id:
        query += ' AND r.org_id = ?'
        params.append(org_id)

    if venue_id:
        query += ' AND r.venue_id = ?'
        params.append(venue_id)

    if equipment_id:
        query += '''
            AND EXISTS (
                SELECT 1 FROM reservation_equipment re
                WHERE re.reservation_id = r.reservation_id AND re.equipment_id = ?
            )
        '''
        params.append(equipment_id)

    if oldest_first:
        query += ' ORDER BY r.reservation_ts ASC, r.reservation_id ASC'
    else:
        query += ' ORDER BY r.activity_date ASC, r.start_time ASC, r.reservation_id ASC'

    cursor.execute(query, params)
    return _with_equipment(cursor, cursor.fetchall())


def list_pending_reservations() -> list:
    """
    Pending reservations awaiting a decision, oldest submission first.

    Returns:
        list: Reservation dicts
    """
    return list_reservations(status_ids=[STATUS_PENDING], oldest_first=True)
