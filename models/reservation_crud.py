"""
Reservation CRUD operations.
Handles insert, update and delete for reservations and their equipment links.

Every write runs in a BEGIN IMMEDIATE transaction and re-checks overlaps
inside it, so two submissions racing for the same slot cannot both
commit. Committed changes are published through models.reservation_events.
"""

import logging

from database import get_db
from models.reservation_availability import find_day_conflict, find_first_conflict
from models.reservation_errors import InvalidTransitionError, ReservationNotFoundError
from models.reservation_events import publish, EVENT_INSERT, EVENT_UPDATE, EVENT_DELETE
from models.reservation_queries import (
    store_operation, get_reservation_by_id, get_reservation_with_details
)
from models.reservation_state import STATUS_PENDING, get_status_label
from utils.datetime_helpers import get_timestamp

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    'purpose', 'activity_date', 'start_time', 'end_time',
    'org_id', 'venue_id', 'reserved_by', 'officer_in_charge', 'contact_no',
    'reservation_status_id', 'decision_ts',
)

# Changing any of these can create a new overlap
SLOT_FIELDS = ('activity_date', 'start_time', 'end_time', 'venue_id', 'equipment_ids')


def _link_equipment(cursor, reservation_id: int, equipment_ids) -> None:
    for equipment_id in equipment_ids or []:
        cursor.execute('''
            INSERT INTO reservation_equipment (reservation_id, equipment_id)
            VALUES (?, ?)
        ''', (reservation_id, equipment_id))


# =============================================================================
# CREATE
# =============================================================================

def insert_reservations(rows: list, created_by: str = None) -> list:
    """
    Insert one or more daily reservations, all or nothing.

    Each row is re-checked for overlaps inside the transaction; the first
    conflict rolls back the whole batch.

    Args:
        rows: Row dicts (DailyReservation.to_row()) with equipment_ids
        created_by: Username submitting

    Returns:
        list: Created reservations with joined details, in input order

    Raises:
        ConflictError: A slot was taken before the batch committed
        InfrastructureError: If the store is unavailable
    """
    db = get_db()
    cursor = db.cursor()
    now = get_timestamp()
    created_ids = []

    with store_operation('reservation insert'):
        try:
            cursor.execute('BEGIN IMMEDIATE')

            for row in rows:
                conflict = find_day_conflict(row, cursor=cursor)
                if conflict is not None:
                    raise conflict

                cursor.execute('''
                    INSERT INTO reservations (
                        purpose, activity_date, start_time, end_time,
                        org_id, venue_id, reservation_status_id,
                        reserved_by, officer_in_charge, contact_no,
                        reservation_ts, edit_ts, decision_ts, created_by
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, NULL, ?)
                ''', (
                    row['purpose'], row['activity_date'], row['start_time'], row['end_time'],
                    row['org_id'], row.get('venue_id'), STATUS_PENDING,
                    row['reserved_by'], row['officer_in_charge'], row['contact_no'],
                    now, now, created_by
                ))
                reservation_id = cursor.lastrowid
                _link_equipment(cursor, reservation_id, row.get('equipment_ids'))
                created_ids.append(reservation_id)

            db.commit()

        except Exception:
            db.rollback()
            raise

        created = [get_reservation_with_details(rid) for rid in created_ids]

    logger.info(f'Inserted {len(created)} reservation(s): {created_ids}')
    for reservation in created:
        publish(EVENT_INSERT, reservation)
    return created


# =============================================================================
# UPDATE
# =============================================================================

def update_reservation_fields(
    reservation_id: int,
    check_overlaps: bool = True,
    expected_status_id: int = None,
    **fields
) -> dict:
    """
    Update reservation columns and, optionally, its equipment list.

    Args:
        reservation_id: Reservation id
        check_overlaps: Re-check overlaps when the date, times or resources change
        expected_status_id: Fail unless the stored status still equals this
        **fields: Columns from UPDATABLE_FIELDS; equipment_ids replaces the
                  equipment list when not None

    Returns:
        dict: Updated reservation with joined details

    Raises:
        ReservationNotFoundError: If the reservation does not exist
        ConflictError: The new slot overlaps a live reservation
        InvalidTransitionError: The status is no longer expected_status_id
        InfrastructureError: If the store is unavailable
    """
    db = get_db()
    cursor = db.cursor()

    equipment_ids = fields.pop('equipment_ids', None)
    updates = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}

    with store_operation(f'reservation {reservation_id} update'):
        try:
            cursor.execute('BEGIN IMMEDIATE')

            current = get_reservation_by_id(reservation_id, cursor=cursor)
            if not current:
                raise ReservationNotFoundError(reservation_id)

            # Another admin decided first
            if expected_status_id is not None and current['reservation_status_id'] != expected_status_id:
                raise InvalidTransitionError(
                    get_status_label(current['reservation_status_id']), 'update',
                    message=(
                        f'Reservation {reservation_id} is now '
                        f'{get_status_label(current["reservation_status_id"])}'
                    )
                )

            slot_changed = equipment_ids is not None or any(f in updates for f in SLOT_FIELDS)
            if check_overlaps and slot_changed:
                merged = {**current, **updates}
                if equipment_ids is not None:
                    merged['equipment_ids'] = list(equipment_ids)
                conflict = find_first_conflict(
                    [merged], exclude_reservation_id=reservation_id, cursor=cursor
                )
                if conflict is not None:
                    raise conflict

            updates['edit_ts'] = get_timestamp()
            set_clause = ', '.join(f'{column} = ?' for column in updates)
            cursor.execute(
                f'UPDATE reservations SET {set_clause} WHERE reservation_id = ?',
                list(updates.values()) + [reservation_id]
            )

            if equipment_ids is not None:
                cursor.execute(
                    'DELETE FROM reservation_equipment WHERE reservation_id = ?',
                    (reservation_id,)
                )
                _link_equipment(cursor, reservation_id, equipment_ids)

            db.commit()

        except Exception:
            db.rollback()
            raise

        updated = get_reservation_with_details(reservation_id)

    logger.info(f'Updated reservation {reservation_id}: {sorted(updates)}')
    publish(EVENT_UPDATE, updated)
    return updated


# =============================================================================
# DELETE
# =============================================================================

def delete_reservation(reservation_id: int) -> dict:
    """
    Delete a reservation and its equipment links.

    Args:
        reservation_id: Reservation id

    Returns:
        dict: The deleted reservation as it was

    Raises:
        ReservationNotFoundError: If the reservation does not exist
        InfrastructureError: If the store is unavailable
    """
    db = get_db()
    cursor = db.cursor()

    with store_operation(f'reservation {reservation_id} delete'):
        try:
            cursor.execute('BEGIN IMMEDIATE')

            existing = get_reservation_with_details(reservation_id, cursor=cursor)
            if not existing:
                raise ReservationNotFoundError(reservation_id)

            # reservation_equipment rows go with it (ON DELETE CASCADE)
            cursor.execute('DELETE FROM reservations WHERE reservation_id = ?', (reservation_id,))
            db.commit()

        except Exception:
            db.rollback()
            raise

    logger.info(f'Deleted reservation {reservation_id}')
    publish(EVENT_DELETE, existing)
    return existing
