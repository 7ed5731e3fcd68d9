"""
Resource availability and conflict detection.
A venue or equipment item can hold one live reservation per time window.
"""

from models.reservation_errors import ConflictError
from models.reservation_queries import find_overlapping, store_operation
from models.reservation_request import RESOURCE_VENUE, RESOURCE_EQUIPMENT


# =============================================================================
# SINGLE RESOURCE
# =============================================================================

def check_conflict(
    resource_type: str,
    resource_id: int,
    activity_date: str,
    start_time: str,
    end_time: str,
    exclude_reservation_id: int = None,
    cursor=None
) -> tuple:
    """
    Check one resource for an overlapping live reservation.

    Args:
        resource_type: 'venue' or 'equipment'
        resource_id: Venue or equipment id
        activity_date: Date (YYYY-MM-DD)
        start_time: Window start (HH:MM)
        end_time: Window end (HH:MM)
        exclude_reservation_id: Reservation to ignore (for updates)
        cursor: Active transaction cursor

    Returns:
        tuple: (has_conflict: bool, conflicting_reservation: dict or None)

    Raises:
        InfrastructureError: If the store is unavailable
    """
    with store_operation(f'{resource_type} {resource_id} availability check'):
        overlaps = find_overlapping(
            resource_type, resource_id, activity_date, start_time, end_time,
            exclude_reservation_id=exclude_reservation_id, cursor=cursor
        )

    if overlaps:
        return True, overlaps[0]
    return False, None


# =============================================================================
# DAILY RESERVATIONS
# =============================================================================

def _row(day) -> dict:
    return day.to_row() if hasattr(day, 'to_row') else day


def _resources(row: dict) -> list:
    pairs = []
    if row.get('venue_id'):
        pairs.append((RESOURCE_VENUE, row['venue_id']))
    pairs.extend((RESOURCE_EQUIPMENT, eid) for eid in row.get('equipment_ids') or [])
    return pairs


def find_day_conflict(day, exclude_reservation_id: int = None, cursor=None):
    """
    First conflict for any resource booked by one day.

    Venue is checked before equipment.

    Args:
        day: DailyReservation or row dict with activity_date, start_time,
             end_time, venue_id and equipment_ids
        exclude_reservation_id: Reservation to ignore (for updates)
        cursor: Active transaction cursor

    Returns:
        ConflictError or None
    """
    row = _row(day)
    for resource_type, resource_id in _resources(row):
        has_conflict, existing = check_conflict(
            resource_type, resource_id,
            row['activity_date'], row['start_time'], row['end_time'],
            exclude_reservation_id=exclude_reservation_id, cursor=cursor
        )
        if has_conflict:
            return ConflictError(
                resource_type=resource_type,
                resource_id=resource_id,
                activity_date=row['activity_date'],
                conflicting_reservation_id=existing['reservation_id'],
                conflicting_org_id=existing.get('org_id'),
                conflicting_org_name=existing.get('org_name'),
                start_time=existing.get('start_time'),
                end_time=existing.get('end_time'),
            )
    return None


def find_first_conflict(days: list, exclude_reservation_id: int = None, cursor=None):
    """
    First conflict across an expanded request, in date order.

    Args:
        days: DailyReservation objects (or row dicts)
        exclude_reservation_id: Reservation to ignore (for updates)
        cursor: Active transaction cursor

    Returns:
        ConflictError or None
    """
    for day in days:
        conflict = find_day_conflict(day, exclude_reservation_id, cursor)
        if conflict is not None:
            return conflict
    return None
