"""
Reservation orchestration.

The public reservation operations: submit, update, change status and
remove. Each one runs validation, expansion and conflict checks before
touching the store, and returns a ReservationResult instead of raising,
so the HTTP layer maps failures without parsing messages.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from flask import current_app

from models.equipment import get_missing_equipment_ids
from models.organization import get_organization_by_id
from models.reservation_availability import find_first_conflict
from models.reservation_crud import (
    insert_reservations, update_reservation_fields, delete_reservation
)
from models.reservation_errors import (
    ReservationError, ValidationError, EmptyExpansionError, ConflictError,
    InfrastructureError, ReservationNotFoundError
)
from models.reservation_multiday import build_daily_reservation, expand_reservation_request
from models.reservation_queries import (
    store_operation, get_reservation_by_id, get_reservation_with_details
)
from models.reservation_request import ReservationRequest
from models.reservation_state import plan_transition
from models.reservation_validation import validate_reservation_request
from models.user import current_actor
from models.venue import get_venue_by_id
from utils.datetime_helpers import get_today, get_timestamp, parse_time

logger = logging.getLogger(__name__)

_EXPECTED_OBJECT = 'Expected a JSON object with the reservation fields'


@dataclass
class ReservationResult:
    """Outcome of a reservation operation: data on success, the error otherwise."""

    success: bool
    data: Any = None
    error: ReservationError = None

    @classmethod
    def ok(cls, data=None) -> 'ReservationResult':
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: ReservationError) -> 'ReservationResult':
        return cls(success=False, error=error)

    def to_dict(self) -> dict:
        if self.success:
            return {'success': True, 'data': self.data}
        return {'success': False, 'error': self.error.to_dict()}


# =============================================================================
# HELPERS
# =============================================================================

def _policy() -> dict:
    """Validator keyword arguments from the app config."""
    cfg = current_app.config
    return {
        'min_advance_days': cfg.get('MIN_ADVANCE_DAYS', 2),
        'business_hours_start': parse_time(cfg.get('BUSINESS_HOURS_START', '07:00')),
        'business_hours_end': parse_time(cfg.get('BUSINESS_HOURS_END', '21:00')),
    }


def _check_references(request: ReservationRequest) -> None:
    """
    Verify the organization, venue and equipment exist.

    Raises:
        ValidationError: One entry per unknown reference
        InfrastructureError: If the store is unavailable
    """
    errors = {}
    with store_operation('reference lookup'):
        if request.org_id and not get_organization_by_id(request.org_id):
            errors['org_id'] = 'Selected organization does not exist'
        if request.venue_id and not get_venue_by_id(request.venue_id):
            errors['venue_id'] = 'Selected venue does not exist'
        missing = get_missing_equipment_ids(request.equipment_ids)
        if missing:
            errors['equipment_ids'] = f'Unknown equipment: {", ".join(str(m) for m in missing)}'
    if errors:
        raise ValidationError(errors)


def _failed(operation: str, error: ReservationError) -> ReservationResult:
    if isinstance(error, ConflictError):
        logger.warning(
            f'{operation} rejected: {error.resource_type} {error.resource_id} on '
            f'{error.activity_date} conflicts with reservation {error.conflicting_reservation_id}'
        )
    elif isinstance(error, InfrastructureError):
        logger.error(f'{operation} failed: {error.message}')
    else:
        logger.info(f'{operation} rejected ({error.code}): {error.message}')
    return ReservationResult.fail(error)


def _username(actor) -> str:
    return getattr(actor, 'username', None)


# =============================================================================
# SUBMIT
# =============================================================================

def submit_reservation(data, actor=None, today=None) -> ReservationResult:
    """
    Validate, expand, conflict-check and persist a reservation request.

    A date range becomes one Pending reservation per weekday; if any day
    conflicts nothing is stored.

    Args:
        data: ReservationRequest or submitted form/JSON dict
        actor: Submitting user (default: the logged-in user)
        today: Override for the current date

    Returns:
        ReservationResult: data is the list of created reservations
    """
    try:
        if not isinstance(data, (ReservationRequest, Mapping)):
            raise ValidationError({'reservation': _EXPECTED_OBJECT})
        request = data if isinstance(data, ReservationRequest) else ReservationRequest.from_dict(data)
        actor = actor or current_actor()

        normalized, errors = validate_reservation_request(request, today or get_today(), **_policy())
        if errors:
            raise ValidationError(errors)

        _check_references(normalized)

        if normalized.is_multi_day:
            days = expand_reservation_request(normalized)
            if not days:
                raise EmptyExpansionError(normalized.start_date, normalized.end_date)
        else:
            days = [build_daily_reservation(normalized, normalized.start_date)]

        conflict = find_first_conflict(days)
        if conflict is not None:
            raise conflict

        created = insert_reservations([day.to_row() for day in days], created_by=_username(actor))
        for record, day in zip(created, days):
            record.update(day.multi_day_info())

        logger.info(
            f'Reservation submitted by {_username(actor) or "anonymous"}: '
            f'{len(created)} day(s) from {normalized.start_date}'
        )
        return ReservationResult.ok(created)

    except ReservationError as e:
        return _failed('Submission', e)


# =============================================================================
# UPDATE
# =============================================================================

_EDITABLE_KEYS = (
    'purpose', 'start_time', 'end_time', 'org_id', 'venue_id',
    'reserved_by', 'officer_in_charge', 'contact_no',
)


def update_reservation(reservation_id: int, data: dict, actor=None, today=None) -> ReservationResult:
    """
    Edit one day's reservation in place.

    Fields not supplied keep their stored values. The status is left
    unchanged. Advance notice applies only when the date moves.

    Args:
        reservation_id: Reservation to edit
        data: Submitted fields (activity_date or start_date for the day)
        actor: Editing user (default: the logged-in user)
        today: Override for the current date

    Returns:
        ReservationResult: data is the updated reservation
    """
    try:
        if data is not None and not isinstance(data, Mapping):
            raise ValidationError({'reservation': _EXPECTED_OBJECT})
        data = dict(data or {})
        with store_operation(f'reservation {reservation_id} lookup'):
            existing = get_reservation_by_id(reservation_id)
        if not existing:
            raise ReservationNotFoundError(reservation_id)

        merged = {key: existing.get(key) for key in _EDITABLE_KEYS}
        merged['activity_date'] = existing['activity_date']
        if 'equipment_id' not in data or 'equipment_ids' in data:
            merged['equipment_ids'] = existing['equipment_ids']
        merged.update(data)

        request = ReservationRequest.from_dict(merged)
        date_moved = request.start_date is not None and request.start_date.isoformat() != existing['activity_date']

        normalized, errors = validate_reservation_request(
            request, today or get_today(), enforce_advance_notice=date_moved, **_policy()
        )
        if request.is_multi_day and 'end_date' not in errors:
            errors = dict(errors)
            errors['end_date'] = 'An edit applies to one day; submit a new reservation for other dates'
            normalized = None
        if errors:
            raise ValidationError(errors)

        _check_references(normalized)

        day = build_daily_reservation(normalized, normalized.start_date)
        conflict = find_first_conflict([day], exclude_reservation_id=reservation_id)
        if conflict is not None:
            raise conflict

        row = day.to_row()
        equipment_ids = row.pop('equipment_ids')
        if 'equipment_ids' in data or 'equipment_id' in data:
            row['equipment_ids'] = equipment_ids

        updated = update_reservation_fields(reservation_id, **row)
        logger.info(f'Reservation {reservation_id} edited by {_username(actor or current_actor()) or "anonymous"}')
        return ReservationResult.ok(updated)

    except ReservationError as e:
        return _failed(f'Update of reservation {reservation_id}', e)


# =============================================================================
# STATUS
# =============================================================================

def change_reservation_status(reservation_id: int, action: str, actor=None, now=None) -> ReservationResult:
    """
    Approve, reject or cancel a Pending reservation.

    Args:
        reservation_id: Reservation to decide
        action: 'approve', 'reject' or 'cancel'
        actor: Deciding user (default: the logged-in user); must be an administrator
        now: Override for the decision time

    Returns:
        ReservationResult: data is the updated reservation with a 'transition' entry
    """
    try:
        actor = actor or current_actor()
        with store_operation(f'reservation {reservation_id} lookup'):
            existing = get_reservation_by_id(reservation_id)
        if not existing:
            raise ReservationNotFoundError(reservation_id)

        transition = plan_transition(existing, action, actor, now or get_timestamp())
        updated = update_reservation_fields(
            reservation_id,
            check_overlaps=False,
            expected_status_id=transition.from_status_id,
            **transition.to_fields()
        )
        updated['transition'] = transition.to_dict()
        return ReservationResult.ok(updated)

    except ReservationError as e:
        return _failed(f'Status change of reservation {reservation_id}', e)


# =============================================================================
# READ / REMOVE
# =============================================================================

def get_reservation(reservation_id: int) -> ReservationResult:
    """Fetch one reservation with joined names."""
    try:
        with store_operation(f'reservation {reservation_id} lookup'):
            reservation = get_reservation_with_details(reservation_id)
        if not reservation:
            raise ReservationNotFoundError(reservation_id)
        return ReservationResult.ok(reservation)

    except ReservationError as e:
        return _failed(f'Lookup of reservation {reservation_id}', e)


def remove_reservation(reservation_id: int) -> ReservationResult:
    """
    Hard-delete a reservation.

    Args:
        reservation_id: Reservation to delete

    Returns:
        ReservationResult: data is {'reservation_id': id}
    """
    try:
        delete_reservation(reservation_id)
        return ReservationResult.ok({'reservation_id': reservation_id})

    except ReservationError as e:
        return _failed(f'Removal of reservation {reservation_id}', e)
