"""
Reservation status workflow.

Pending is the only live decision point: an administrator approves,
rejects or cancels it, and the reservation stays in that state for good.
Leaving Pending stamps the decision time. Persisting the transition is
the caller's job (models.reservation.change_reservation_status).
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from database import get_db
from models.reservation_errors import InvalidTransitionError, UnauthorizedTransitionError

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Ids match the reservation_status seed rows
STATUS_RESERVED = 1
STATUS_REJECTED = 2
STATUS_PENDING = 3
STATUS_CANCELLED = 4

STATUS_LABELS = {
    STATUS_RESERVED: 'Reserved',
    STATUS_REJECTED: 'Rejected',
    STATUS_PENDING: 'Pending',
    STATUS_CANCELLED: 'Cancelled',
}

# Border / background colors for the calendar
STATUS_COLORS = {
    STATUS_RESERVED: ('#3b82f6', '#edf5ff'),
    STATUS_REJECTED: ('#ef4444', '#fef1f1'),
    STATUS_PENDING: ('#eab308', '#fef9ee'),
    STATUS_CANCELLED: ('#9ca3af', '#f8f8f8'),
}

# Statuses that no longer hold their slot
RELEASING_STATUSES = (STATUS_REJECTED, STATUS_CANCELLED)

ACTION_TARGETS = {
    'approve': STATUS_RESERVED,
    'reject': STATUS_REJECTED,
    'cancel': STATUS_CANCELLED,
}

VALID_TRANSITIONS = {
    STATUS_PENDING: {STATUS_RESERVED, STATUS_REJECTED, STATUS_CANCELLED},
    STATUS_RESERVED: set(),
    STATUS_REJECTED: set(),
    STATUS_CANCELLED: set(),
}


@dataclass(frozen=True)
class StatusTransition:
    """A decided status change, ready to persist and report."""

    reservation_id: int
    from_status_id: int
    to_status_id: int
    action: str
    decision_ts: str
    changed_by: str = None

    @property
    def status(self) -> str:
        return get_status_label(self.to_status_id)

    def to_fields(self) -> dict:
        """Column updates for the reservations table."""
        return {
            'reservation_status_id': self.to_status_id,
            'decision_ts': self.decision_ts,
        }

    def to_dict(self) -> dict:
        return {
            'reservation_id': self.reservation_id,
            'from_status': get_status_label(self.from_status_id),
            'status': self.status,
            'reservation_status_id': self.to_status_id,
            'action': self.action,
            'decision_ts': self.decision_ts,
            'changed_by': self.changed_by,
        }


# =============================================================================
# LABELS
# =============================================================================

def get_status_label(status_id: int) -> str:
    """Label for a status id, 'Unknown' if unrecognised."""
    return STATUS_LABELS.get(status_id, 'Unknown')


def get_status_id(label: str) -> int | None:
    """Status id for a label (case-insensitive), None if unrecognised."""
    if not label:
        return None
    for status_id, name in STATUS_LABELS.items():
        if name.lower() == str(label).strip().lower():
            return status_id
    return None


def get_reservation_states() -> list:
    """
    Get all reservation statuses as stored.

    Returns:
        List of status dicts ordered by id
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM reservation_status ORDER BY reservation_status_id')
    return [dict(row) for row in cursor.fetchall()]


# =============================================================================
# TRANSITIONS
# =============================================================================

def is_administrator(actor) -> bool:
    return bool(actor is not None and getattr(actor, 'is_administrator', False))


def get_allowed_transitions(current_status_id: int, actor=None) -> list:
    """
    Actions the actor may take from a status.

    Args:
        current_status_id: Current status id
        actor: Object with an is_administrator attribute, or None

    Returns:
        list: Action names, e.g. ['approve', 'reject', 'cancel']
    """
    if not is_administrator(actor):
        return []
    targets = VALID_TRANSITIONS.get(current_status_id, set())
    return [action for action, target in ACTION_TARGETS.items() if target in targets]


def validate_state_transition(current_status_id: int, action: str, actor=None) -> int:
    """
    Check an action against the workflow and the actor's capability.

    Args:
        current_status_id: Current status id
        action: 'approve', 'reject' or 'cancel'
        actor: Object with an is_administrator attribute, or None

    Returns:
        int: Target status id

    Raises:
        InvalidTransitionError: Unknown action or status already decided
        UnauthorizedTransitionError: Actor is not an administrator
    """
    current_label = get_status_label(current_status_id)
    normalized = action.strip().lower() if isinstance(action, str) else ''

    target = ACTION_TARGETS.get(normalized)
    if target is None:
        raise InvalidTransitionError(
            current_label, action,
            message=f'Unknown action "{action}"; expected one of: {", ".join(ACTION_TARGETS)}'
        )

    if target not in VALID_TRANSITIONS.get(current_status_id, set()):
        raise InvalidTransitionError(current_label, normalized)

    if not is_administrator(actor):
        raise UnauthorizedTransitionError(current_label, normalized)

    return target


def plan_transition(reservation: dict, action: str, actor, now: datetime | str) -> StatusTransition:
    """
    Decide the transition for a stored reservation.

    Args:
        reservation: Reservation dict with reservation_id and reservation_status_id
        action: 'approve', 'reject' or 'cancel'
        actor: Object with is_administrator (and optionally username)
        now: Decision time

    Returns:
        StatusTransition

    Raises:
        InvalidTransitionError, UnauthorizedTransitionError
    """
    current = reservation['reservation_status_id']
    target = validate_state_transition(current, action, actor)
    decision_ts = now.isoformat() if isinstance(now, datetime) else str(now)

    transition = StatusTransition(
        reservation_id=reservation['reservation_id'],
        from_status_id=current,
        to_status_id=target,
        action=str(action).strip().lower(),
        decision_ts=decision_ts,
        changed_by=getattr(actor, 'username', None),
    )
    logger.info(
        'Reservation %s: %s -> %s by %s',
        transition.reservation_id, get_status_label(current),
        transition.status, transition.changed_by or 'unknown'
    )
    return transition
