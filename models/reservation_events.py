"""
Reservation change notifications.

Writes in models.reservation_crud publish a ReservationChange after they
commit. Listeners (the calendar projection, for one) subscribe to keep
derived views current without re-reading the whole table.
"""

import logging
import threading
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

EVENT_INSERT = 'insert'
EVENT_UPDATE = 'update'
EVENT_DELETE = 'delete'

# Guards _listeners; requests run on several worker threads
_listeners = []
_lock = threading.Lock()


@dataclass(frozen=True)
class ReservationChange:
    """One committed change to a reservation row."""

    event: str
    row: dict = field(default_factory=dict)
    table: str = 'reservation'

    @property
    def reservation_id(self):
        return self.row.get('reservation_id')


def subscribe(listener) -> callable:
    """
    Register a listener called with each ReservationChange.

    Args:
        listener: Callable taking a ReservationChange

    Returns:
        Callable that removes the listener
    """
    with _lock:
        if listener not in _listeners:
            _listeners.append(listener)

    def _unsubscribe():
        unsubscribe(listener)

    return _unsubscribe


def unsubscribe(listener) -> None:
    with _lock:
        if listener in _listeners:
            _listeners.remove(listener)


def publish(event: str, row: dict) -> ReservationChange:
    """
    Deliver a change to every listener.

    The write has already committed, so a failing listener is logged and
    the remaining listeners still run.

    Args:
        event: 'insert', 'update' or 'delete'
        row: Reservation row (with joined names for insert/update)

    Returns:
        ReservationChange that was delivered
    """
    change = ReservationChange(event=event, row=dict(row))
    with _lock:
        listeners = list(_listeners)
    for listener in listeners:
        try:
            listener(change)
        except Exception as e:
            logger.error(
                f'Reservation change listener failed for {event} '
                f'#{change.reservation_id}: {e}', exc_info=True
            )
    return change
