"""
Calendar projection.

Turns stored reservations (with joined organization, venue and equipment
names) into calendar events, filters and buckets them by view, and keeps
a projection current from reservation change notifications.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from models.reservation_events import subscribe, unsubscribe, EVENT_DELETE
from models.reservation_queries import list_reservations, store_operation
from models.reservation_state import STATUS_COLORS, STATUS_PENDING, get_status_label
from utils.datetime_helpers import parse_date, parse_time, combine_date_time
from utils.validators import format_phone

logger = logging.getLogger(__name__)

UNTITLED = 'Untitled Reservation'
NO_RESOURCE = 'No resource'

VIEWS = ('month', 'week', 'day', 'agenda')


@dataclass(frozen=True)
class CalendarEvent:
    """One reservation as the calendar shows it."""

    reservation_id: int
    title: str
    start: datetime
    end: datetime
    resource: str
    status_id: int
    status: str
    color: str
    background_color: str
    description: str = ''
    org_id: int = None
    org_code: str = ''
    org_name: str = ''
    venue_id: int = None
    equipment_ids: tuple = ()
    reserved_by: str = ''
    officer_in_charge: str = ''
    contact_no: str = ''
    search_text: str = field(default='', repr=False, compare=False)

    @property
    def category(self) -> str:
        return self.status.lower()

    @property
    def label(self) -> str:
        """Title with the organization code, e.g. 'Orientation (CSAO)'."""
        return f'{self.title} ({self.org_code})' if self.org_code else self.title

    def to_dict(self) -> dict:
        return {
            'id': self.reservation_id,
            'title': self.title,
            'label': self.label,
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
            'resource': self.resource,
            'description': self.description,
            'status': self.status,
            'status_id': self.status_id,
            'category': self.category,
            'color': self.color,
            'background_color': self.background_color,
            'org_id': self.org_id,
            'org_code': self.org_code,
            'org_name': self.org_name,
            'venue_id': self.venue_id,
            'equipment_ids': list(self.equipment_ids),
            'reserved_by': self.reserved_by,
            'officer_in_charge': self.officer_in_charge,
            'contact_no': self.contact_no,
            'all_day': False,
        }


# =============================================================================
# PROJECTION
# =============================================================================

def _resource_label(row: dict) -> str:
    if row.get('venue_name'):
        return row['venue_name']
    names = [item.get('equipment_name') for item in row.get('equipment') or [] if item.get('equipment_name')]
    if names:
        return ', '.join(names)
    return NO_RESOURCE


def project_event(row: dict) -> CalendarEvent | None:
    """
    Project one reservation row.

    Missing joins fall back to placeholder labels. A row whose date or
    times cannot be parsed is logged and skipped.

    Args:
        row: Reservation dict as returned by list_reservations

    Returns:
        CalendarEvent, or None if the row cannot be placed on the calendar
    """
    try:
        day = parse_date(row.get('activity_date'))
        start = parse_time(row.get('start_time'))
        end = parse_time(row.get('end_time'))
    except (TypeError, ValueError):
        day = None
    if day is None or start is None or end is None:
        logger.warning(f'Skipping reservation {row.get("reservation_id")}: unusable date/time')
        return None

    status_id = row.get('reservation_status_id') or STATUS_PENDING
    default_color, default_background = STATUS_COLORS.get(status_id, STATUS_COLORS[STATUS_PENDING])
    org_name = row.get('org_name') or ''
    org_code = row.get('org_code') or ''
    contact = format_phone(row.get('contact_no') or '')
    resource = _resource_label(row)
    title = (row.get('purpose') or '').strip() or UNTITLED

    description = (
        f'Reserved by: {row.get("reserved_by") or "Unknown"}\n'
        f'Contact: {contact or "N/A"}\n'
        f'Org: {org_name} ({org_code or "No Code"})'
    )
    search_text = ' '.join([
        title, description, resource, org_name, org_code,
        row.get('officer_in_charge') or '', row.get('reserved_by') or '',
    ]).lower()

    return CalendarEvent(
        reservation_id=row.get('reservation_id'),
        title=title,
        start=combine_date_time(day, start),
        end=combine_date_time(day, end),
        resource=resource,
        status_id=status_id,
        status=row.get('status') or get_status_label(status_id),
        color=row.get('status_color') or default_color,
        background_color=row.get('status_background') or default_background,
        description=description,
        org_id=row.get('org_id'),
        org_code=org_code,
        org_name=org_name,
        venue_id=row.get('venue_id'),
        equipment_ids=tuple(row.get('equipment_ids') or ()),
        reserved_by=row.get('reserved_by') or '',
        officer_in_charge=row.get('officer_in_charge') or '',
        contact_no=contact,
        search_text=search_text,
    )


def project_calendar(reservations: list) -> list:
    """
    Project reservations into calendar events, earliest first.

    Args:
        reservations: Reservation dicts with joined names

    Returns:
        list: CalendarEvent objects
    """
    events = [project_event(row) for row in reservations]
    return sorted(
        (event for event in events if event is not None),
        key=lambda e: (e.start, e.reservation_id or 0)
    )


def load_calendar(date_from: str = None, date_to: str = None) -> list:
    """
    Read reservations in a date window and project them.

    Raises:
        InfrastructureError: If the store is unavailable
    """
    with store_operation('calendar load'):
        reservations = list_reservations(date_from=date_from, date_to=date_to)
    return project_calendar(reservations)


# =============================================================================
# FILTERS AND VIEWS
# =============================================================================

def filter_events(
    events: list,
    search: str = None,
    org_ids: list = None,
    venue_ids: list = None,
    equipment_ids: list = None,
    status_ids: list = None
) -> list:
    """
    Filter calendar events. All given criteria must match.

    Args:
        events: CalendarEvent objects
        search: Case-insensitive text matched against title, description,
                resource, organization, officer and requester
        org_ids: Keep events of these organizations
        venue_ids: Keep events at these venues
        equipment_ids: Keep events using any of this equipment
        status_ids: Keep events in these statuses

    Returns:
        list: Matching events, order preserved
    """
    term = (search or '').strip().lower()
    equipment = set(equipment_ids or [])

    filtered = []
    for event in events:
        if term and term not in event.search_text:
            continue
        if org_ids and event.org_id not in org_ids:
            continue
        if venue_ids and event.venue_id not in venue_ids:
            continue
        if equipment and not equipment.intersection(event.equipment_ids):
            continue
        if status_ids and event.status_id not in status_ids:
            continue
        filtered.append(event)
    return filtered


def _week_start(moment: datetime) -> str:
    # Weeks start on Sunday
    day = moment.date()
    return (day - timedelta(days=(day.weekday() + 1) % 7)).isoformat()


def _bucket_key(event: CalendarEvent, view: str) -> str:
    if view == 'month':
        return event.start.strftime('%Y-%m')
    if view == 'week':
        return _week_start(event.start)
    return event.start.date().isoformat()


def bucket_events(events: list, view: str = 'month'):
    """
    Group events for a calendar view.

    Args:
        events: CalendarEvent objects
        view: 'month' (YYYY-MM keys), 'week' (keyed by the Sunday that
              starts the week), 'day' (YYYY-MM-DD keys) or 'agenda'

    Returns:
        dict of key -> events for month/week/day; for agenda a list of
        {'date': 'YYYY-MM-DD', 'events': [...]} in chronological order

    Raises:
        ValueError: Unknown view
    """
    if view not in VIEWS:
        raise ValueError(f'Unknown calendar view: {view}')

    ordered = sorted(events, key=lambda e: (e.start, e.reservation_id or 0))

    buckets = {}
    for event in ordered:
        buckets.setdefault(_bucket_key(event, view), []).append(event)

    if view == 'agenda':
        return [{'date': day, 'events': day_events} for day, day_events in buckets.items()]
    return buckets


# =============================================================================
# INCREMENTAL REFRESH
# =============================================================================

class CalendarProjection:
    """
    Calendar events kept current from change notifications.

    A change recomputes only the affected reservation's event.
    """

    def __init__(self, reservations: list = None):
        self._events = {}
        self._attached = False
        if reservations:
            self.load(reservations)

    def load(self, reservations: list) -> None:
        """Replace the projection with a full set of reservations."""
        self._events = {}
        for event in project_calendar(reservations):
            self._events[event.reservation_id] = event

    def apply_change(self, change) -> CalendarEvent | None:
        """
        Apply one ReservationChange.

        Returns:
            The new event for inserts/updates, None for deletes or rows
            that cannot be projected
        """
        reservation_id = change.reservation_id
        if change.event == EVENT_DELETE:
            self._events.pop(reservation_id, None)
            return None

        event = project_event(change.row)
        if event is None:
            self._events.pop(reservation_id, None)
        else:
            self._events[reservation_id] = event
        return event

    def get(self, reservation_id: int) -> CalendarEvent | None:
        return self._events.get(reservation_id)

    def events(self) -> list:
        return sorted(self._events.values(), key=lambda e: (e.start, e.reservation_id or 0))

    def attach(self) -> None:
        """
        Start following reservation changes.

        The HTTP routes build a fresh calendar per request and never
        attach. Attaching is for a long-lived owner in the same process,
        such as a worker that caches the calendar between requests: it
        loads the projection once, attaches it, and calls detach() on
        shutdown. Changes committed by other processes are not seen, so
        such an owner should reload periodically.
        """
        if not self._attached:
            subscribe(self.apply_change)
            self._attached = True

    def detach(self) -> None:
        if self._attached:
            unsubscribe(self.apply_change)
            self._attached = False

    def __len__(self):
        return len(self._events)
