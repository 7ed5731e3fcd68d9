"""
Calendar routes: reservations projected as calendar events.
"""

from flask import request
from flask_login import login_required

from models.calendar import VIEWS, load_calendar, filter_events, bucket_events
from models.reservation_errors import ReservationError
from models.reservation_state import get_status_id
from utils.api_response import api_success, api_error, error_status
from utils.messages import MESSAGES
from utils.validators import validate_date_format


def _ids(name: str) -> list:
    """Integer ids from repeated or comma-separated query params."""
    ids = []
    for raw in request.args.getlist(name):
        for part in raw.split(','):
            if part.strip().isdigit():
                ids.append(int(part))
    return ids


def register_routes(bp):
    """Register calendar routes on the blueprint."""

    @bp.route('/reservations/calendar')
    @login_required
    def calendar():
        """
        Calendar events for a date window.

        Query params:
            date_from, date_to: YYYY-MM-DD bounds (optional)
            view: month (default), week, day or agenda
            search: Free text
            org_id, venue_id, equipment_id, status_id: Id filters
            status: Status names, e.g. status=pending

        Returns:
            JSON with the flat event list and the view's buckets
        """
        view = request.args.get('view', 'month')
        if view not in VIEWS:
            return api_error(MESSAGES['invalid_view'], status=400)

        date_from = request.args.get('date_from') or None
        date_to = request.args.get('date_to') or None
        if any(value and not validate_date_format(value) for value in (date_from, date_to)):
            return api_error(MESSAGES['invalid_date'], status=400)

        status_ids = _ids('status_id')
        for name in request.args.getlist('status'):
            status_id = get_status_id(name)
            if status_id:
                status_ids.append(status_id)

        try:
            events = load_calendar(date_from=date_from, date_to=date_to)
        except ReservationError as e:
            details = e.to_dict()
            return api_error(details.pop('message'), status=error_status(e), **details)

        events = filter_events(
            events,
            search=request.args.get('search'),
            org_ids=_ids('org_id'),
            venue_ids=_ids('venue_id'),
            equipment_ids=_ids('equipment_id'),
            status_ids=status_ids,
        )

        buckets = bucket_events(events, view)
        if view == 'agenda':
            grouped = [
                {'date': group['date'], 'events': [e.to_dict() for e in group['events']]}
                for group in buckets
            ]
        else:
            grouped = {key: [e.to_dict() for e in items] for key, items in buckets.items()}

        return api_success(data={
            'view': view,
            'events': [event.to_dict() for event in events],
            'buckets': grouped,
        }, count=len(events))
