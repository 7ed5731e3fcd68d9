"""
Reservation request (draft) types.

A ReservationRequest is what a requester submits: possibly a date range,
one clock window, and the resources to book. It is never stored as-is;
models.reservation_multiday turns it into one DailyReservation per
bookable day, and those are what get persisted.
"""

from dataclasses import dataclass, field, replace
from datetime import date, time
from typing import Optional

from utils.datetime_helpers import parse_date, parse_time, format_time
from utils.validators import validate_positive_integer, validate_integer_list

RESOURCE_VENUE = 'venue'
RESOURCE_EQUIPMENT = 'equipment'


@dataclass
class ReservationRequest:
    """A draft booking as entered by the requester."""

    purpose: str = ''
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    org_id: Optional[int] = None
    venue_id: Optional[int] = None
    equipment_ids: list = field(default_factory=list)
    reserved_by: str = ''
    officer_in_charge: str = ''
    contact_no: str = ''
    # Fields whose raw input could not be parsed, field -> message
    format_errors: dict = field(default_factory=dict, repr=False, compare=False)

    @property
    def effective_end_date(self) -> Optional[date]:
        """End date, defaulting to the start date."""
        return self.end_date or self.start_date

    @property
    def is_multi_day(self) -> bool:
        end = self.effective_end_date
        return self.start_date is not None and end is not None and end != self.start_date

    def copy(self, **changes) -> 'ReservationRequest':
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict) -> 'ReservationRequest':
        """
        Build a request from submitted form/JSON data.

        Accepts the calendar form's field names: 'activity_date' is read as
        the start date and a single 'equipment_id' as a one-item list.
        Unparseable values are left empty and reported in format_errors.

        Args:
            data: Raw submitted fields

        Returns:
            ReservationRequest
        """
        data = data or {}
        format_errors = {}

        def _date(key, *aliases):
            raw = data.get(key)
            for alias in aliases:
                if raw in (None, ''):
                    raw = data.get(alias)
            try:
                return parse_date(raw)
            except (TypeError, ValueError):
                format_errors[key] = 'Enter a valid date (YYYY-MM-DD)'
                return None

        def _time(key):
            try:
                return parse_time(data.get(key))
            except (TypeError, ValueError):
                format_errors[key] = 'Enter a valid time (HH:MM)'
                return None

        def _id(key):
            raw = data.get(key)
            if raw in (None, ''):
                return None
            valid, value, _ = validate_positive_integer(raw, key)
            if not valid:
                format_errors[key] = 'Select a valid option'
                return None
            return value

        raw_equipment = data.get('equipment_ids')
        if raw_equipment in (None, '', []) and data.get('equipment_id') not in (None, ''):
            raw_equipment = [data.get('equipment_id')]
        valid, equipment_ids, _ = validate_integer_list(raw_equipment or [], 'equipment_ids')
        if not valid:
            format_errors['equipment_ids'] = 'Select valid equipment'
            equipment_ids = []

        return cls(
            purpose=str(data.get('purpose') or ''),
            start_date=_date('start_date', 'activity_date'),
            end_date=_date('end_date'),
            start_time=_time('start_time'),
            end_time=_time('end_time'),
            org_id=_id('org_id'),
            venue_id=_id('venue_id'),
            equipment_ids=equipment_ids,
            reserved_by=str(data.get('reserved_by') or ''),
            officer_in_charge=str(data.get('officer_in_charge') or ''),
            contact_no=str(data.get('contact_no') or ''),
            format_errors=format_errors,
        )


@dataclass(frozen=True)
class DailyReservation:
    """One calendar day of a request, ready for conflict checks and insert."""

    purpose: str
    activity_date: date
    start_time: time
    end_time: time
    org_id: int
    venue_id: Optional[int]
    equipment_ids: tuple
    reserved_by: str
    officer_in_charge: str
    contact_no: str
    is_first_day: bool = True
    multi_day_index: int = 0
    multi_day_total: int = 1

    @property
    def label(self) -> str:
        """Purpose as stored, tagged with the day's position in a range."""
        if self.multi_day_total > 1:
            return f'{self.purpose} [Multi-day {self.multi_day_index + 1} of {self.multi_day_total}]'
        return self.purpose

    @property
    def resources(self) -> list:
        """(resource_type, resource_id) pairs this day books."""
        pairs = []
        if self.venue_id:
            pairs.append((RESOURCE_VENUE, self.venue_id))
        pairs.extend((RESOURCE_EQUIPMENT, equipment_id) for equipment_id in self.equipment_ids)
        return pairs

    def to_row(self) -> dict:
        """Column values for the reservations table."""
        return {
            'purpose': self.label,
            'activity_date': self.activity_date.isoformat(),
            'start_time': format_time(self.start_time),
            'end_time': format_time(self.end_time),
            'org_id': self.org_id,
            'venue_id': self.venue_id,
            'equipment_ids': list(self.equipment_ids),
            'reserved_by': self.reserved_by,
            'officer_in_charge': self.officer_in_charge,
            'contact_no': self.contact_no,
        }

    def multi_day_info(self) -> dict:
        return {
            'is_first_day': self.is_first_day,
            'multi_day_index': self.multi_day_index,
            'multi_day_total': self.multi_day_total,
        }
