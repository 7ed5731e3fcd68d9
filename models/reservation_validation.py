"""
Reservation request validation.

Checks a draft against the field, time-window and advance-notice rules.
Every rule runs; errors accumulate into a field -> message map so the
form can show all problems at once. Pure: no database access.
"""

from datetime import date, time

from models.reservation_request import ReservationRequest
from utils.datetime_helpers import (
    BUSINESS_HOURS_START, BUSINESS_HOURS_END,
    within_business_hours, earliest_bookable_date, format_time
)
from utils.validators import (
    normalize_phone, validate_phone, validate_contact_number, sanitize_input
)

REQUIRED_MESSAGE = 'This field is required'

TEXT_FIELD_LIMITS = {
    'purpose': 500,
    'reserved_by': 200,
    'officer_in_charge': 200,
}


def validate_reservation_request(
    request: ReservationRequest,
    today: date,
    *,
    min_advance_days: int = 2,
    business_hours_start: time = BUSINESS_HOURS_START,
    business_hours_end: time = BUSINESS_HOURS_END,
    enforce_advance_notice: bool = True
) -> tuple:
    """
    Validate a reservation request.

    Args:
        request: Draft to validate
        today: Current date in the office's timezone
        min_advance_days: Days of notice required (today + n is the first bookable day)
        business_hours_start: Opening time (inclusive)
        business_hours_end: Closing time (inclusive)
        enforce_advance_notice: False when editing a reservation whose date is unchanged

    Returns:
        tuple: (normalized_request or None, errors dict). errors is empty on success.
    """
    errors = dict(request.format_errors)
    hours_label = f'{format_time(business_hours_start)} and {format_time(business_hours_end)}'

    # 1. Purpose
    if 'purpose' not in errors and not request.purpose.strip():
        errors['purpose'] = REQUIRED_MESSAGE

    # 2. Start date and advance notice
    if 'start_date' not in errors:
        if request.start_date is None:
            errors['start_date'] = REQUIRED_MESSAGE
        elif enforce_advance_notice:
            earliest = earliest_bookable_date(today, min_advance_days)
            if request.start_date < earliest:
                errors['start_date'] = (
                    f'Reservations must be made at least {min_advance_days} days '
                    f'in advance (earliest {earliest.isoformat()})'
                )

    # 3. End date
    if 'end_date' not in errors and request.end_date is not None and request.start_date is not None:
        if request.end_date < request.start_date:
            errors['end_date'] = 'End date cannot be before the start date'

    # 4. Start time
    start_time_ok = False
    if 'start_time' not in errors:
        if request.start_time is None:
            errors['start_time'] = REQUIRED_MESSAGE
        elif not within_business_hours(request.start_time, business_hours_start, business_hours_end):
            errors['start_time'] = f'Start time must be between {hours_label}'
        else:
            start_time_ok = True

    # 5. End time (compared to the start only when the start is usable)
    if 'end_time' not in errors:
        if request.end_time is None:
            errors['end_time'] = REQUIRED_MESSAGE
        elif not within_business_hours(request.end_time, business_hours_start, business_hours_end):
            errors['end_time'] = f'End time must be between {hours_label}'
        elif start_time_ok and request.end_time <= request.start_time:
            errors['end_time'] = 'End time must be after the start time'

    # 6. Something to reserve
    if request.venue_id is None and not request.equipment_ids and 'venue_id' not in errors:
        errors['venue_equipment'] = 'Either venue or equipment must be selected'

    # 7. Organization
    if 'org_id' not in errors and request.org_id is None:
        errors['org_id'] = REQUIRED_MESSAGE

    # 8. People
    if not request.reserved_by.strip():
        errors['reserved_by'] = REQUIRED_MESSAGE
    if not request.officer_in_charge.strip():
        errors['officer_in_charge'] = REQUIRED_MESSAGE

    # 9. Contact number: the +639 mobile form and the generic pattern must both hold
    normalized_contact = normalize_phone(request.contact_no.strip())
    if not request.contact_no.strip():
        errors['contact_no'] = REQUIRED_MESSAGE
    elif not (validate_phone(normalized_contact) and validate_contact_number(normalized_contact)):
        errors['contact_no'] = (
            'Enter a valid Philippine mobile number (e.g. 09123456789 or +639123456789)'
        )

    if errors:
        return None, errors

    normalized = request.copy(
        purpose=sanitize_input(request.purpose, TEXT_FIELD_LIMITS['purpose']),
        end_date=request.effective_end_date,
        reserved_by=sanitize_input(request.reserved_by, TEXT_FIELD_LIMITS['reserved_by']),
        officer_in_charge=sanitize_input(
            request.officer_in_charge, TEXT_FIELD_LIMITS['officer_in_charge']
        ),
        contact_no=normalized_contact,
        format_errors={},
    )
    return normalized, {}
