"""
Multi-day reservation expansion.
Turns a date-range request into one DailyReservation per bookable day.
"""

from datetime import date

from models.reservation_request import ReservationRequest, DailyReservation
from utils.datetime_helpers import expand_date_range


def build_daily_reservation(
    request: ReservationRequest,
    activity_date: date,
    index: int = 0,
    total: int = 1
) -> DailyReservation:
    """
    Build the reservation for one day of a validated request.

    Args:
        request: Validated request
        activity_date: The day being booked
        index: 0-based position within the range
        total: Number of days in the range

    Returns:
        DailyReservation
    """
    return DailyReservation(
        purpose=request.purpose,
        activity_date=activity_date,
        start_time=request.start_time,
        end_time=request.end_time,
        org_id=request.org_id,
        venue_id=request.venue_id,
        equipment_ids=tuple(request.equipment_ids),
        reserved_by=request.reserved_by,
        officer_in_charge=request.officer_in_charge,
        contact_no=request.contact_no,
        is_first_day=index == 0,
        multi_day_index=index,
        multi_day_total=total,
    )


def expand_reservation_request(request: ReservationRequest) -> list:
    """
    Expand a validated request over its date range.

    Weekends are dropped; every day reuses the request's clock window.
    An empty list means the range held no weekday, which the caller
    reports as EmptyExpansionError.

    Args:
        request: Validated request with start_date (end_date optional)

    Returns:
        list: DailyReservation per bookable day, ascending
    """
    days = expand_date_range(request.start_date, request.effective_end_date)
    total = len(days)
    return [
        build_daily_reservation(request, day, index, total)
        for index, day in enumerate(days)
    ]
