"""
Reservation error taxonomy.

Every failure the reservation core can report is one of these classes.
The public operations in models.reservation catch them and return a
ReservationResult, so callers branch on the error type instead of
parsing messages.
"""


class ReservationError(Exception):
    """Base class for reservation failures."""

    code = 'reservation_error'
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Serialize for JSON responses."""
        return {
            'code': self.code,
            'message': self.message,
            'retryable': self.retryable,
        }


class ValidationError(ReservationError):
    """One or more fields are invalid. Carries a field -> message map."""

    code = 'validation_error'

    def __init__(self, errors: dict, message: str = 'Please correct the highlighted fields'):
        super().__init__(message)
        self.errors = dict(errors)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['errors'] = self.errors
        return data


class EmptyExpansionError(ReservationError):
    """A date range contained no bookable (weekday) dates."""

    code = 'empty_expansion'

    def __init__(self, start_date, end_date):
        super().__init__(
            f'No bookable weekdays between {start_date} and {end_date}; '
            'weekends cannot be reserved'
        )
        self.start_date = start_date
        self.end_date = end_date

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['start_date'] = str(self.start_date)
        data['end_date'] = str(self.end_date)
        return data


class ConflictError(ReservationError):
    """The requested slot overlaps an existing live reservation."""

    code = 'conflict'

    def __init__(
        self,
        resource_type: str,
        resource_id: int,
        activity_date,
        conflicting_reservation_id: int,
        conflicting_org_id: int = None,
        conflicting_org_name: str = None,
        start_time: str = None,
        end_time: str = None
    ):
        owner = conflicting_org_name or (
            f'organization {conflicting_org_id}' if conflicting_org_id else 'another organization'
        )
        window = f' {start_time}-{end_time}' if start_time and end_time else ''
        super().__init__(
            f'{resource_type.capitalize()} {resource_id} is already booked on '
            f'{activity_date}{window} by {owner} (reservation {conflicting_reservation_id})'
        )
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.activity_date = activity_date
        self.conflicting_reservation_id = conflicting_reservation_id
        self.conflicting_org_id = conflicting_org_id
        self.conflicting_org_name = conflicting_org_name
        self.start_time = start_time
        self.end_time = end_time

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'resource_type': self.resource_type,
            'resource_id': self.resource_id,
            'activity_date': str(self.activity_date),
            'conflicting_reservation_id': self.conflicting_reservation_id,
            'conflicting_org_id': self.conflicting_org_id,
            'conflicting_org_name': self.conflicting_org_name,
        })
        return data


class InvalidTransitionError(ReservationError):
    """A status change that the workflow does not allow."""

    code = 'invalid_transition'

    def __init__(self, current_status: str, action: str, message: str = None):
        super().__init__(
            message or f'Cannot {action} a reservation that is {current_status}'
        )
        self.current_status = current_status
        self.action = action

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['current_status'] = self.current_status
        data['action'] = self.action
        return data


class UnauthorizedTransitionError(InvalidTransitionError):
    """The actor lacks administrative capability for the transition."""

    code = 'unauthorized_transition'

    def __init__(self, current_status: str, action: str):
        super().__init__(
            current_status, action,
            message=f'Only administrators can {action} reservations'
        )


class ReservationNotFoundError(ReservationError):
    """No reservation with the given id."""

    code = 'not_found'

    def __init__(self, reservation_id: int):
        super().__init__(f'Reservation {reservation_id} not found')
        self.reservation_id = reservation_id


class InfrastructureError(ReservationError):
    """The data store could not be reached or timed out. Safe to retry."""

    code = 'infrastructure_error'
    retryable = True

    def __init__(self, message: str = 'The reservation service is temporarily unavailable'):
        super().__init__(message)
