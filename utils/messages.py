"""
Centralized UI messages.
All user-facing response text in one place for consistency.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Welcome {name}',
    'logout_success': 'Signed out',
    'reservation_submitted': 'Reservation submitted for approval',
    'reservation_submitted_multi': '{count} reservations submitted for approval',
    'reservation_updated': 'Reservation updated',
    'reservation_deleted': 'Reservation deleted',
    'reservation_approve': 'Reservation approved',
    'reservation_reject': 'Reservation rejected',
    'reservation_cancel': 'Reservation cancelled',
    'venue_removed': 'Venue removed; {count} reservation(s) cancelled',
    'organization_created': 'Organization created',
    'organization_updated': 'Organization updated',
    'venue_created': 'Venue created',
    'venue_updated': 'Venue updated',
    'equipment_created': 'Equipment created',
    'equipment_updated': 'Equipment updated',

    # Error messages
    'invalid_credentials': 'Invalid username or password',
    'account_disabled': 'Your account has been disabled. Contact the administrator.',
    'login_required': 'Please sign in to continue',
    'permission_denied': 'You do not have permission for this action',
    'not_found': 'Resource not found',
    'venue_not_found': 'Venue not found',
    'organization_not_found': 'Organization not found',
    'equipment_not_found': 'Equipment not found',
    'server_error': 'Unexpected server error',
    'json_required': 'A JSON body is required',
    'action_required': 'An action is required (approve, reject or cancel)',
    'invalid_view': 'View must be one of: month, week, day, agenda',
    'invalid_date': 'Dates must use the YYYY-MM-DD format',
    'invalid_email': 'Invalid email address',

    # Validation messages
    'field_required': 'This field is required',
    'text_expected': 'Must be text',
    'boolean_expected': 'Must be true or false',
    'nothing_to_update': 'No fields to update',
}
