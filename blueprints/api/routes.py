"""
API routes for reference data.
Lookups the reservation form needs, plus administrator management of
organizations, venues and equipment.
"""

import logging

from flask import Blueprint, current_app, request
from flask_login import login_required, current_user

from models.equipment import (
    get_all_equipment, get_equipment_by_id, create_equipment, update_equipment
)
from models.organization import (
    get_all_organizations, get_organization_by_id, create_organization, update_organization
)
from models.reservation_errors import ReservationError, ValidationError
from models.reservation_queries import store_operation
from models.reservation_state import get_reservation_states
from models.venue import (
    get_all_venues, get_venue_by_id, create_venue, update_venue, remove_venue
)
from utils.api_response import api_success, api_error, error_status
from utils.decorators import admin_required
from utils.messages import MESSAGES
from utils.validators import sanitize_input, validate_positive_integer

logger = logging.getLogger(__name__)

api_bp = Blueprint('api', __name__)

# Field layout per managed resource
RESOURCES = {
    'organization': {
        'name_field': 'org_name',
        'text_fields': ('org_code',),
        'count_fields': (),
        'has_active': False,
        'get': get_organization_by_id,
        'create': create_organization,
        'update': update_organization,
    },
    'venue': {
        'name_field': 'venue_name',
        'text_fields': ('description',),
        'count_fields': ('capacity',),
        'has_active': True,
        'get': get_venue_by_id,
        'create': create_venue,
        'update': update_venue,
    },
    'equipment': {
        'name_field': 'equipment_name',
        'text_fields': ('description',),
        'count_fields': ('quantity',),
        'has_active': True,
        'get': get_equipment_by_id,
        'create': create_equipment,
        'update': update_equipment,
    },
}

NAME_MAX_LENGTH = 100
TEXT_MAX_LENGTH = 500


# =============================================================================
# HELPERS
# =============================================================================

def _error_response(error: ReservationError) -> tuple:
    details = error.to_dict()
    return api_error(details.pop('message'), status=error_status(error), **details)


def _json_object():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def parse_resource_fields(kind: str, data: dict, partial: bool = False) -> dict:
    """
    Pick and validate the writable fields of a resource from a JSON body.

    Args:
        kind: 'organization', 'venue' or 'equipment'
        data: Request body
        partial: True for updates, where every field is optional

    Returns:
        dict: Column -> value, ready for the create/update function

    Raises:
        ValidationError: One entry per invalid field
    """
    layout = RESOURCES[kind]
    fields = {}
    errors = {}

    name_field = layout['name_field']
    if name_field in data or not partial:
        raw = data.get(name_field)
        name = sanitize_input(raw, max_length=NAME_MAX_LENGTH) if isinstance(raw, str) else ''
        if name:
            fields[name_field] = name
        else:
            errors[name_field] = MESSAGES['field_required']

    for key in layout['text_fields']:
        if key in data:
            raw = data[key]
            if raw is not None and not isinstance(raw, str):
                errors[key] = MESSAGES['text_expected']
            else:
                fields[key] = sanitize_input(raw, max_length=TEXT_MAX_LENGTH) or None

    for key in layout['count_fields']:
        if key in data and data[key] not in (None, ''):
            valid, number, error = validate_positive_integer(data[key], key)
            if valid:
                fields[key] = number
            else:
                errors[key] = error
        elif key in data and partial:
            fields[key] = None

    if partial and layout['has_active'] and 'active' in data:
        if not isinstance(data['active'], bool) and data['active'] not in (0, 1):
            errors['active'] = MESSAGES['boolean_expected']
        else:
            fields['active'] = 1 if data['active'] else 0

    if errors:
        raise ValidationError(errors)
    return fields


def _create_resource(kind: str) -> tuple:
    layout = RESOURCES[kind]
    data = _json_object()
    if data is None:
        return api_error(MESSAGES['json_required'], status=400)

    try:
        fields = parse_resource_fields(kind, data)
        with store_operation(f'{kind} creation'):
            resource_id = layout['create'](**fields)
            created = layout['get'](resource_id)
    except ReservationError as e:
        return _error_response(e)

    logger.info(f'{kind.capitalize()} {resource_id} created by {current_user.username}')
    return api_success(data=created, message=MESSAGES[f'{kind}_created'], status=201)


def _update_resource(kind: str, resource_id: int) -> tuple:
    layout = RESOURCES[kind]
    data = _json_object()
    if data is None:
        return api_error(MESSAGES['json_required'], status=400)

    try:
        with store_operation(f'{kind} {resource_id} lookup'):
            existing = layout['get'](resource_id)
        if not existing:
            return api_error(MESSAGES[f'{kind}_not_found'], status=404)

        fields = parse_resource_fields(kind, data, partial=True)
        if not fields:
            raise ValidationError({kind: MESSAGES['nothing_to_update']})

        with store_operation(f'{kind} {resource_id} update'):
            layout['update'](resource_id, **fields)
            updated = layout['get'](resource_id)
    except ReservationError as e:
        return _error_response(e)

    logger.info(
        f'{kind.capitalize()} {resource_id} updated by {current_user.username}: '
        f'{", ".join(sorted(fields))}'
    )
    return api_success(data=updated, message=MESSAGES[f'{kind}_updated'])


def _lookup(description: str, fetch) -> tuple:
    try:
        with store_operation(description):
            rows = fetch()
    except ReservationError as e:
        return _error_response(e)
    return api_success(data=rows)


def _include_inactive() -> bool:
    """?all=1 lists inactive rows too, for administrators only."""
    return request.args.get('all') == '1' and current_user.is_administrator


# =============================================================================
# LOOKUPS
# =============================================================================

@api_bp.route('/health')
def health_check():
    """
    Health check endpoint (no authentication required).

    Returns:
        JSON with status and version
    """
    return api_success(data={
        'status': 'ok',
        'version': current_app.config.get('APP_VERSION', '1.0.0'),
        'app': current_app.config.get('APP_NAME', 'Venue Reservations'),
    })


@api_bp.route('/organizations')
@login_required
def api_organizations():
    """All organizations."""
    return _lookup('organization lookup', get_all_organizations)


@api_bp.route('/venues')
@login_required
def api_venues():
    """Active venues."""
    active_only = not _include_inactive()
    return _lookup('venue lookup', lambda: get_all_venues(active_only=active_only))


@api_bp.route('/equipment')
@login_required
def api_equipment():
    """Active equipment."""
    active_only = not _include_inactive()
    return _lookup('equipment lookup', lambda: get_all_equipment(active_only=active_only))


@api_bp.route('/statuses')
@login_required
def api_statuses():
    """Reservation statuses with their calendar colors."""
    return _lookup('status lookup', get_reservation_states)


# =============================================================================
# MANAGEMENT (administrators)
# =============================================================================

@api_bp.route('/organizations', methods=['POST'])
@login_required
@admin_required
def api_create_organization():
    """
    Create an organization.

    Body:
        {"org_name": "...", "org_code": "..."}

    Returns:
        201 with the new organization; 400 on invalid fields
    """
    return _create_resource('organization')


@api_bp.route('/organizations/<int:org_id>', methods=['PUT'])
@login_required
@admin_required
def api_update_organization(org_id):
    """Update an organization's name or code."""
    return _update_resource('organization', org_id)


@api_bp.route('/venues', methods=['POST'])
@login_required
@admin_required
def api_create_venue():
    """
    Create a venue.

    Body:
        {"venue_name": "...", "description": "...", "capacity": 300}

    Returns:
        201 with the new venue; 400 on invalid fields
    """
    return _create_resource('venue')


@api_bp.route('/venues/<int:venue_id>', methods=['PUT'])
@login_required
@admin_required
def api_update_venue(venue_id):
    """
    Update a venue. Fields left out keep their values.

    Setting "active" to false takes the venue off the lookup list without
    touching its reservations; DELETE removes it and cancels them.
    """
    return _update_resource('venue', venue_id)


@api_bp.route('/equipment', methods=['POST'])
@login_required
@admin_required
def api_create_equipment():
    """
    Create an equipment item.

    Body:
        {"equipment_name": "...", "description": "...", "quantity": 2}
    """
    return _create_resource('equipment')


@api_bp.route('/equipment/<int:equipment_id>', methods=['PUT'])
@login_required
@admin_required
def api_update_equipment(equipment_id):
    return _update_resource('equipment', equipment_id)


@api_bp.route('/venues/<int:venue_id>', methods=['DELETE'])
@login_required
@admin_required
def api_delete_venue(venue_id):
    """
    Remove a venue and cancel its open reservations.

    Args:
        venue_id: Venue ID

    Returns:
        JSON with the number of reservations cancelled
    """
    try:
        cancelled = remove_venue(venue_id)
    except ValueError:
        return api_error(MESSAGES['venue_not_found'], status=404)
    except ReservationError as e:
        return _error_response(e)

    return api_success(
        data={'venue_id': venue_id, 'cancelled': cancelled},
        message=MESSAGES['venue_removed'].format(count=cancelled)
    )
