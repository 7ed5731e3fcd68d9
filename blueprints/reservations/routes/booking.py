"""
Reservation booking routes: submit, edit, view, delete.
"""

from flask import request
from flask_login import login_required, current_user

from models.reservation import (
    submit_reservation, update_reservation, remove_reservation, get_reservation
)
from models.reservation_state import get_allowed_transitions
from utils.api_response import api_error, api_result
from utils.messages import MESSAGES


def register_routes(bp):
    """Register booking routes on the blueprint."""

    @bp.route('/reservations', methods=['POST'])
    @login_required
    def submit():
        """
        Submit a reservation request.

        A date range (start_date..end_date) creates one Pending reservation
        per weekday, or nothing if any day conflicts.

        Returns:
            201 with the created reservations; 400 validation, 409 conflict,
            503 when the store is unavailable
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return api_error(MESSAGES['json_required'], status=400)

        result = submit_reservation(data, actor=current_user)
        message = None
        if result.success:
            count = len(result.data)
            message = (MESSAGES['reservation_submitted'] if count == 1
                       else MESSAGES['reservation_submitted_multi'].format(count=count))
        return api_result(result, status=201, message=message)

    @bp.route('/reservations/<int:reservation_id>', methods=['GET'])
    @login_required
    def detail(reservation_id):
        """
        Get one reservation with organization, venue and equipment names.

        The data also lists the status actions open to the current user.
        """
        result = get_reservation(reservation_id)
        if result.success:
            result.data['allowed_actions'] = get_allowed_transitions(
                result.data['reservation_status_id'], current_user
            )
        return api_result(result)

    @bp.route('/reservations/<int:reservation_id>', methods=['PUT'])
    @login_required
    def edit(reservation_id):
        """
        Edit one day's reservation. Fields left out keep their values.

        Returns:
            200 with the updated reservation; 400, 404, 409 or 503 on failure
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return api_error(MESSAGES['json_required'], status=400)

        result = update_reservation(reservation_id, data, actor=current_user)
        return api_result(result, message=MESSAGES['reservation_updated'])

    @bp.route('/reservations/<int:reservation_id>', methods=['DELETE'])
    @login_required
    def delete(reservation_id):
        """Permanently delete a reservation."""
        result = remove_reservation(reservation_id)
        return api_result(result, message=MESSAGES['reservation_deleted'])
