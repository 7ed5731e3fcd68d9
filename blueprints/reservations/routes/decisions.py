"""
Reservation decision routes: status changes and the pending queue.
"""

from flask import request
from flask_login import login_required, current_user

from models.reservation import change_reservation_status
from models.reservation_errors import ReservationError
from models.reservation_queries import list_pending_reservations, store_operation
from utils.api_response import api_success, api_error, api_result, error_status
from utils.decorators import admin_required
from utils.messages import MESSAGES


def register_routes(bp):
    """Register decision routes on the blueprint."""

    @bp.route('/reservations/<int:reservation_id>/status', methods=['POST'])
    @login_required
    def change_status(reservation_id):
        """
        Approve, reject or cancel a Pending reservation.

        Body:
            {"action": "approve" | "reject" | "cancel"}

        Returns:
            200 with the updated reservation; 403 for non-administrators,
            409 when the reservation is already decided
        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return api_error(MESSAGES['json_required'], status=400)

        action = data.get('action')
        action = action.strip().lower() if isinstance(action, str) else ''
        if not action:
            return api_error(MESSAGES['action_required'], status=400)

        result = change_reservation_status(reservation_id, action, actor=current_user)
        return api_result(result, message=MESSAGES.get(f'reservation_{action}'))

    @bp.route('/reservations/pending')
    @login_required
    @admin_required
    def pending():
        """Pending reservations, oldest submission first."""
        try:
            with store_operation('pending queue'):
                reservations = list_pending_reservations()
        except ReservationError as e:
            details = e.to_dict()
            return api_error(details.pop('message'), status=error_status(e), **details)
        return api_success(data=reservations, count=len(reservations))
