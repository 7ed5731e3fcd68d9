"""
Reservations blueprint.
Assembles the reservation route modules:
- routes/booking.py - Submit, edit, view and delete
- routes/decisions.py - Approve / reject / cancel and the pending queue
- routes/calendar.py - Calendar events by view
"""

from flask import Blueprint

reservations_bp = Blueprint('reservations', __name__)

from blueprints.reservations.routes import booking, decisions, calendar

booking.register_routes(reservations_bp)
decisions.register_routes(reservations_bp)
calendar.register_routes(reservations_bp)
