"""
Reservation route modules, split by concern.
"""
