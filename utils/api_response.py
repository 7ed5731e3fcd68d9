"""
Standardized API response helpers.

Provides consistent JSON response format across all API endpoints:

    Success:  {"success": true, "data": {...}, "message": "..."}
    Error:    {"success": false, "error": "message", "code": "...", ...}

Usage:
    from utils.api_response import api_success, api_error, api_result

    return api_success(data={'id': 1}, message='Reservation submitted')
    return api_error('Data required', status=400)
    return api_result(submit_reservation(payload), status=201)
"""

from flask import jsonify
from typing import Any

from models.reservation_errors import (
    ConflictError, EmptyExpansionError, InfrastructureError, InvalidTransitionError,
    ReservationNotFoundError, UnauthorizedTransitionError, ValidationError
)

# Most specific class first
ERROR_STATUS = (
    (ValidationError, 400),
    (EmptyExpansionError, 400),
    (ConflictError, 409),
    (UnauthorizedTransitionError, 403),
    (InvalidTransitionError, 409),
    (ReservationNotFoundError, 404),
    (InfrastructureError, 503),
)


def api_success(
    data: Any = None,
    message: str | None = None,
    warning: str | None = None,
    status: int = 200,
    **extra_fields: Any
) -> tuple:
    """
    Build a standardized success JSON response.

    Args:
        data: Optional payload to include as 'data' key.
        message: Optional success message.
        warning: Optional warning message.
        status: HTTP status code (default 200).
        **extra_fields: Additional top-level fields to include in the response.

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': True}

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if warning:
        response['warning'] = warning

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def api_error(error: str, status: int = 400, **extra_fields: Any) -> tuple:
    """
    Build a standardized error JSON response.

    Args:
        error: Error message.
        status: HTTP status code (default 400).
        **extra_fields: Additional top-level fields (e.g., errors, code).

    Returns:
        Tuple of (Response, status_code)
    """
    response = {'success': False, 'error': error}

    if extra_fields:
        response.update(extra_fields)

    return jsonify(response), status


def error_status(error) -> int:
    """HTTP status for a ReservationError."""
    for error_class, status in ERROR_STATUS:
        if isinstance(error, error_class):
            return status
    return 500


def api_result(result, status: int = 200, message: str | None = None) -> tuple:
    """
    Build a response from a ReservationResult.

    Args:
        result: ReservationResult from models.reservation
        status: HTTP status code on success
        message: Optional success message

    Returns:
        Tuple of (Response, status_code)
    """
    if result.success:
        return api_success(data=result.data, message=message, status=status)

    details = result.error.to_dict()
    error = details.pop('message')
    return api_error(error, status=error_status(result.error), **details)
