"""
Route decorators for authentication and authorization.
Provides role-based access control for JSON routes.
"""

from functools import wraps
from flask_login import login_required, current_user

from utils.api_response import api_error
from utils.messages import MESSAGES


def admin_required(func):
    """
    Decorator to require an administrator for a route.

    Usage:
        @bp.route('/venues/<int:venue_id>', methods=['DELETE'])
        @login_required
        @admin_required
        def delete_venue(venue_id):
            ...

    Returns:
        Decorated view returning 403 JSON for non-administrators
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        if not getattr(current_user, 'is_administrator', False):
            return api_error(MESSAGES['permission_denied'], status=403)
        return func(*args, **kwargs)
    return wrapper


# Re-export login_required for convenience
__all__ = ['login_required', 'admin_required']
