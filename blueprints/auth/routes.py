"""
Authentication routes: login, logout, current user.
JSON endpoints for the calendar client.
"""

import logging

from flask import Blueprint
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from blueprints.auth.forms import LoginForm
from models.user import User, get_user_by_username, update_last_login, check_password
from utils.api_response import api_success, api_error
from utils.messages import MESSAGES

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['GET'])
def login_token():
    """CSRF token for the login post (and later writes)."""
    return api_success(data={'csrf_token': generate_csrf()})


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Sign in with username and password.

    Returns:
        200 with the user, 400 for missing fields, 401 for bad credentials
    """
    form = LoginForm()

    if not form.validate_on_submit():
        return api_error(MESSAGES['field_required'], status=400, errors=form.errors)

    user_dict = get_user_by_username(form.username.data)

    if user_dict is None or not check_password(user_dict, form.password.data):
        logger.info(f'Failed login for {form.username.data}')
        return api_error(MESSAGES['invalid_credentials'], status=401)

    if not user_dict.get('active'):
        return api_error(MESSAGES['account_disabled'], status=403)

    user = User(user_dict)
    login_user(user, remember=form.remember_me.data)
    update_last_login(user.id)

    return api_success(
        data=user.to_dict(),
        message=MESSAGES['login_success'].format(name=user.full_name or user.username)
    )


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Sign out the current user."""
    logout_user()
    return api_success(message=MESSAGES['logout_success'])


@auth_bp.route('/me')
@login_required
def me():
    """The signed-in user and their capabilities."""
    return api_success(data=current_user.to_dict())
