from flask import Blueprint, jsonify, request
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf
from busstation import limiter
from busstation.data.core.user import User
from busstation.logger import get_logger
from busstation.utils.logging_sanitizer import sanitize_request_payload

logger = get_logger("bus_station.auth")
auth = Blueprint('auth', __name__)


def _user_payload(user):
    return {
        'id': user.id,
        'username': user.username,
        'fullName': user.full_name,
        'displayName': user.display_name,
        'email': user.email,
        'isAdmin': user.is_admin,
    }


@auth.get('/csrf-token')
def csrf_token():
    """Token for the X-CSRFToken header on state-changing requests"""
    return jsonify({'csrfToken': generate_csrf()})


@auth.post('/login')
@limiter.limit("10 per minute")
def login():
    payload = request.get_json(silent=True) or {}
    logger.debug(f"Login attempt: {sanitize_request_payload(request)}")

    username = (payload.get('username') or '').strip()
    password = payload.get('password') or ''

    if not username or not password:
        logger.warning(f"Login attempt with missing credentials for username: {username}")
        return jsonify({'error': 'Please enter both username and password', 'code': 'VALIDATION_ERROR'}), 400

    user = User.query.filter_by(username=username).first()

    if user is None or not user.check_password(password):
        logger.warning(f"Failed login attempt for username: {username}")
        return jsonify({'error': 'Invalid username or password', 'code': 'INVALID_CREDENTIALS'}), 401

    if not user.is_active:
        logger.warning(f"Login attempt for disabled account: {username}")
        return jsonify({'error': 'Account is disabled', 'code': 'ACCOUNT_DISABLED'}), 403

    login_user(user, remember=bool(payload.get('remember')))
    logger.info(f"Successful login for user: {username}")
    return jsonify({'message': f'Welcome, {user.display_name}!', 'user': _user_payload(user)})


@auth.post('/logout')
@login_required
def logout():
    username = current_user.username
    logout_user()
    logger.info(f"User logged out: {username}")
    return jsonify({'message': 'You have been logged out'})


@auth.get('/me')
@login_required
def me():
    return jsonify(_user_payload(current_user))
