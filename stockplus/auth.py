"""
Login, logout and role checks.

Anyone with an active account can view every page. Writes are gated by
role: managers and admins record stock, employees and production;
only admins delete items, manage accounts and load or clear demo data.
"""

from functools import wraps
from urllib.parse import urlparse

from flask import Blueprint, flash, jsonify, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from stockplus import limiter, login_manager
from stockplus.data.core.user_info.user import ROLE_ADMIN, ROLE_MANAGER, User
from stockplus.utils.logger import get_logger
from stockplus.utils.logging_sanitizer import sanitize_form_data

logger = get_logger("stockplus.auth")
auth = Blueprint('auth', __name__)

INVALID_CREDENTIALS = 'Invalid username or password'


def _wants_json():
    return request.path.startswith('/api/')


def _deny(message):
    if _wants_json():
        return jsonify({'success': False, 'error': message}), 403
    flash(message, 'error')
    return redirect(request.referrer or url_for('main.index'))


def role_required(roles, message):
    """View decorator: login plus one of ``roles``, otherwise ``message`` is shown"""
    def decorator(view):
        @wraps(view)
        @login_required
        def wrapped(*args, **kwargs):
            if current_user.role not in roles:
                logger.warning(f"User {current_user.username} ({current_user.role}) denied {request.method} {request.path}")
                return _deny(message)
            return view(*args, **kwargs)
        return wrapped
    return decorator


manager_required = role_required((ROLE_ADMIN, ROLE_MANAGER), 'Only managers and admins can make changes')
admin_required = role_required((ROLE_ADMIN,), 'Admin access required')


def _authenticate(username, password):
    """
    Returns:
        tuple: (user, None) on success, (None, message to flash) otherwise
    """
    if not username or not password:
        return None, 'Please enter both username and password'

    user = User.query.filter_by(username=username).first()
    # The system account owns seeded rows and never logs in; it looks like a wrong password
    if user is None or user.is_system or not user.check_password(password):
        return None, INVALID_CREDENTIALS
    if not user.is_active:
        return None, 'Account is disabled'
    return user, None


def _safe_next(target):
    if not target or urlparse(target).netloc or not target.startswith('/'):
        return url_for('main.index')
    # Browsers read //host and /\host as another site
    if target.startswith(('//', '/\\')):
        return url_for('main.index')
    return target


@auth.route('/login', methods=['GET', 'POST'])
@limiter.limit("10 per minute", methods=['POST'])
def login():
    if current_user.is_authenticated:
        return redirect(url_for('main.index'))

    if request.method == 'POST':
        logger.debug(f"Login attempt: {sanitize_form_data(request.form)}")
        username = (request.form.get('username') or '').strip()

        user, error = _authenticate(username, request.form.get('password'))
        if error:
            logger.warning(f"Failed login for username {username!r}: {error}")
            flash(error, 'error')
            return render_template('auth/login.html', username=username)

        login_user(user, remember=bool(request.form.get('remember')))
        logger.info(f"Successful login for user: {username}")
        flash(f'Welcome, {user.display_name}!', 'success')
        return redirect(_safe_next(request.args.get('next')))

    return render_template('auth/login.html')


@auth.route('/logout')
@login_required
def logout():
    username = current_user.username
    logout_user()
    logger.info(f"User logged out: {username}")
    flash('You have been logged out', 'info')
    return redirect(url_for('auth.login'))


@login_manager.unauthorized_handler
def unauthorized():
    if _wants_json():
        return jsonify({'success': False, 'error': 'Authentication required'}), 401
    flash(login_manager.login_message, login_manager.login_message_category)
    return redirect(url_for('auth.login', next=request.full_path if request.query_string else request.path))
