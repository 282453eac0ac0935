"""
User management routes
Admin-only account administration
"""

from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import current_user

from stockplus import db
from stockplus.auth import admin_required
from stockplus.buisness.core.exceptions import ValidationError
from stockplus.buisness.core.user_manager import UserManager
from stockplus.data.core.user_info.password_validator import PasswordValidator
from stockplus.data.core.user_info.user import ROLES, User
from stockplus.data.staff.employee import DIVISIONS
from stockplus.services.core.user_service import UserService
from stockplus.utils.logger import get_logger
from stockplus.utils.logging_sanitizer import sanitize_form_data

bp = Blueprint('users', __name__)
logger = get_logger("stockplus.routes.users")


def _render_form(user, form, status=200):
    return render_template('users/form.html',
                           user=user,
                           form=form,
                           roles=ROLES,
                           divisions=DIVISIONS,
                           password_requirements=PasswordValidator.get_requirements_text()), status


@bp.route('/')
@admin_required
def list():
    """List all accounts except the system user"""
    users, role_counts, filters = UserService.get_list_data(request)
    return render_template('users/list.html', users=users, role_counts=role_counts, filters=filters, roles=ROLES)


@bp.route('/create', methods=['GET', 'POST'])
@admin_required
def create():
    if request.method == 'POST':
        logger.debug(f"Create user form: {sanitize_form_data(request.form)}")
        try:
            user = UserManager(current_user.id).create_user(
                username=request.form.get('username'),
                email=request.form.get('email'),
                password=request.form.get('password'),
                confirm_password=request.form.get('confirm_password'),
                full_name=request.form.get('full_name'),
                role=request.form.get('role'),
                division=request.form.get('division'),
                is_active=request.form.get('is_active') == 'on',
            )
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'error')
            return _render_form(None, request.form, 400)

        flash(f'User {user.username} created', 'success')
        return redirect(url_for('users.list'))

    return _render_form(None, {'is_active': 'on'})


@bp.route('/<int:user_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit(user_id):
    user = db.get_or_404(User, user_id)

    # Prevent editing system user
    if user.is_system:
        flash('System user cannot be edited', 'error')
        return redirect(url_for('users.list'))

    if request.method == 'POST':
        logger.debug(f"Edit user {user_id} form: {sanitize_form_data(request.form)}")
        try:
            UserManager(current_user.id).update_user(
                user,
                email=request.form.get('email'),
                full_name=request.form.get('full_name'),
                role=request.form.get('role'),
                division=request.form.get('division'),
                is_active=request.form.get('is_active') == 'on',
                password=request.form.get('password'),
                confirm_password=request.form.get('confirm_password'),
            )
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'error')
            return _render_form(db.get_or_404(User, user_id), request.form, 400)

        flash(f'User {user.username} updated', 'success')
        return redirect(url_for('users.list'))

    return _render_form(user, {
        'email': user.email,
        'full_name': user.full_name or '',
        'role': user.role,
        'division': user.division or '',
        'is_active': 'on' if user.is_active else '',
    })
