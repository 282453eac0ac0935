"""
User Manager
Creates and updates dashboard accounts.

Handles:
- Account creation with password policy checks
- Role, division and active-flag updates
- Refusing changes to the system account
"""

from __future__ import annotations

from typing import Optional

from stockplus import db
from stockplus.buisness.core.exceptions import ValidationError
from stockplus.buisness.core.validation import require_choice, require_text
from stockplus.data.core.user_info.password_validator import PasswordValidator
from stockplus.data.core.user_info.user import ROLES, User
from stockplus.data.staff.employee import DIVISIONS
from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.domain.core.user_manager")


class UserManager:
    """Account administration, used by the admin user pages"""

    def __init__(self, acting_user_id: Optional[int] = None):
        self.acting_user_id = acting_user_id

    def create_user(
        self,
        *,
        username,
        email,
        password,
        confirm_password=None,
        full_name=None,
        role=None,
        division=None,
        is_active=True,
    ) -> User:
        username = require_text(username, "Username")
        email = require_text(email, "Email")
        role = require_choice(role or 'employee', ROLES, "Role")
        division = self._parse_division(division)
        self._check_password(password, confirm_password, username)

        if User.query.filter_by(username=username).first():
            raise ValidationError("Username already exists")
        if User.query.filter_by(email=email).first():
            raise ValidationError("Email already exists")

        user = User(
            username=username,
            email=email,
            full_name=(full_name or '').strip() or None,
            role=role,
            division=division,
            is_active=bool(is_active),
        )
        user.set_password(password)
        db.session.add(user)
        self._commit(f"create user {username}")
        logger.info(f"User {self.acting_user_id} created user {user.id}: {username} ({role})")
        return user

    def update_user(
        self,
        user: User,
        *,
        email,
        full_name=None,
        role=None,
        division=None,
        is_active=True,
        password=None,
        confirm_password=None,
    ) -> User:
        if user.is_system:
            raise ValidationError("System user cannot be edited")

        email = require_text(email, "Email")
        role = require_choice(role or user.role, ROLES, "Role")
        division = self._parse_division(division)

        existing = User.query.filter_by(email=email).first()
        if existing and existing.id != user.id:
            raise ValidationError("Email already exists")

        if user.id == self.acting_user_id and (role != user.role or not is_active):
            raise ValidationError("You cannot change your own role or deactivate yourself")

        if password:
            self._check_password(password, confirm_password, user.username)
            user.set_password(password)

        user.email = email
        user.full_name = (full_name or '').strip() or None
        user.role = role
        user.division = division
        user.is_active = bool(is_active)
        self._commit(f"update user {user.id}")
        logger.info(f"User {self.acting_user_id} updated user {user.id}: role={role} active={user.is_active}")
        return user

    @staticmethod
    def _parse_division(division):
        if not division:
            return None
        return require_choice(division, DIVISIONS, "Division")

    @staticmethod
    def _check_password(password, confirm_password, username=None):
        is_valid, message = PasswordValidator.validate(password or '', username=username)
        if not is_valid:
            raise ValidationError(message)
        if confirm_password is not None and password != confirm_password:
            raise ValidationError("Passwords do not match")

    @staticmethod
    def _commit(action: str) -> None:
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise
