"""
Account list for the admin users page.
The system account never appears here.
"""

from typing import Dict, List, Optional, Tuple

from flask import Request
from sqlalchemy import or_

from stockplus import db
from stockplus.data.core.user_info.user import ROLES, User

ACTIVE_FILTERS = {'active': True, 'disabled': False}


class UserService:

    @staticmethod
    def build_filtered_query(search: Optional[str] = None, role: Optional[str] = None, status: Optional[str] = None):
        query = User.query.filter(User.is_system.is_(False))

        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(
                User.username.ilike(pattern),
                User.full_name.ilike(pattern),
                User.email.ilike(pattern),
            ))
        if role in ROLES:
            query = query.filter(User.role == role)
        if status in ACTIVE_FILTERS:
            query = query.filter(User.is_active.is_(ACTIVE_FILTERS[status]))

        return query.order_by(User.username)

    @staticmethod
    def get_filters(request: Request) -> Dict[str, str]:
        return {
            'search': request.args.get('search', '').strip(),
            'role': request.args.get('role', ''),
            'status': request.args.get('status', ''),
        }

    @staticmethod
    def get_role_counts() -> Dict[str, int]:
        """Active accounts per role, every role present"""
        rows = (
            db.session.query(User.role, db.func.count(User.id))
            .filter(User.is_system.is_(False), User.is_active.is_(True))
            .group_by(User.role)
            .all()
        )
        counts = {role: 0 for role in ROLES}
        counts.update({role: count for role, count in rows if role in counts})
        return counts

    @staticmethod
    def get_list_data(request: Request) -> Tuple[List[User], Dict[str, int], Dict[str, str]]:
        filters = UserService.get_filters(request)
        users = UserService.build_filtered_query(**filters).all()
        return users, UserService.get_role_counts(), filters
