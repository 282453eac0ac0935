from stockplus import db
from datetime import datetime
from sqlalchemy.orm import declared_attr
from stockplus.buisness.core.data_insertion_mixin import DataInsertionMixin


class UserCreatedBase(db.Model, DataInsertionMixin):
    """
    Abstract base for workshop records that keep an audit trail.

    Every row knows when it was created and last changed and which user
    did it. Rows written by the build or demo seed carry the system
    user, or no user at all on a bare database. Subclasses name their
    own table.
    """

    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    updated_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    @declared_attr
    def created_by(cls):
        return db.relationship('User', foreign_keys=[cls.created_by_id])

    @declared_attr
    def updated_by(cls):
        return db.relationship('User', foreign_keys=[cls.updated_by_id])

    def stamp(self, user_id):
        """Record ``user_id`` as last editor, and as creator when the row is new."""
        if self.id is None:
            self.created_by_id = user_id
        self.updated_by_id = user_id
        return self

    @property
    def recorded_by(self) -> str:
        return self.created_by.display_name if self.created_by else 'System'
