from stockplus import db
from datetime import datetime


class TableRevision(db.Model):
    """Monotonic change counter per watched table, read by the change feed"""

    __tablename__ = 'table_revisions'

    id = db.Column(db.Integer, primary_key=True)
    table_name = db.Column(db.String(64), unique=True, nullable=False)
    revision = db.Column(db.Integer, nullable=False, default=0)
    changed_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<TableRevision {self.table_name}@{self.revision}>'
