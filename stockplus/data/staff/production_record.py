from stockplus.data.core.user_created_base import UserCreatedBase
from stockplus import db
from datetime import datetime


class ProductionRecord(UserCreatedBase):
    __tablename__ = 'production_records'

    employee_id = db.Column(db.Integer, db.ForeignKey('employees.id'), nullable=False, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey('items.id'), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    production_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    employee = db.relationship('Employee', back_populates='production_records')
    item = db.relationship('Item', back_populates='production_records')

    __table_args__ = (
        db.CheckConstraint('quantity > 0', name='ck_production_records_quantity_positive'),
    )

    def __repr__(self):
        return f'<ProductionRecord employee={self.employee_id} item={self.item_id} qty={self.quantity}>'
