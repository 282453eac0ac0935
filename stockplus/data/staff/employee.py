from stockplus.data.core.user_created_base import UserCreatedBase
from stockplus import db

DIVISION_CYLINDER = 'cylinder'
DIVISION_ACCESSORY = 'accessory'
DIVISION_PACKING = 'packing'

DIVISIONS = {
    DIVISION_CYLINDER: 'Cylinder Division',
    DIVISION_ACCESSORY: 'Accessory Division',
    DIVISION_PACKING: 'Packing Division',
}


class Employee(UserCreatedBase):
    __tablename__ = 'employees'

    json_properties = ('employee_code', 'division_label')

    name = db.Column(db.String(200), nullable=False)
    division = db.Column(db.String(20), nullable=False)

    production_records = db.relationship('ProductionRecord', back_populates='employee', lazy='dynamic')

    def __repr__(self):
        return f'<Employee {self.name} ({self.division})>'

    @property
    def division_label(self):
        return DIVISIONS.get(self.division, self.division)

    @property
    def employee_code(self):
        return f"EMP-{self.id:05d}" if self.id else "EMP-NEW"
