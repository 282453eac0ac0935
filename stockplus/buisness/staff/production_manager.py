from __future__ import annotations

from datetime import datetime

from stockplus import db
from stockplus.buisness.core.exceptions import ValidationError
from stockplus.buisness.core.validation import parse_datetime, parse_int
from stockplus.data.inventory.item import Item
from stockplus.data.staff.employee import Employee
from stockplus.data.staff.production_record import ProductionRecord
from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.domain.staff.production_manager")


class ProductionManager:
    """
    Records units produced per employee.

    Production output feeds payroll only; it does not move item stock.
    Stock changes go through StockManager.record_transaction.
    """

    def __init__(self, user_id: int | None = None):
        self.user_id = user_id

    def record_production(self, *, employee_id, item_id, quantity, production_date=None) -> ProductionRecord:
        if not employee_id:
            raise ValidationError("Employee is required")
        if not item_id:
            raise ValidationError("Item is required")
        quantity = parse_int(quantity, "Quantity", minimum=1)
        production_date = parse_datetime(production_date, "Production date", default=datetime.utcnow())

        employee = db.session.get(Employee, parse_int(employee_id, "Employee"))
        if employee is None:
            raise ValidationError("Selected employee does not exist")
        item = db.session.get(Item, parse_int(item_id, "Item"))
        if item is None:
            raise ValidationError("Selected item does not exist")

        record = ProductionRecord(
            employee_id=employee.id,
            item_id=item.id,
            quantity=quantity,
            production_date=production_date,
        ).stamp(self.user_id)
        db.session.add(record)
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Failed to record production for employee {employee.id}: {e}")
            raise

        logger.info(f"Recorded production {record.id}: {employee.name} made {quantity} x {item.name}")
        return record
