from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable

from stockplus import db
from stockplus.buisness.core.validation import require_choice, require_text
from stockplus.data.staff.employee import DIVISIONS, Employee
from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.domain.staff.employee_manager")


class EmployeeManager:
    """Registers employees on the production floor"""

    def __init__(self, user_id: int | None = None):
        self.user_id = user_id

    def register_employee(self, *, name, division) -> Employee:
        name = require_text(name, "Full name")
        division = require_choice(division, DIVISIONS, "Division")

        employee = Employee(
            name=name,
            division=division,
        ).stamp(self.user_id)
        db.session.add(employee)
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Failed to register employee {name}: {e}")
            raise

        logger.info(f"Registered employee {employee.id}: {name} ({division})")
        return employee


def division_headcount(employees: Iterable[Employee]) -> Dict[str, int]:
    """Headcount per division; every division is present, zero when empty"""
    counts = Counter(employee.division for employee in employees)
    return {division: counts.get(division, 0) for division in DIVISIONS}
