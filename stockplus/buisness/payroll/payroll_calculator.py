from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Tuple

from stockplus.buisness.core.exceptions import ValidationError
from stockplus.buisness.payroll.salary_config import DivisionRate
from stockplus.data.staff.employee import DIVISIONS
from stockplus.data.staff.production_record import ProductionRecord


def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """Half-open [start, end) range covering the whole calendar month"""
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")
    if not 1 <= year <= 9998:
        raise ValidationError(f"Invalid year: {year}")
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def parse_period(value: str | None, today: datetime | None = None) -> Tuple[int, int]:
    """Parse "YYYY-MM"; blank means the current month"""
    today = today or datetime.utcnow()
    if not value:
        return today.year, today.month
    try:
        year_text, month_text = value.split('-', 1)
        year, month = int(year_text), int(month_text)
    except ValueError:
        raise ValidationError(f"Invalid period: {value} (expected YYYY-MM)")
    month_bounds(year, month)
    return year, month


def shift_period(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


@dataclass
class ProductionEntry:
    item_name: str
    quantity: int
    production_date: datetime


@dataclass
class EmployeePayroll:
    employee_id: int
    name: str
    division: str
    base_salary: int
    bonus_per_unit: int
    total_units: int = 0
    entries: List[ProductionEntry] = field(default_factory=list)

    @property
    def division_label(self) -> str:
        return DIVISIONS.get(self.division, self.division)

    @property
    def production_bonus(self) -> int:
        return self.total_units * self.bonus_per_unit

    @property
    def total_salary(self) -> int:
        return self.base_salary + self.production_bonus

    def to_dict(self) -> dict:
        return {
            'employee_id': self.employee_id,
            'name': self.name,
            'division': self.division,
            'total_units': self.total_units,
            'base_salary': self.base_salary,
            'production_bonus': self.production_bonus,
            'total_salary': self.total_salary,
            'productions': [
                {
                    'item_name': entry.item_name,
                    'quantity': entry.quantity,
                    'production_date': entry.production_date.isoformat(),
                }
                for entry in self.entries
            ],
        }


@dataclass
class MonthlyRecap:
    year: int
    month: int
    employees: List[EmployeePayroll] = field(default_factory=list)

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def period_label(self) -> str:
        return datetime(self.year, self.month, 1).strftime("%B %Y")

    @property
    def total_salary(self) -> int:
        return sum(employee.total_salary for employee in self.employees)

    @property
    def total_units(self) -> int:
        return sum(employee.total_units for employee in self.employees)

    def to_dict(self) -> dict:
        return {
            'period': self.period,
            'total_salary': self.total_salary,
            'total_units': self.total_units,
            'employees': [employee.to_dict() for employee in self.employees],
        }


def build_monthly_recap(
    year: int,
    month: int,
    records: Iterable[ProductionRecord],
    salary_config: Dict[str, DivisionRate],
) -> MonthlyRecap:
    """
    Group the month's production records per employee and price them.

    Records are expected newest first; each employee's entry list keeps
    that order. Employees without production that month do not appear.
    Employees are listed in order of first appearance.
    """
    recap = MonthlyRecap(year=year, month=month)
    by_employee: Dict[int, EmployeePayroll] = {}

    for record in records:
        employee = record.employee
        payroll = by_employee.get(employee.id)
        if payroll is None:
            rate = salary_config.get(employee.division)
            if rate is None:
                raise ValidationError(f"No salary rate configured for division {employee.division}")
            payroll = EmployeePayroll(
                employee_id=employee.id,
                name=employee.name,
                division=employee.division,
                base_salary=rate.base,
                bonus_per_unit=rate.bonus_per_unit,
            )
            by_employee[employee.id] = payroll
            recap.employees.append(payroll)

        payroll.total_units += record.quantity
        payroll.entries.append(ProductionEntry(
            item_name=record.item.name,
            quantity=record.quantity,
            production_date=record.production_date,
        ))

    return recap
