"""
Production Service
Monthly production and payroll recap.

Handles:
- Loading one calendar month of production records
- Pricing them with the configured salary table
- Rows for the recap PDF export
"""

from typing import List, Optional

from flask import current_app
from sqlalchemy.orm import joinedload

from stockplus.buisness.payroll.payroll_calculator import MonthlyRecap, build_monthly_recap, month_bounds
from stockplus.buisness.payroll.salary_config import load_salary_config
from stockplus.data.staff.production_record import ProductionRecord
from stockplus.services.reports.pdf_export import TableReportGenerator
from stockplus.utils.formatting import format_currency, format_date


class ProductionService:
    """
    Service for production presentation data.

    Provides methods for:
    - Fetching a month's production, newest first
    - Building the monthly payroll recap
    - The recap PDF report
    """

    @staticmethod
    def get_month_records(year: int, month: int) -> List[ProductionRecord]:
        start, end = month_bounds(year, month)
        return (
            ProductionRecord.query
            .options(joinedload(ProductionRecord.employee), joinedload(ProductionRecord.item))
            .filter(ProductionRecord.production_date >= start, ProductionRecord.production_date < end)
            .order_by(ProductionRecord.production_date.desc(), ProductionRecord.id.desc())
            .all()
        )

    @staticmethod
    def get_salary_config(overrides: Optional[dict] = None):
        if overrides is None:
            overrides = current_app.config.get('SALARY_CONFIG')
        return load_salary_config(overrides)

    @staticmethod
    def get_monthly_recap(year: int, month: int) -> MonthlyRecap:
        records = ProductionService.get_month_records(year, month)
        return build_monthly_recap(year, month, records, ProductionService.get_salary_config())

    @staticmethod
    def build_report(recap: MonthlyRecap) -> bytes:
        headers = ['Employee', 'Division', 'Units', 'Base Salary', 'Production Bonus', 'Total Salary', 'Production']
        rows = []
        for payroll in recap.employees:
            details = ', '.join(
                f"{entry.item_name} x{entry.quantity} ({format_date(entry.production_date)})"
                for entry in payroll.entries
            )
            rows.append([
                payroll.name,
                payroll.division_label,
                payroll.total_units,
                format_currency(payroll.base_salary),
                format_currency(payroll.production_bonus),
                format_currency(payroll.total_salary),
                details,
            ])
        return TableReportGenerator(wide=True).generate(
            f"Production & Payroll Recap - {recap.period_label}",
            headers,
            rows,
            footer_lines=[
                f"Total units: {recap.total_units}",
                f"Total salary: {format_currency(recap.total_salary)}",
            ],
        )
