"""
Employee Service
Presentation service for the employee list, division stats and export.
"""

from typing import Dict, List

from stockplus.buisness.staff.employee_manager import division_headcount
from stockplus.data.staff.employee import Employee
from stockplus.services.reports.pdf_export import TableReportGenerator
from stockplus.utils.formatting import format_date


class EmployeeService:
    """
    Service for employee presentation data.

    Provides methods for:
    - Listing employees ordered by name
    - Headcount per division
    - The employee PDF report
    """

    @staticmethod
    def get_list_data() -> List[Employee]:
        return Employee.query.order_by(Employee.name, Employee.id).all()

    @staticmethod
    def get_division_stats(employees: List[Employee] = None) -> Dict[str, int]:
        if employees is None:
            employees = EmployeeService.get_list_data()
        return division_headcount(employees)

    @staticmethod
    def build_report(employees: List[Employee]) -> bytes:
        headers = ['Name', 'Division', 'Employee ID', 'Joined', 'Status']
        rows = [
            [
                employee.name,
                employee.division_label,
                employee.employee_code,
                format_date(employee.created_at),
                'Active',
            ]
            for employee in employees
        ]
        return TableReportGenerator().generate('Employee Report', headers, rows)
