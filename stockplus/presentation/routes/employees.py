"""
Employee routes
"""

from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_required, current_user

from stockplus import db
from stockplus.auth import manager_required
from stockplus.buisness.core.exceptions import ValidationError
from stockplus.buisness.staff.employee_manager import EmployeeManager
from stockplus.data.staff.employee import DIVISIONS
from stockplus.services.reports.pdf_export import pdf_response, report_filename
from stockplus.services.staff.employee_service import EmployeeService
from stockplus.utils.logger import get_logger
from stockplus.utils.logging_sanitizer import sanitize_form_data

bp = Blueprint('employees', __name__)
logger = get_logger("stockplus.routes.employees")


@bp.route('/')
@login_required
def list():
    employees = EmployeeService.get_list_data()
    return render_template('employees/list.html',
                           employees=employees,
                           division_stats=EmployeeService.get_division_stats(employees),
                           divisions=DIVISIONS)


@bp.route('/create', methods=['GET', 'POST'])
@manager_required
def create():
    if request.method == 'POST':
        logger.debug(f"Register employee form: {sanitize_form_data(request.form)}")
        try:
            employee = EmployeeManager(current_user.id).register_employee(
                name=request.form.get('name'),
                division=request.form.get('division'),
            )
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'error')
            return render_template('employees/form.html', form=request.form, divisions=DIVISIONS), 400

        flash(f'Employee {employee.name} registered as {employee.employee_code}', 'success')
        return redirect(url_for('employees.list'))

    return render_template('employees/form.html', form={}, divisions=DIVISIONS)


@bp.route('/export')
@login_required
def export():
    employees = EmployeeService.get_list_data()
    logger.info(f"User {current_user.username} exported {len(employees)} employees")
    return pdf_response(EmployeeService.build_report(employees), report_filename('employee_report'))
