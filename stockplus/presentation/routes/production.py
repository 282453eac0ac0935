"""
Production routes
Monthly production and payroll recap, recording output, recap export
"""

from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_required, current_user

from stockplus import db
from stockplus.auth import manager_required
from stockplus.buisness.core.exceptions import ValidationError
from stockplus.buisness.payroll.payroll_calculator import parse_period, shift_period
from stockplus.buisness.staff.production_manager import ProductionManager
from stockplus.data.staff.employee import DIVISIONS
from stockplus.services.inventory.stock_service import StockService
from stockplus.services.reports.pdf_export import pdf_response
from stockplus.services.staff.employee_service import EmployeeService
from stockplus.services.staff.production_service import ProductionService
from stockplus.utils.logger import get_logger
from stockplus.utils.logging_sanitizer import sanitize_form_data

bp = Blueprint('production', __name__)
logger = get_logger("stockplus.routes.production")


def _requested_period():
    """(year, month) from ?period=YYYY-MM, falling back to the current month"""
    try:
        return parse_period(request.args.get('period'))
    except ValidationError as e:
        flash(str(e), 'error')
        return parse_period(None)


@bp.route('/')
@login_required
def recap():
    year, month = _requested_period()
    recap = ProductionService.get_monthly_recap(year, month)
    previous_period = '%04d-%02d' % shift_period(year, month, -1)
    next_period = '%04d-%02d' % shift_period(year, month, 1)
    return render_template('production/recap.html',
                           recap=recap,
                           salary_config=ProductionService.get_salary_config(),
                           previous_period=previous_period,
                           next_period=next_period,
                           divisions=DIVISIONS)


def _render_form(form, status=200):
    return render_template('production/form.html',
                           form=form,
                           employees=EmployeeService.get_list_data(),
                           items=StockService.get_item_choices()), status


@bp.route('/create', methods=['GET', 'POST'])
@manager_required
def create():
    if request.method == 'POST':
        logger.debug(f"Record production form: {sanitize_form_data(request.form)}")
        try:
            record = ProductionManager(current_user.id).record_production(
                employee_id=request.form.get('employee_id'),
                item_id=request.form.get('item_id'),
                quantity=request.form.get('quantity'),
                production_date=request.form.get('production_date'),
            )
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'error')
            return _render_form(request.form, 400)

        flash(f'Production recorded: {record.employee.name} made {record.quantity} x {record.item.name}', 'success')
        return redirect(url_for('production.recap', period=record.production_date.strftime('%Y-%m')))

    return _render_form({})


@bp.route('/export')
@login_required
def export():
    year, month = _requested_period()
    recap = ProductionService.get_monthly_recap(year, month)
    logger.info(f"User {current_user.username} exported payroll recap {recap.period}")
    return pdf_response(ProductionService.build_report(recap), f"payroll_recap_{recap.period}.pdf")
