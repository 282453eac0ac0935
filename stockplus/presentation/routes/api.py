"""
JSON API
Read endpoints backing the dashboard pages, plus the change feed the pages poll.
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required

from stockplus.buisness.core.change_feed import ChangeFeed
from stockplus.buisness.core.exceptions import ValidationError
from stockplus.buisness.payroll.payroll_calculator import parse_period
from stockplus.services.inventory.asset_service import AssetService
from stockplus.services.inventory.stock_service import StockService
from stockplus.services.inventory.transaction_service import TransactionService
from stockplus.services.staff.employee_service import EmployeeService
from stockplus.services.staff.production_service import ProductionService
from stockplus.utils.logger import get_logger

bp = Blueprint('api', __name__)
logger = get_logger("stockplus.routes.api")


@bp.errorhandler(ValidationError)
def handle_validation_error(error):
    return jsonify({'success': False, 'error': str(error)}), 400


@bp.route('/items')
@login_required
def items():
    filters = StockService.get_filters(request)
    result = StockService.build_filtered_query(filters['search'], filters['filter']).all()
    return jsonify({'success': True, 'items': [item.to_dict() for item in result]})


@bp.route('/stock-summary')
@login_required
def stock_summary():
    return jsonify({'success': True, 'summary': StockService.get_summary().to_dict()})


@bp.route('/transactions')
@login_required
def transactions():
    result, summary, _ = TransactionService.get_list_data(request)
    return jsonify({
        'success': True,
        'transactions': [transaction.to_dict() for transaction in result],
        'summary': summary.to_dict(),
    })


@bp.route('/employees')
@login_required
def employees():
    result = EmployeeService.get_list_data()
    return jsonify({
        'success': True,
        'employees': [employee.to_dict() for employee in result],
        'division_stats': EmployeeService.get_division_stats(result),
    })


@bp.route('/production/recap')
@login_required
def production_recap():
    year, month = parse_period(request.args.get('period'))
    recap = ProductionService.get_monthly_recap(year, month)
    return jsonify({'success': True, 'recap': recap.to_dict()})


@bp.route('/assets')
@login_required
def assets():
    return jsonify({'success': True, 'valuation': AssetService.get_valuation().to_dict()})


@bp.route('/changes')
@login_required
def changes():
    """Current table revisions and which tables moved since ?since=<token>"""
    result = ChangeFeed.changes_since(request.args.get('since'))
    return jsonify({'success': True, **result})
