"""
Main routes for the Stock Plus dashboard
Dashboard overview and demo data administration
"""

from flask import render_template, redirect, url_for, flash
from flask_login import login_required, current_user

from stockplus.auth import admin_required
from stockplus.data.staff.employee import DIVISIONS
from stockplus.services.inventory.stock_service import StockService
from stockplus.services.inventory.transaction_service import TransactionService
from stockplus.services.staff.employee_service import EmployeeService
from stockplus.utils.logger import get_logger

# Import the main blueprint from the package
from . import main

logger = get_logger("stockplus.routes.main")


@main.route('/')
@login_required
def index():
    """Stock overview cards and low-stock alerts"""
    summary = StockService.get_summary()
    recent_transactions = TransactionService.build_filtered_query().limit(5).all()
    division_stats = EmployeeService.get_division_stats()

    return render_template('dashboard.html',
                           summary=summary,
                           recent_transactions=recent_transactions,
                           division_stats=division_stats,
                           divisions=DIVISIONS)


@main.route('/demo-data/seed', methods=['POST'])
@admin_required
def seed_demo_data():
    from stockplus.debug.demo_data_manager import DemoDataManager

    try:
        seeded = DemoDataManager().seed()
    except Exception as e:
        logger.error(f"Demo data seeding failed: {e}")
        flash(f'Failed to load demo data: {e}', 'error')
        return redirect(url_for('main.index'))

    if seeded:
        logger.info(f"Demo data loaded by {current_user.username}")
        flash('Demo data loaded', 'success')
    else:
        flash('Items already exist, demo data was not loaded', 'info')
    return redirect(url_for('main.index'))


@main.route('/demo-data/clear', methods=['POST'])
@admin_required
def clear_demo_data():
    from stockplus.debug.demo_data_manager import DemoDataManager

    try:
        DemoDataManager().clear()
    except Exception as e:
        logger.error(f"Clearing demo data failed: {e}")
        flash(f'Failed to clear data: {e}', 'error')
        return redirect(url_for('main.index'))

    logger.info(f"Business data cleared by {current_user.username}")
    flash('All stock, transaction, employee and production data cleared', 'success')
    return redirect(url_for('main.index'))
