"""
Stock transaction routes
History, recording and export of inbound and outbound movements
"""

from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_required, current_user

from stockplus import db
from stockplus.auth import manager_required
from stockplus.buisness.core.exceptions import ValidationError
from stockplus.buisness.inventory.stock_manager import StockManager
from stockplus.data.inventory.stock_transaction import TRANSACTION_KINDS
from stockplus.services.inventory.stock_service import StockService
from stockplus.services.inventory.transaction_service import TransactionService
from stockplus.services.reports.pdf_export import pdf_response, report_filename
from stockplus.utils.logger import get_logger
from stockplus.utils.logging_sanitizer import sanitize_form_data

bp = Blueprint('transactions', __name__)
logger = get_logger("stockplus.routes.transactions")


@bp.route('/')
@login_required
def list():
    transactions, summary, filters = TransactionService.get_list_data(request)
    return render_template('transactions/list.html',
                           transactions=transactions,
                           summary=summary,
                           filters=filters,
                           transaction_kinds=TRANSACTION_KINDS)


def _render_form(form, status=200):
    return render_template('transactions/form.html',
                           form=form,
                           items=StockService.get_item_choices(),
                           transaction_kinds=TRANSACTION_KINDS), status


@bp.route('/create', methods=['GET', 'POST'])
@manager_required
def create():
    if request.method == 'POST':
        logger.debug(f"Record transaction form: {sanitize_form_data(request.form)}")
        try:
            transaction = StockManager(current_user.id).record_transaction(
                item_id=request.form.get('item_id'),
                kind=request.form.get('kind'),
                quantity=request.form.get('quantity'),
                note=request.form.get('note'),
                transaction_date=request.form.get('transaction_date'),
            )
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'error')
            return _render_form(request.form, 400)

        flash(
            f'{transaction.kind_label} recorded: {transaction.quantity} x {transaction.item.name} '
            f'(stock now {transaction.item.stock})',
            'success'
        )
        return redirect(url_for('transactions.list'))

    return _render_form({'item_id': request.args.get('item_id', '')})


@bp.route('/export')
@login_required
def export():
    filters = TransactionService.get_filters(request)
    transactions = TransactionService.build_filtered_query(filters['search'], filters['kind']).all()
    logger.info(f"User {current_user.username} exported {len(transactions)} transactions")
    return pdf_response(TransactionService.build_report(transactions), report_filename('transaction_report'))
