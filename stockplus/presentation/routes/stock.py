"""
Stock routes
List, detail, create, edit, delete and export items
"""

from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_login import login_required, current_user

from stockplus import db
from stockplus.auth import admin_required, manager_required
from stockplus.buisness.core.exceptions import ValidationError
from stockplus.buisness.inventory.item_context import ItemContext
from stockplus.buisness.inventory.stock_manager import StockManager
from stockplus.data.inventory.item import ITEM_KINDS, Item
from stockplus.services.inventory.stock_service import STOCK_FILTERS, StockService
from stockplus.services.reports.pdf_export import pdf_response, report_filename
from stockplus.utils.logger import get_logger
from stockplus.utils.logging_sanitizer import sanitize_form_data

bp = Blueprint('stock', __name__)
logger = get_logger("stockplus.routes.stock")


@bp.route('/')
@login_required
def list():
    """Filtered item list with warehouse-wide summary cards"""
    items, summary, filters = StockService.get_list_data(request)
    return render_template('stock/list.html',
                           items=items,
                           summary=summary,
                           filters=filters,
                           stock_filters=STOCK_FILTERS)


@bp.route('/<int:item_id>')
@login_required
def detail(item_id):
    context = ItemContext(item_id)
    return render_template('stock/detail.html',
                           context=context,
                           item=context.item,
                           transactions=context.get_recent_transactions(),
                           production=context.get_recent_production())


@bp.route('/create', methods=['GET', 'POST'])
@manager_required
def create():
    if request.method == 'POST':
        logger.debug(f"Create item form: {sanitize_form_data(request.form)}")
        try:
            item = StockManager(current_user.id).create_item(
                name=request.form.get('name'),
                kind=request.form.get('kind'),
                stock=request.form.get('stock'),
                minimum_stock=request.form.get('minimum_stock'),
                price=request.form.get('price'),
            )
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'error')
            return render_template('stock/form.html', item=None, form=request.form, item_kinds=ITEM_KINDS), 400

        flash(f'Item "{item.name}" added', 'success')
        return redirect(url_for('stock.list'))

    return render_template('stock/form.html', item=None, form={}, item_kinds=ITEM_KINDS)


@bp.route('/<int:item_id>/edit', methods=['GET', 'POST'])
@manager_required
def edit(item_id):
    item = db.get_or_404(Item, item_id)

    if request.method == 'POST':
        logger.debug(f"Edit item {item_id} form: {sanitize_form_data(request.form)}")
        try:
            StockManager(current_user.id).update_item(
                item,
                name=request.form.get('name'),
                kind=request.form.get('kind'),
                minimum_stock=request.form.get('minimum_stock'),
                price=request.form.get('price'),
            )
        except ValidationError as e:
            db.session.rollback()
            flash(str(e), 'error')
            item = db.get_or_404(Item, item_id)
            return render_template('stock/form.html', item=item, form=request.form, item_kinds=ITEM_KINDS), 400

        flash(f'Item "{item.name}" updated', 'success')
        return redirect(url_for('stock.detail', item_id=item.id))

    return render_template('stock/form.html', item=item, form={}, item_kinds=ITEM_KINDS)


@bp.route('/<int:item_id>/delete', methods=['POST'])
@admin_required
def delete(item_id):
    item = db.get_or_404(Item, item_id)
    name = item.name
    try:
        StockManager(current_user.id).delete_item(item)
    except ValidationError as e:
        db.session.rollback()
        flash(str(e), 'error')
        return redirect(url_for('stock.detail', item_id=item_id))

    flash(f'Item "{name}" deleted', 'success')
    return redirect(url_for('stock.list'))


@bp.route('/export')
@login_required
def export():
    """PDF of the item list, honouring the current search and filter"""
    filters = StockService.get_filters(request)
    items = StockService.build_filtered_query(filters['search'], filters['filter']).all()
    logger.info(f"User {current_user.username} exported {len(items)} items")
    return pdf_response(StockService.build_report(items), report_filename('stock_report'))
