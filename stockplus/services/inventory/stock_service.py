"""
Stock Service
Presentation service for the item list, stock summary and stock PDF export.

Handles:
- Query building and filtering for the stock list view
- Summary cards for the stock page and dashboard
- Rows for the stock report export
"""

from typing import Dict, List, Optional, Tuple

from flask import Request

from stockplus import db
from stockplus.buisness.inventory.valuation import StockSummary, summarize_stock
from stockplus.data.inventory.item import ITEM_KINDS, KIND_FINISHED_GOOD, KIND_RAW_MATERIAL, Item
from stockplus.services.reports.pdf_export import TableReportGenerator
from stockplus.utils.formatting import format_currency

FILTER_ALL = 'all'
FILTER_LOW_STOCK = 'low_stock'

STOCK_FILTERS = {
    FILTER_ALL: 'All',
    KIND_RAW_MATERIAL: 'Raw Material',
    KIND_FINISHED_GOOD: 'Finished Good',
    FILTER_LOW_STOCK: 'Low Stock',
}


class StockService:
    """
    Service for item presentation data.

    Provides methods for:
    - Building filtered item queries
    - Computing the stock summary
    - Building the stock PDF report
    """

    @staticmethod
    def build_filtered_query(
        search: Optional[str] = None,
        stock_filter: Optional[str] = None
    ):
        """
        Build a filtered item query ordered by name.

        Args:
            search: Case-insensitive substring of the item name
            stock_filter: One of STOCK_FILTERS; unknown values behave like 'all'

        Returns:
            SQLAlchemy query object
        """
        query = Item.query

        if search:
            query = query.filter(Item.name.ilike(f"%{search.strip()}%"))

        if stock_filter in (KIND_RAW_MATERIAL, KIND_FINISHED_GOOD):
            query = query.filter(Item.kind == stock_filter)
        elif stock_filter == FILTER_LOW_STOCK:
            query = query.filter(Item.stock <= Item.minimum_stock)

        return query.order_by(Item.name)

    @staticmethod
    def get_filters(request: Request) -> Dict[str, str]:
        stock_filter = request.args.get('filter', FILTER_ALL)
        if stock_filter not in STOCK_FILTERS:
            stock_filter = FILTER_ALL
        return {
            'search': request.args.get('search', '').strip(),
            'filter': stock_filter,
        }

    @staticmethod
    def get_list_data(request: Request) -> Tuple[List[Item], StockSummary, Dict[str, str]]:
        """
        Get the filtered item list plus a summary over ALL items.

        The summary cards describe the whole warehouse, not the filtered view.
        """
        filters = StockService.get_filters(request)
        items = StockService.build_filtered_query(filters['search'], filters['filter']).all()
        summary = StockService.get_summary()
        return items, summary, filters

    @staticmethod
    def get_summary() -> StockSummary:
        return summarize_stock(Item.query.order_by(Item.name).all())

    @staticmethod
    def get_item_choices() -> List[Item]:
        return Item.query.order_by(Item.name).all()

    @staticmethod
    def build_report(items: List[Item]) -> bytes:
        headers = ['Item', 'Kind', 'Stock', 'Min. Stock', 'Status', 'Price', 'Total Value']
        rows = [
            [
                item.name,
                ITEM_KINDS.get(item.kind, item.kind),
                item.stock,
                item.minimum_stock,
                item.stock_status_label,
                format_currency(item.price),
                format_currency(item.total_value),
            ]
            for item in items
        ]
        total_value = sum(item.total_value for item in items)
        return TableReportGenerator(wide=True).generate(
            'Stock Report',
            headers,
            rows,
            footer_lines=[f"Total value: {format_currency(total_value)}"],
        )
