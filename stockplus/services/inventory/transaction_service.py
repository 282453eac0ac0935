"""
Transaction Service
Presentation service for the stock transaction history.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from flask import Request
from sqlalchemy import or_
from sqlalchemy.orm import contains_eager

from stockplus.data.inventory.item import Item
from stockplus.data.inventory.stock_transaction import TRANSACTION_KINDS, StockTransaction
from stockplus.services.reports.pdf_export import TableReportGenerator
from stockplus.utils.formatting import format_currency, format_datetime

FILTER_ALL = 'all'


@dataclass
class TransactionSummary:
    total_transactions: int = 0
    counts_by_kind: Dict[str, int] = field(default_factory=lambda: {kind: 0 for kind in TRANSACTION_KINDS})
    units_by_kind: Dict[str, int] = field(default_factory=lambda: {kind: 0 for kind in TRANSACTION_KINDS})
    inbound_units: int = 0
    outbound_units: int = 0
    inbound_value: float = 0.0

    def to_dict(self) -> dict:
        return {
            'total_transactions': self.total_transactions,
            'counts_by_kind': dict(self.counts_by_kind),
            'units_by_kind': dict(self.units_by_kind),
            'inbound_units': self.inbound_units,
            'outbound_units': self.outbound_units,
            'inbound_value': self.inbound_value,
        }


def summarize_transactions(transactions: Iterable[StockTransaction]) -> TransactionSummary:
    summary = TransactionSummary()
    for transaction in transactions:
        summary.total_transactions += 1
        summary.counts_by_kind[transaction.kind] = summary.counts_by_kind.get(transaction.kind, 0) + 1
        summary.units_by_kind[transaction.kind] = summary.units_by_kind.get(transaction.kind, 0) + transaction.quantity
        if transaction.is_inbound:
            summary.inbound_units += transaction.quantity
            summary.inbound_value += transaction.value
        else:
            summary.outbound_units += transaction.quantity
    return summary


class TransactionService:
    """
    Service for transaction presentation data.

    Provides methods for:
    - Building filtered transaction queries (newest first, joined with item)
    - Summaries per transaction kind
    - The transaction PDF report
    """

    @staticmethod
    def build_filtered_query(
        search: Optional[str] = None,
        kind: Optional[str] = None
    ):
        """
        Build a filtered transaction query.

        Args:
            search: Case-insensitive match on item name or note
            kind: Transaction kind, or 'all'/None for every kind

        Returns:
            SQLAlchemy query object
        """
        query = (
            StockTransaction.query
            .join(Item, StockTransaction.item_id == Item.id)
            .options(contains_eager(StockTransaction.item))
        )

        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(or_(Item.name.ilike(pattern), StockTransaction.note.ilike(pattern)))

        if kind and kind != FILTER_ALL and kind in TRANSACTION_KINDS:
            query = query.filter(StockTransaction.kind == kind)

        return query.order_by(StockTransaction.transaction_date.desc(), StockTransaction.id.desc())

    @staticmethod
    def get_filters(request: Request) -> Dict[str, str]:
        kind = request.args.get('kind', FILTER_ALL)
        if kind != FILTER_ALL and kind not in TRANSACTION_KINDS:
            kind = FILTER_ALL
        return {
            'search': request.args.get('search', '').strip(),
            'kind': kind,
        }

    @staticmethod
    def get_list_data(request: Request) -> Tuple[List[StockTransaction], TransactionSummary, Dict[str, str]]:
        filters = TransactionService.get_filters(request)
        transactions = TransactionService.build_filtered_query(filters['search'], filters['kind']).all()
        return transactions, summarize_transactions(transactions), filters

    @staticmethod
    def build_report(transactions: List[StockTransaction]) -> bytes:
        headers = ['Date', 'Item', 'Kind', 'Quantity', 'Note', 'Value']
        rows = [
            [
                format_datetime(transaction.transaction_date),
                transaction.item.name if transaction.item else '-',
                transaction.kind_label,
                transaction.quantity,
                transaction.note,
                format_currency(transaction.value),
            ]
            for transaction in transactions
        ]
        summary = summarize_transactions(transactions)
        return TableReportGenerator(wide=True).generate(
            'Stock Transaction Report',
            headers,
            rows,
            footer_lines=[
                f"Inbound units: {summary.inbound_units}",
                f"Outbound units: {summary.outbound_units}",
                f"Inbound value: {format_currency(summary.inbound_value)}",
            ],
        )
