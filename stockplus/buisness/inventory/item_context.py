"""
Item Context
Provides a clean interface for an item and its stock history.
"""

from typing import List, Union
from stockplus import db
from stockplus.data.inventory.item import Item
from stockplus.data.inventory.stock_transaction import StockTransaction
from stockplus.data.staff.production_record import ProductionRecord


class ItemContext:
    """
    Context for a single item.

    Provides a clean interface for:
    - Accessing the item, its transactions and production records
    - Stock status and valuation
    """

    def __init__(self, item: Union[Item, int]):
        """
        Initialize ItemContext with an Item instance or ID.

        Args:
            item: Item instance or item ID
        """
        if isinstance(item, int):
            self._item = db.get_or_404(Item, item)
        else:
            self._item = item
        self._item_id = self._item.id

    @property
    def item(self) -> Item:
        return self._item

    @property
    def item_id(self) -> int:
        return self._item_id

    def get_recent_transactions(self, limit: int = 10) -> List[StockTransaction]:
        return (
            StockTransaction.query
            .filter_by(item_id=self._item_id)
            .order_by(StockTransaction.transaction_date.desc(), StockTransaction.id.desc())
            .limit(limit)
            .all()
        )

    def get_recent_production(self, limit: int = 10) -> List[ProductionRecord]:
        return (
            ProductionRecord.query
            .filter_by(item_id=self._item_id)
            .order_by(ProductionRecord.production_date.desc(), ProductionRecord.id.desc())
            .limit(limit)
            .all()
        )

    @property
    def transaction_count(self) -> int:
        return self._item.transactions.count()

    @property
    def production_count(self) -> int:
        return self._item.production_records.count()

    @property
    def can_delete(self) -> bool:
        return self.transaction_count == 0 and self.production_count == 0

    @property
    def stock_status(self) -> str:
        return self._item.stock_status

    @property
    def units_below_minimum(self) -> int:
        """How many units are needed to get back above the minimum"""
        if not self._item.is_low_stock:
            return 0
        return (self._item.minimum_stock - self._item.stock) + 1
