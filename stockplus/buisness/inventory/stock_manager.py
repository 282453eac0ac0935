from __future__ import annotations

from datetime import datetime

from sqlalchemy import update

from stockplus import db
from stockplus.buisness.core import change_feed
from stockplus.buisness.core.exceptions import InsufficientStockError, ItemInUseError, ValidationError
from stockplus.buisness.core.validation import (
    parse_amount,
    parse_datetime,
    parse_int,
    require_choice,
    require_text,
)
from stockplus.data.inventory.item import ITEM_KINDS, Item
from stockplus.data.inventory.stock_transaction import TRANSACTION_KINDS, StockTransaction
from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.domain.inventory.stock_manager")


class StockManager:
    """
    Write operations on items and their stock.

    Responsibilities:
    - Create and edit item master data
    - Record stock transactions and apply them to Item.stock atomically
    - Refuse deletes that would orphan history
    """

    def __init__(self, user_id: int | None = None):
        self.user_id = user_id

    def create_item(self, *, name, kind, stock, minimum_stock, price) -> Item:
        name = require_text(name, "Item name")
        kind = require_choice(kind, ITEM_KINDS, "Item kind")
        stock = parse_int(stock, "Initial stock", minimum=0)
        minimum_stock = parse_int(minimum_stock, "Minimum stock", minimum=0)
        price = parse_amount(price, "Price")

        if Item.query.filter(db.func.lower(Item.name) == name.lower()).first():
            raise ValidationError(f'An item named "{name}" already exists')

        item = Item(
            name=name,
            kind=kind,
            stock=stock,
            minimum_stock=minimum_stock,
            price=price,
        ).stamp(self.user_id)
        db.session.add(item)
        self._commit(f"create item {name}")
        logger.info(f"Created item {item.id}: {name} ({kind}) stock={stock} min={minimum_stock} price={price}")
        return item

    def update_item(self, item: Item, *, name, kind, minimum_stock, price) -> Item:
        """Edit master data. Stock itself only moves through transactions."""
        name = require_text(name, "Item name")
        kind = require_choice(kind, ITEM_KINDS, "Item kind")
        minimum_stock = parse_int(minimum_stock, "Minimum stock", minimum=0)
        price = parse_amount(price, "Price")

        existing = Item.query.filter(db.func.lower(Item.name) == name.lower()).first()
        if existing and existing.id != item.id:
            raise ValidationError(f'An item named "{name}" already exists')

        item.name = name
        item.kind = kind
        item.minimum_stock = minimum_stock
        item.price = price
        item.stamp(self.user_id)
        self._commit(f"update item {item.id}")
        logger.info(f"Updated item {item.id}: {name}")
        return item

    def delete_item(self, item: Item) -> None:
        transaction_count = item.transactions.count()
        production_count = item.production_records.count()
        if transaction_count or production_count:
            raise ItemInUseError(
                f'Cannot delete "{item.name}": it is referenced by '
                f'{transaction_count} transaction(s) and {production_count} production record(s)'
            )

        name = item.name
        db.session.delete(item)
        self._commit(f"delete item {name}")
        logger.info(f"Deleted item: {name}")

    def record_transaction(self, *, item_id, kind, quantity, note=None, transaction_date=None) -> StockTransaction:
        """
        Insert a stock transaction and apply it to the item's stock.

        Outbound stock is decremented with a conditional UPDATE
        (stock + delta >= 0) so two concurrent outbound transactions can
        never drive stock below zero.
        """
        if not item_id:
            raise ValidationError("Item is required")
        kind = require_choice(kind, TRANSACTION_KINDS, "Transaction type")
        quantity = parse_int(quantity, "Quantity", minimum=1)
        note = (note or '').strip() or None
        transaction_date = parse_datetime(transaction_date, "Transaction date", default=datetime.utcnow())

        item = db.session.get(Item, parse_int(item_id, "Item"))
        if item is None:
            raise ValidationError("Selected item does not exist")

        transaction = StockTransaction(
            item_id=item.id,
            kind=kind,
            quantity=quantity,
            note=note,
            transaction_date=transaction_date,
        ).stamp(self.user_id)

        try:
            delta = transaction.stock_delta
            statement = update(Item).where(Item.id == item.id)
            if delta < 0:
                statement = statement.where(Item.stock + delta >= 0)
            result = db.session.execute(
                statement.values(stock=Item.stock + delta, updated_at=datetime.utcnow())
            )
            if result.rowcount != 1:
                db.session.rollback()
                db.session.refresh(item)
                logger.warning(
                    f"Rejected {kind} of {quantity} for item {item.id}: only {item.stock} in stock"
                )
                raise InsufficientStockError(item.name, item.stock, quantity)

            change_feed.touch(db.session, 'items')
            db.session.add(transaction)
            db.session.commit()
        except InsufficientStockError:
            raise
        except Exception as e:
            db.session.rollback()
            logger.error(f"Failed to record transaction for item {item_id}: {e}")
            raise

        db.session.refresh(item)
        logger.info(
            f"Recorded {kind} transaction {transaction.id}: {quantity} x {item.name}, stock now {item.stock}"
        )
        return transaction

    def _commit(self, action: str) -> None:
        try:
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise
