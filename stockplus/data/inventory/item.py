from stockplus.data.core.user_created_base import UserCreatedBase
from stockplus import db

# An item is anything the plant keeps a stock count for: steel plate and
# paint it consumes, cylinders and regulators it sells.

KIND_RAW_MATERIAL = 'raw_material'
KIND_FINISHED_GOOD = 'finished_good'

ITEM_KINDS = {
    KIND_RAW_MATERIAL: 'Raw Material',
    KIND_FINISHED_GOOD: 'Finished Good',
}

STOCK_STATUS_OUT = 'out'
STOCK_STATUS_LOW = 'low'
STOCK_STATUS_SAFE = 'safe'

STOCK_STATUS_LABELS = {
    STOCK_STATUS_OUT: 'Out of stock',
    STOCK_STATUS_LOW: 'Low',
    STOCK_STATUS_SAFE: 'Safe',
}


class Item(UserCreatedBase):
    __tablename__ = 'items'

    json_properties = ('kind_label', 'total_value', 'stock_status')

    name = db.Column(db.String(200), unique=True, nullable=False)
    kind = db.Column(db.String(20), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    minimum_stock = db.Column(db.Integer, nullable=False, default=0)
    price = db.Column(db.Float, nullable=False, default=0.0)

    transactions = db.relationship('StockTransaction', back_populates='item', lazy='dynamic')
    production_records = db.relationship('ProductionRecord', back_populates='item', lazy='dynamic')

    __table_args__ = (
        db.CheckConstraint('stock >= 0', name='ck_items_stock_non_negative'),
        db.CheckConstraint('minimum_stock >= 0', name='ck_items_minimum_stock_non_negative'),
        db.CheckConstraint('price >= 0', name='ck_items_price_non_negative'),
    )

    def __repr__(self):
        return f'<Item {self.name}: {self.stock}>'

    @property
    def kind_label(self):
        return ITEM_KINDS.get(self.kind, self.kind)

    @property
    def total_value(self):
        return (self.stock or 0) * (self.price or 0)

    @property
    def is_low_stock(self):
        # Out-of-stock items count as low stock as well
        return (self.stock or 0) <= (self.minimum_stock or 0)

    @property
    def is_out_of_stock(self):
        return (self.stock or 0) == 0

    @property
    def stock_status(self):
        if self.is_out_of_stock:
            return STOCK_STATUS_OUT
        if self.is_low_stock:
            return STOCK_STATUS_LOW
        return STOCK_STATUS_SAFE

    @property
    def stock_status_label(self):
        return STOCK_STATUS_LABELS[self.stock_status]
