from stockplus.data.core.user_created_base import UserCreatedBase
from stockplus import db
from datetime import datetime

KIND_INBOUND = 'inbound'
KIND_OUTBOUND_PRODUCTION = 'outbound_production'
KIND_OUTBOUND_SALES = 'outbound_sales'
KIND_OUTBOUND_OTHER = 'outbound_other'

TRANSACTION_KINDS = {
    KIND_INBOUND: 'Inbound Goods',
    KIND_OUTBOUND_PRODUCTION: 'Out for Production',
    KIND_OUTBOUND_SALES: 'Out for Sales',
    KIND_OUTBOUND_OTHER: 'Other Outbound',
}

OUTBOUND_KINDS = (KIND_OUTBOUND_PRODUCTION, KIND_OUTBOUND_SALES, KIND_OUTBOUND_OTHER)


class StockTransaction(UserCreatedBase):
    __tablename__ = 'stock_transactions'

    json_properties = ('item_name', 'kind_label', 'value')

    item_id = db.Column(db.Integer, db.ForeignKey('items.id'), nullable=False, index=True)
    kind = db.Column(db.String(30), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    note = db.Column(db.Text, nullable=True)
    transaction_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    item = db.relationship('Item', back_populates='transactions')

    __table_args__ = (
        db.CheckConstraint('quantity > 0', name='ck_stock_transactions_quantity_positive'),
    )

    def __repr__(self):
        return f'<StockTransaction {self.kind} {self.quantity} of item {self.item_id}>'

    @property
    def kind_label(self):
        return TRANSACTION_KINDS.get(self.kind, self.kind)

    @property
    def item_name(self):
        return self.item.name if self.item else None

    @property
    def is_inbound(self):
        return self.kind == KIND_INBOUND

    @property
    def stock_delta(self):
        """Signed change this transaction applies to the item's stock"""
        return self.quantity if self.is_inbound else -self.quantity

    @property
    def value(self):
        price = self.item.price if self.item else 0
        return self.quantity * (price or 0)
