"""
Tests for item master data and stock transactions
"""

import pytest

from stockplus import db
from stockplus.buisness.core.exceptions import InsufficientStockError, ItemInUseError, ValidationError
from stockplus.buisness.inventory.item_context import ItemContext
from stockplus.buisness.inventory.stock_manager import StockManager
from stockplus.buisness.staff.employee_manager import EmployeeManager
from stockplus.buisness.staff.production_manager import ProductionManager
from stockplus.data.inventory.item import Item
from stockplus.data.inventory.stock_transaction import StockTransaction


def test_create_item(app_ctx, user_ids):
    item = StockManager(user_ids['manager']).create_item(
        name='  Regulator Gas ', kind='finished_good', stock='50', minimum_stock='20', price='45000'
    )

    assert item.id is not None
    assert item.name == 'Regulator Gas', "Name should be trimmed"
    assert item.stock == 50
    assert item.minimum_stock == 20
    assert item.price == 45000.0
    assert item.created_by_id == user_ids['manager']
    assert item.stock_status == 'safe'


def test_create_item_rejects_duplicate_name(app_ctx, sample_items):
    with pytest.raises(ValidationError, match='already exists'):
        StockManager().create_item(name='besi plat', kind='raw_material', stock=1, minimum_stock=0, price=1)


@pytest.mark.parametrize('field, value, message', [
    ('name', '', 'Item name is required'),
    ('kind', 'gadget', 'Invalid item kind'),
    ('stock', '-1', 'Initial stock must be at least 0'),
    ('minimum_stock', 'abc', 'Minimum stock must be a whole number'),
    ('price', '-5', 'Price cannot be negative'),
    ('price', 'nan', 'Price must be a number'),
    ('price', 'inf', 'Price must be a number'),
])
def test_create_item_validation(app_ctx, field, value, message):
    data = {'name': 'Selang Gas', 'kind': 'finished_good', 'stock': 10, 'minimum_stock': 5, 'price': 25000}
    data[field] = value

    with pytest.raises(ValidationError, match=message):
        StockManager().create_item(**data)

    assert Item.query.count() == 0


def test_update_item_keeps_stock(app_ctx, sample_items):
    item = db.session.get(Item, sample_items['Besi Plat'])

    StockManager().update_item(item, name='Besi Plat 2mm', kind='raw_material', minimum_stock=150, price=13000)

    item = db.session.get(Item, sample_items['Besi Plat'])
    assert item.name == 'Besi Plat 2mm'
    assert item.minimum_stock == 150
    assert item.price == 13000.0
    assert item.stock == 200, "Editing an item must not touch its stock"


def test_update_item_rejects_name_of_other_item(app_ctx, sample_items):
    item = db.session.get(Item, sample_items['Besi Plat'])

    with pytest.raises(ValidationError, match='already exists'):
        StockManager().update_item(item, name='Cat Primer', kind='raw_material', minimum_stock=1, price=1)


def test_inbound_transaction_adds_stock(app_ctx, sample_items):
    transaction = StockManager().record_transaction(
        item_id=sample_items['Tabung Gas 12kg'], kind='inbound', quantity='30', note='Restock'
    )

    assert transaction.id is not None
    assert transaction.stock_delta == 30
    assert db.session.get(Item, sample_items['Tabung Gas 12kg']).stock == 38


def test_outbound_transaction_subtracts_stock(app_ctx, sample_items):
    StockManager().record_transaction(item_id=sample_items['Besi Plat'], kind='outbound_production', quantity=150)

    assert db.session.get(Item, sample_items['Besi Plat']).stock == 50


def test_outbound_may_empty_stock(app_ctx, sample_items):
    StockManager().record_transaction(item_id=sample_items['Tabung Gas 12kg'], kind='outbound_sales', quantity=8)

    item = db.session.get(Item, sample_items['Tabung Gas 12kg'])
    assert item.stock == 0
    assert item.stock_status == 'out'


def test_outbound_over_stock_is_rejected(app_ctx, sample_items):
    with pytest.raises(InsufficientStockError) as excinfo:
        StockManager().record_transaction(item_id=sample_items['Tabung Gas 12kg'], kind='outbound_sales', quantity=9)

    assert str(excinfo.value) == 'Insufficient stock. Available: 8'
    assert excinfo.value.available == 8
    assert db.session.get(Item, sample_items['Tabung Gas 12kg']).stock == 8
    assert StockTransaction.query.count() == 0, "A rejected transaction must not be stored"


@pytest.mark.parametrize('quantity', [0, -3, '', 'many'])
def test_transaction_quantity_must_be_positive(app_ctx, sample_items, quantity):
    with pytest.raises(ValidationError):
        StockManager().record_transaction(item_id=sample_items['Besi Plat'], kind='inbound', quantity=quantity)

    assert db.session.get(Item, sample_items['Besi Plat']).stock == 200


def test_transaction_requires_item_and_kind(app_ctx, sample_items):
    with pytest.raises(ValidationError, match='Item is required'):
        StockManager().record_transaction(item_id=None, kind='inbound', quantity=1)
    with pytest.raises(ValidationError, match='Transaction type is required'):
        StockManager().record_transaction(item_id=sample_items['Besi Plat'], kind='', quantity=1)
    with pytest.raises(ValidationError, match='does not exist'):
        StockManager().record_transaction(item_id=9999, kind='inbound', quantity=1)


def test_delete_unreferenced_item(app_ctx, sample_items):
    item = db.session.get(Item, sample_items['Cat Primer'])

    StockManager().delete_item(item)

    assert db.session.get(Item, sample_items['Cat Primer']) is None


def test_delete_item_with_transactions_is_refused(app_ctx, sample_items):
    StockManager().record_transaction(item_id=sample_items['Besi Plat'], kind='inbound', quantity=5)
    item = db.session.get(Item, sample_items['Besi Plat'])

    with pytest.raises(ItemInUseError):
        StockManager().delete_item(item)

    assert db.session.get(Item, sample_items['Besi Plat']) is not None


def test_delete_item_with_production_is_refused(app_ctx, sample_items):
    employee = EmployeeManager().register_employee(name='Ahmad Surya', division='cylinder')
    ProductionManager().record_production(employee_id=employee.id, item_id=sample_items['Cat Primer'], quantity=3)

    context = ItemContext(sample_items['Cat Primer'])
    assert context.production_count == 1
    assert not context.can_delete

    with pytest.raises(ItemInUseError):
        StockManager().delete_item(context.item)


def test_item_context_history(app_ctx, sample_items):
    manager = StockManager()
    manager.record_transaction(item_id=sample_items['Tabung Gas 12kg'], kind='inbound', quantity=2)
    manager.record_transaction(item_id=sample_items['Tabung Gas 12kg'], kind='outbound_other', quantity=1)

    context = ItemContext(sample_items['Tabung Gas 12kg'])

    assert context.transaction_count == 2
    assert [t.kind for t in context.get_recent_transactions()] == ['outbound_other', 'inbound']
    assert context.units_below_minimum == 15 - 9 + 1
