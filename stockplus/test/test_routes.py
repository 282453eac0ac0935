"""
Tests for form routes and role checks
"""

import pytest

from stockplus import db
from stockplus.data.core.user_info.user import User
from stockplus.data.inventory.item import Item
from stockplus.data.inventory.stock_transaction import StockTransaction
from stockplus.data.staff.employee import Employee
from stockplus.data.staff.production_record import ProductionRecord
from stockplus.test.conftest import TEST_PASSWORD, login_user

ITEM_FORM = {'name': 'Selang Gas', 'kind': 'finished_good', 'stock': '120', 'minimum_stock': '50', 'price': '25000'}


def _item_count(app):
    with app.app_context():
        return Item.query.count()


def test_login_and_logout(client):
    response = login_user(client, 'manager')
    assert response.status_code == 200
    assert b'Welcome, Manager!' in response.data

    response = client.get('/logout', follow_redirects=True)
    assert b'You have been logged out' in response.data
    assert client.get('/').status_code == 302


def test_login_rejects_bad_password(client):
    response = login_user(client, 'admin', 'WrongPass999')

    assert b'Invalid username or password' in response.data
    assert client.get('/').status_code == 302


def test_login_rejects_disabled_account(app, client):
    with app.app_context():
        User.query.filter_by(username='employee').first().is_active = False
        db.session.commit()

    response = login_user(client, 'employee')

    assert b'Account is disabled' in response.data


def test_manager_creates_item(app, manager_client, user_ids):
    response = manager_client.post('/stock/create', data=ITEM_FORM)

    assert response.status_code == 302
    with app.app_context():
        item = Item.query.filter_by(name='Selang Gas').one()
        assert item.stock == 120
        assert item.price == 25000.0
        assert item.created_by_id == user_ids['manager']
        assert item.recorded_by == 'Manager'


def test_employee_cannot_create_item(app, employee_client):
    response = employee_client.post('/stock/create', data=ITEM_FORM, follow_redirects=True)

    assert b'Only managers and admins can make changes' in response.data
    assert _item_count(app) == 0


def test_invalid_item_form_is_rerendered(app, manager_client):
    response = manager_client.post('/stock/create', data=dict(ITEM_FORM, price='-1'))

    assert response.status_code == 400
    assert b'Price cannot be negative' in response.data
    assert b'Selang Gas' in response.data, "Entered values are kept"
    assert _item_count(app) == 0


@pytest.mark.parametrize('price', ['nan', 'inf'])
def test_non_finite_price_is_rejected(app, manager_client, price):
    response = manager_client.post('/stock/create', data=dict(ITEM_FORM, price=price))

    assert response.status_code == 400
    assert b'Price must be a number' in response.data
    assert _item_count(app) == 0


def test_edit_item(app, manager_client, sample_items):
    item_id = sample_items['Besi Plat']
    response = manager_client.post(f'/stock/{item_id}/edit', data={
        'name': 'Besi Plat', 'kind': 'raw_material', 'minimum_stock': '120', 'price': '12500', 'stock': '9999',
    })

    assert response.status_code == 302
    with app.app_context():
        item = db.session.get(Item, item_id)
        assert item.minimum_stock == 120
        assert item.stock == 200, "Stock is not editable through the item form"


def test_only_admin_deletes_items(app, manager_client, admin_client, sample_items):
    item_id = sample_items['Cat Primer']

    manager_client.post(f'/stock/{item_id}/delete')
    with app.app_context():
        assert db.session.get(Item, item_id) is not None

    admin_client.post(f'/stock/{item_id}/delete')
    with app.app_context():
        assert db.session.get(Item, item_id) is None


def test_delete_referenced_item_shows_error(app, admin_client, sample_items):
    item_id = sample_items['Besi Plat']
    admin_client.post('/transactions/create', data={'item_id': item_id, 'kind': 'inbound', 'quantity': '5'})

    response = admin_client.post(f'/stock/{item_id}/delete', follow_redirects=True)

    assert b'Cannot delete' in response.data
    assert _item_count(app) == 3


def test_record_transaction_route(app, manager_client, sample_items):
    item_id = sample_items['Tabung Gas 12kg']

    response = manager_client.post('/transactions/create', data={
        'item_id': item_id, 'kind': 'outbound_sales', 'quantity': '3', 'note': 'Sold to PT Maju',
    }, follow_redirects=True)

    assert response.status_code == 200
    assert b'stock now 5' in response.data
    with app.app_context():
        transaction = StockTransaction.query.one()
        assert transaction.note == 'Sold to PT Maju'
        assert db.session.get(Item, item_id).stock == 5


def test_transaction_over_stock_is_refused(app, manager_client, sample_items):
    item_id = sample_items['Tabung Gas 12kg']

    response = manager_client.post('/transactions/create', data={
        'item_id': item_id, 'kind': 'outbound_other', 'quantity': '50',
    })

    assert response.status_code == 400
    assert b'Insufficient stock. Available: 8' in response.data
    with app.app_context():
        assert StockTransaction.query.count() == 0
        assert db.session.get(Item, item_id).stock == 8


def test_transaction_search(admin_client, sample_items):
    admin_client.post('/transactions/create', data={
        'item_id': sample_items['Besi Plat'], 'kind': 'inbound', 'quantity': '10', 'note': 'Supplier Krakatau',
    })
    admin_client.post('/transactions/create', data={
        'item_id': sample_items['Tabung Gas 12kg'], 'kind': 'inbound', 'quantity': '1',
    })

    by_note = admin_client.get('/api/transactions?search=krakatau').get_json()
    by_item = admin_client.get('/api/transactions?search=tabung').get_json()
    by_kind = admin_client.get('/api/transactions?kind=outbound_sales').get_json()

    assert [t['item_name'] for t in by_note['transactions']] == ['Besi Plat']
    assert [t['item_name'] for t in by_item['transactions']] == ['Tabung Gas 12kg']
    assert by_kind['transactions'] == []


def test_register_employee_route(app, manager_client, employee_client):
    employee_client.post('/employees/create', data={'name': 'Rizky Pratama', 'division': 'accessory'})
    response = manager_client.post('/employees/create', data={'name': 'Dewi Kartika', 'division': 'cylinder'},
                                   follow_redirects=True)

    assert b'EMP-00001' in response.data
    with app.app_context():
        assert [employee.name for employee in Employee.query.all()] == ['Dewi Kartika']


def test_register_employee_requires_division(app, manager_client):
    response = manager_client.post('/employees/create', data={'name': 'Dewi Kartika', 'division': ''})

    assert response.status_code == 400
    assert b'Division is required' in response.data


def test_record_production_route(app, manager_client, sample_items):
    with app.app_context():
        employee = Employee(name='Ahmad Surya', division='cylinder')
        db.session.add(employee)
        db.session.commit()
        employee_id = employee.id

    response = manager_client.post('/production/create', data={
        'employee_id': employee_id, 'item_id': sample_items['Tabung Gas 12kg'], 'quantity': '12',
        'production_date': '2024-05-14',
    })

    assert response.status_code == 302
    assert 'period=2024-05' in response.headers['Location']
    with app.app_context():
        record = ProductionRecord.query.one()
        assert record.quantity == 12


def test_users_page_is_admin_only(manager_client, admin_client):
    response = manager_client.get('/users/', follow_redirects=True)
    assert b'Admin access required' in response.data

    assert admin_client.get('/users/').status_code == 200


def test_admin_creates_and_disables_user(app, admin_client):
    response = admin_client.post('/users/create', data={
        'username': 'rina', 'email': 'rina@example.com', 'full_name': 'Rina',
        'password': 'Gudang2024', 'confirm_password': 'Gudang2024',
        'role': 'manager', 'division': 'packing', 'is_active': 'on',
    })
    assert response.status_code == 302

    with app.app_context():
        user_id = User.query.filter_by(username='rina').one().id

    admin_client.post(f'/users/{user_id}/edit', data={
        'email': 'rina@example.com', 'full_name': 'Rina', 'role': 'manager', 'division': 'packing',
    })

    with app.app_context():
        assert db.session.get(User, user_id).is_active is False


def test_user_password_policy(app, admin_client):
    response = admin_client.post('/users/create', data={
        'username': 'weak', 'email': 'weak@example.com', 'password': 'short', 'confirm_password': 'short',
        'role': 'employee', 'is_active': 'on',
    })

    assert response.status_code == 400
    assert b'at least 8 characters' in response.data
    with app.app_context():
        assert User.query.filter_by(username='weak').first() is None


def test_admin_cannot_demote_self(app, admin_client, user_ids):
    admin_client.post(f"/users/{user_ids['admin']}/edit", data={
        'email': 'admin@example.com', 'role': 'employee', 'is_active': 'on',
    })

    with app.app_context():
        assert db.session.get(User, user_ids['admin']).role == 'admin'


def test_demo_data_routes(app, admin_client, manager_client):
    manager_client.post('/demo-data/seed')
    assert _item_count(app) == 0

    admin_client.post('/demo-data/seed')
    assert _item_count(app) == 6

    admin_client.post('/demo-data/clear')
    assert _item_count(app) == 0


def test_new_user_can_log_in(app, admin_client):
    admin_client.post('/users/create', data={
        'username': 'joko', 'email': 'joko@example.com', 'password': TEST_PASSWORD,
        'confirm_password': TEST_PASSWORD, 'role': 'employee', 'is_active': 'on',
    })

    client = app.test_client()
    response = login_user(client, 'joko')

    assert b'Welcome, joko!' in response.data


def test_system_user_cannot_log_in(app, client):
    with app.app_context():
        system = User(username='system', email='system@example.com', role='admin', is_system=True)
        system.set_password(TEST_PASSWORD)
        db.session.add(system)
        db.session.commit()

    response = login_user(client, 'system')

    assert b'Invalid username or password' in response.data
    assert client.get('/').status_code == 302


def test_login_redirects_to_next_page_only_locally(client):
    response = client.post('/login?next=/assets/', data={'username': 'employee', 'password': TEST_PASSWORD})
    assert response.headers['Location'].endswith('/assets/')

    client.get('/logout')
    response = client.post('/login?next=https://evil.example.com/', data={'username': 'employee', 'password': TEST_PASSWORD})
    assert 'evil.example.com' not in response.headers['Location']

    for target in ('//evil.example.com/', '/\\evil.example.com/'):
        client.get('/logout')
        response = client.post('/login', query_string={'next': target},
                               data={'username': 'employee', 'password': TEST_PASSWORD})
        assert 'evil.example.com' not in response.headers['Location']


def test_employee_can_view_but_not_open_create_form(employee_client):
    assert employee_client.get('/stock/').status_code == 200
    response = employee_client.get('/stock/create', follow_redirects=True)
    assert b'Only managers and admins can make changes' in response.data
