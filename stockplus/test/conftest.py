"""
Pytest configuration and fixtures

The app runs against in-memory SQLite with CSRF and rate limiting off.
Requests are made without an app context held open by the test, so each
request gets its own context (and its own Flask-Login user lookup).
"""
import os
import pytest

# Set SECRET_KEY if not set (for testing)
os.environ.setdefault('SECRET_KEY', 'test_secret_key_for_stockplus')

from stockplus import create_app
from stockplus import db as _db
from stockplus.data.core.user_info.user import ROLE_ADMIN, ROLE_EMPLOYEE, ROLE_MANAGER, User

TEST_PASSWORD = 'TestPass123'

TEST_CONFIG = {
    'TESTING': True,
    'WTF_CSRF_ENABLED': False,
    'SQLALCHEMY_DATABASE_URI': 'sqlite://',
    'ENABLE_HTTPS': False,
    'FORCE_HTTPS_REDIRECT': False,
    'SESSION_COOKIE_SECURE': False,
    'REMEMBER_COOKIE_SECURE': False,
    'RATELIMIT_ENABLED': False,
}


@pytest.fixture(scope='function')
def app():
    """Create Flask application with a fresh schema and one user per role"""
    app = create_app(dict(TEST_CONFIG))

    with app.app_context():
        _db.create_all()
        for username, role in (('admin', ROLE_ADMIN), ('manager', ROLE_MANAGER), ('employee', ROLE_EMPLOYEE)):
            user = User(username=username, email=f'{username}@example.com', full_name=username.title(), role=role)
            user.set_password(TEST_PASSWORD)
            _db.session.add(user)
        _db.session.commit()

    yield app

    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def app_ctx(app):
    """Application context for tests that call managers and services directly"""
    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


def login_user(client, username='admin', password=TEST_PASSWORD):
    """Helper function to login a user"""
    return client.post('/login', data={
        'username': username,
        'password': password
    }, follow_redirects=True)


@pytest.fixture(scope='function')
def admin_client(app):
    client = app.test_client()
    login_user(client, 'admin')
    return client


@pytest.fixture(scope='function')
def manager_client(app):
    client = app.test_client()
    login_user(client, 'manager')
    return client


@pytest.fixture(scope='function')
def employee_client(app):
    client = app.test_client()
    login_user(client, 'employee')
    return client


@pytest.fixture(scope='function')
def user_ids(app):
    with app.app_context():
        return {user.username: user.id for user in User.query.all()}


@pytest.fixture(scope='function')
def sample_items(app, user_ids):
    """
    Three items: one safe, one low, one out of stock.

    Returns a dict of name -> id.
    """
    from stockplus.buisness.inventory.stock_manager import StockManager

    with app.app_context():
        manager = StockManager(user_ids['admin'])
        plate = manager.create_item(name='Besi Plat', kind='raw_material', stock=200, minimum_stock=100, price=12000)
        cylinder = manager.create_item(name='Tabung Gas 12kg', kind='finished_good', stock=8, minimum_stock=15, price=350000)
        paint = manager.create_item(name='Cat Primer', kind='raw_material', stock=0, minimum_stock=25, price=85000)
        return {item.name: item.id for item in (plate, cylinder, paint)}
