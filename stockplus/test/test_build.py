"""
Tests for the database build and demo data
"""

from datetime import datetime
import json

import pytest

from stockplus.build import insert_critical_data, verify_critical_data
from stockplus.buisness.core.exceptions import InsufficientStockError
from stockplus.data.core.user_info.user import User
from stockplus.data.inventory.item import Item
from stockplus.data.inventory.stock_transaction import StockTransaction
from stockplus.data.staff.employee import Employee
from stockplus.data.staff.production_record import ProductionRecord
from stockplus.debug.demo_data_manager import DemoDataManager
from stockplus.services.reports.pdf_export import TableReportGenerator, report_filename


@pytest.fixture
def build_env(monkeypatch):
    monkeypatch.setenv('SYSTEM_USER_PASSWORD', 'SystemPass1')
    monkeypatch.setenv('ADMIN_PASSWORD', 'AdminPass1')


def test_insert_critical_data(app_ctx, build_env):
    assert verify_critical_data() is False, "The test app has no system user yet"

    insert_critical_data()

    system = User.query.filter_by(username='system').one()
    assert system.is_system is True
    assert system.check_password('SystemPass1')
    assert verify_critical_data() is True


def test_insert_critical_data_is_idempotent(app_ctx, build_env):
    insert_critical_data()
    insert_critical_data()

    assert User.query.filter_by(username='system').count() == 1


def test_missing_password_env_fails(app_ctx, monkeypatch):
    monkeypatch.delenv('SYSTEM_USER_PASSWORD', raising=False)
    monkeypatch.setenv('ADMIN_PASSWORD', 'AdminPass1')

    with pytest.raises(RuntimeError, match='SYSTEM_USER_PASSWORD'):
        insert_critical_data()


def test_missing_critical_file_fails(app_ctx, tmp_path):
    with pytest.raises(FileNotFoundError):
        insert_critical_data(tmp_path / 'missing.json')


def test_seed_demo_data(app_ctx):
    assert DemoDataManager().seed(now=datetime(2024, 5, 15, 10, 0)) is True

    assert Item.query.count() == 6
    assert Employee.query.count() == 5
    assert StockTransaction.query.count() == 5
    assert ProductionRecord.query.count() == 2
    assert Item.query.filter_by(name='Tabung Gas 3kg').one().stock == 65, "25 + 50 in - 10 out"


def test_seed_skips_when_items_exist(app_ctx):
    DemoDataManager().seed()

    assert DemoDataManager().seed() is False
    assert Item.query.count() == 6


def test_clear_demo_data(app_ctx):
    DemoDataManager().seed()

    counts = DemoDataManager().clear()

    assert counts == {'production_records': 2, 'stock_transactions': 5, 'items': 6, 'employees': 5}
    assert Item.query.count() == 0
    assert User.query.count() == 3, "Accounts are kept"


def test_failed_seed_leaves_no_partial_data(app_ctx, tmp_path):
    data_file = tmp_path / "broken_demo.json"
    data_file.write_text(json.dumps({
        "Items": [{"name": "Selang Gas", "kind": "finished_good", "stock": 5, "minimum_stock": 1, "price": 25000}],
        "Employees": [{"name": "Budi Santoso", "division": "packing"}],
        "Transactions": [{"item": "Selang Gas", "kind": "outbound_sales", "quantity": 9}],
    }))
    manager = DemoDataManager(data_file=data_file)

    with pytest.raises(InsufficientStockError):
        manager.seed()

    assert Item.query.count() == 0
    assert Employee.query.count() == 0
    assert manager.is_present() is False, "A retry must not be skipped"


def test_pdf_report():
    content = TableReportGenerator().generate(
        'Stock Report', ['Name', 'Stock'], [['Besi Plat', '200'], ['Cat Primer', '0']],
        footer_lines=['Total asset value: Rp 2.400.000'],
    )

    assert content.startswith(b'%PDF')
    assert report_filename('stock_report', today=datetime(2024, 5, 3)) == 'stock_report_2024-05-03.pdf'


def test_generated_env_file(tmp_path):
    from generate_env import EnvGenerator

    env_file = tmp_path / '.env'
    assert EnvGenerator(dev_mode=True, env_file=env_file).generate(force=True) is True

    lines = env_file.read_text().splitlines()
    assert 'ADMIN_PASSWORD="StockPlus2024"' in lines
    assert 'ENABLE_HTTPS=False' in lines
    assert 'DATABASE_URL=sqlite:///instance/stockplus.db' in lines
    assert any(line.startswith('# SALARY_CONFIG={"packing"') for line in lines)


def test_generated_passwords_pass_policy():
    from generate_env import EnvGenerator
    from stockplus.data.core.user_info.password_validator import PasswordValidator

    generator = EnvGenerator()
    for _ in range(20):
        assert PasswordValidator.validate(generator.password())[0] is True


def test_run_script_arguments():
    from app import parse_arguments

    defaults = parse_arguments([])
    build = parse_arguments(['--build-only', '--no-demo-data', '--clear-demo-data'])

    assert defaults.enable_demo_data is True and defaults.build_only is False
    assert build.build_only is True
    assert build.enable_demo_data is False
    assert build.clear_demo_data is True
