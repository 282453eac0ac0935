#!/usr/bin/env python3
"""
Demo Data Manager
Loads the sample warehouse (items, employees, transactions, production)
from demo_data.json and clears all business data on request.

Handles:
- Skipping the seed when items are already present
- Inserting through the domain managers so every row is validated
- Clearing in foreign-key order
"""

from datetime import datetime, timedelta
from pathlib import Path
import json

from stockplus import db
from stockplus.buisness.inventory.stock_manager import StockManager
from stockplus.buisness.staff.employee_manager import EmployeeManager
from stockplus.buisness.staff.production_manager import ProductionManager
from stockplus.data.core.user_info.user import User
from stockplus.data.inventory.item import Item
from stockplus.data.inventory.stock_transaction import StockTransaction
from stockplus.data.staff.employee import Employee
from stockplus.data.staff.production_record import ProductionRecord
from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.debug.demo_data_manager")

DEMO_DATA_FILE = Path(__file__).parent / 'demo_data.json'


class DemoDataManager:

    def __init__(self, user_id=None, data_file=DEMO_DATA_FILE):
        if user_id is None:
            system_user = User.query.filter_by(username='system').first()
            user_id = system_user.id if system_user else None
        self.user_id = user_id
        self.data_file = Path(data_file)

    def load(self):
        with open(self.data_file, 'r') as f:
            return json.load(f)

    def is_present(self):
        return Item.query.first() is not None

    def seed(self, now=None):
        """
        Insert the demo data set.

        Returns:
            bool: False when items already exist and nothing was inserted
        """
        if self.is_present():
            logger.info("Items already present, skipping demo data")
            return False

        data = self.load()
        now = now or datetime.utcnow()

        try:
            items, employees = self._insert(data, now)
        except Exception as e:
            # A partial seed would make is_present() skip every later run
            logger.error(f"Demo data seed failed, removing what was inserted: {e}")
            db.session.rollback()
            self.clear()
            raise

        logger.info(
            f"Demo data inserted: {len(items)} items, {len(employees)} employees, "
            f"{len(data.get('Transactions', []))} transactions, {len(data.get('Production', []))} production records"
        )
        return True

    def _insert(self, data, now):
        stock_manager = StockManager(self.user_id)
        items = {}
        for item_data in data.get('Items', []):
            item = stock_manager.create_item(**item_data)
            items[item.name] = item

        employee_manager = EmployeeManager(self.user_id)
        employees = {}
        for employee_data in data.get('Employees', []):
            employee = employee_manager.register_employee(**employee_data)
            employees[employee.name] = employee

        for transaction_data in data.get('Transactions', []):
            stock_manager.record_transaction(
                item_id=items[transaction_data['item']].id,
                kind=transaction_data['kind'],
                quantity=transaction_data['quantity'],
                note=transaction_data.get('note'),
                transaction_date=now,
            )

        production_manager = ProductionManager(self.user_id)
        for production_data in data.get('Production', []):
            production_manager.record_production(
                employee_id=employees[production_data['employee']].id,
                item_id=items[production_data['item']].id,
                quantity=production_data['quantity'],
                production_date=now - timedelta(days=production_data.get('days_ago', 0)),
            )

        return items, employees

    def clear(self):
        """
        Delete every production record, transaction, item and employee.

        Rows are deleted through the session so the change feed sees them.

        Returns:
            dict: Number of rows deleted per table
        """
        counts = {}
        try:
            for model in (ProductionRecord, StockTransaction, Item, Employee):
                rows = model.query.all()
                for row in rows:
                    db.session.delete(row)
                db.session.flush()
                counts[model.__tablename__] = len(rows)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            logger.error(f"Failed to clear business data: {e}")
            raise

        logger.info(f"Cleared business data: {counts}")
        return counts
