#!/usr/bin/env python3
"""
Build orchestrator for Stock Plus
Creates the tables, guarantees critical data, optionally loads demo data
"""

from stockplus import create_app, db
from pathlib import Path
import json
import os
from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.build")

CRITICAL_DATA_FILE = Path(__file__).parent / 'data' / 'core' / 'build_data_critical.json'


def verify_critical_data():
    """
    Verify that critical data is present in the database

    Returns:
        bool: True if the system and admin users exist
    """
    from stockplus.data.core.user_info.user import User

    try:
        if not User.query.filter_by(username='system').first():
            logger.warning("System user not found")
            return False
        if not User.query.filter_by(username='admin').first():
            logger.warning("Admin user not found")
            return False
        logger.info("Critical data verification passed")
        return True
    except Exception as e:
        logger.error(f"Error verifying critical data: {e}")
        return False


def _resolve_user_data(user_data):
    """Swap password_env for the password read from the environment"""
    resolved = {key: value for key, value in user_data.items() if key != 'password_env'}
    env_name = user_data.get('password_env')
    if env_name:
        password = os.environ.get(env_name)
        if not password:
            raise RuntimeError(f"{env_name} must be set to create user {user_data.get('username')}")
        resolved['password'] = password
    return resolved


def insert_critical_data(critical_file=CRITICAL_DATA_FILE):
    """
    Insert critical data that must always be present.

    Loads build_data_critical.json and creates the system and admin users.
    Called on every build, regardless of flags.

    Raises:
        FileNotFoundError: If critical data file not found
        RuntimeError: If critical data insertion fails
    """
    critical_file = Path(critical_file)
    if not critical_file.exists():
        error_msg = f"Critical data file not found: {critical_file}"
        logger.error(error_msg)
        raise FileNotFoundError(error_msg)

    if verify_critical_data():
        logger.info("Critical data already present, skipping insertion")
        return

    logger.warning("Critical data missing, attempting insertion...")
    with open(critical_file, 'r') as f:
        critical_data = json.load(f)

    from stockplus.data.core.user_info.user import User

    try:
        system_user_id = None
        for user_key, user_data in critical_data.get('Essential', {}).get('Users', {}).items():
            user, created = User.find_or_create_from_dict(
                _resolve_user_data(user_data),
                lookup_fields=['username'],
                commit=False,
            )
            db.session.flush()
            if user.is_system:
                system_user_id = user.id
            if created:
                logger.info(f"Inserted essential user: {user.username}")

        db.session.commit()
        logger.info(f"Successfully inserted critical data (system user id={system_user_id})")
    except Exception as e:
        db.session.rollback()
        error_msg = f"Critical data insertion failed: {e}"
        logger.error(error_msg)
        raise RuntimeError(error_msg)

    if not verify_critical_data():
        error_msg = "Critical data insertion completed but verification failed"
        logger.error(error_msg)
        raise RuntimeError(error_msg)


def build_database(app=None, enable_demo_data=True, clear_demo_data=False):
    """
    Main build orchestrator

    Args:
        app: Flask app to build against (created when omitted)
        enable_demo_data (bool): Load demo data when no items exist yet
        clear_demo_data (bool): Delete all business data before anything else
    """
    app = app or create_app()

    with app.app_context():
        logger.info(f"Starting database build (demo data={enable_demo_data}, clear={clear_demo_data})")
        db.create_all()
        logger.info("Database tables created")

        # Critical data must be present for the application to function
        insert_critical_data()

        from stockplus.debug.demo_data_manager import DemoDataManager

        if clear_demo_data:
            DemoDataManager().clear()

        if enable_demo_data:
            DemoDataManager().seed()

        logger.info("Database build completed successfully")
