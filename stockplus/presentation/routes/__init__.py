"""
Routes package for the Stock Plus dashboard
Organized by area: stock, transactions, staff, payroll, assets, users, api
"""

from flask import Blueprint, g, request
from flask_login import current_user

from stockplus.buisness.core.change_feed import ChangeFeed
from stockplus.utils.logger import get_logger

logger = get_logger("stockplus.routes")

# Create main blueprint
main = Blueprint('main', __name__)

# Import route modules
from . import main_routes  # noqa: E402,F401


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    # Don't register main again - it's already registered in stockplus/__init__.py
    from . import stock, transactions, employees, production, assets, users, api, errors

    app.register_blueprint(stock.bp, url_prefix='/stock')
    app.register_blueprint(transactions.bp, url_prefix='/transactions')
    app.register_blueprint(employees.bp, url_prefix='/employees')
    app.register_blueprint(production.bp, url_prefix='/production')
    app.register_blueprint(assets.bp, url_prefix='/assets')
    app.register_blueprint(users.bp, url_prefix='/users')
    app.register_blueprint(api.bp, url_prefix='/api')

    errors.register_error_handlers(app)

    @app.before_request
    def capture_change_token():
        """Revision token for the page being rendered, taken before the view queries"""
        if request.method != 'GET' or request.blueprint == 'api' or request.endpoint == 'static':
            return None
        if current_user.is_authenticated:
            g.change_token = ChangeFeed.encode_token(ChangeFeed.snapshot())
        return None

    logger.info("All route blueprints registered successfully")
