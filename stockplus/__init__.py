"""
Stock Plus: inventory, production tracking and payroll for a gas cylinder workshop.

`create_app` builds the Flask application. Extensions live at module level
so models and routes can import them before an app exists.
"""

from pathlib import Path
import json
import os

from flask import Flask, redirect, request
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from stockplus.utils.logger import get_logger

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"],
    storage_uri="memory://"  # Use Redis when running more than one worker
)

PACKAGE_DIR = Path(__file__).parent
INSTANCE_DIR = PACKAGE_DIR.parent / 'instance'

CONTENT_SECURITY_POLICY = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https:; "
    "font-src 'self' data: https://cdn.jsdelivr.net;"
)

logger = get_logger("stockplus")


def _env_flag(name, default='False'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def _default_database_uri():
    INSTANCE_DIR.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{(INSTANCE_DIR / 'stockplus.db').resolve()}"


def _load_config(app, overrides):
    """Environment first, then ``overrides`` on top (tests pass theirs here)"""
    overrides = dict(overrides or {})

    # SECURITY: no fallback secret
    secret_key = overrides.pop('SECRET_KEY', None) or os.environ.get('SECRET_KEY')
    if not secret_key:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    app.config.update(
        SECRET_KEY=secret_key,
        SQLALCHEMY_DATABASE_URI=overrides.pop('SQLALCHEMY_DATABASE_URI', None)
        or os.environ.get('DATABASE_URL') or _default_database_uri(),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        ENABLE_HTTPS=_env_flag('ENABLE_HTTPS', 'True'),
        FORCE_HTTPS_REDIRECT=_env_flag('FORCE_HTTPS_REDIRECT', 'True'),
        SESSION_COOKIE_SECURE=_env_flag('SESSION_COOKIE_SECURE', 'True'),
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
        PERMANENT_SESSION_LIFETIME=int(os.environ.get('PERMANENT_SESSION_LIFETIME', '28800')),
        REMEMBER_COOKIE_SECURE=_env_flag('REMEMBER_COOKIE_SECURE', 'True'),
        REMEMBER_COOKIE_HTTPONLY=True,
        CHANGE_POLL_INTERVAL_MS=int(os.environ.get('CHANGE_POLL_INTERVAL_MS', '5000')),
    )

    # {"packing": {"base": 3100000, "bonus_per_unit": 1100}}; divisions left out keep the built-in rates
    salary_env = os.environ.get('SALARY_CONFIG')
    if salary_env:
        try:
            app.config['SALARY_CONFIG'] = json.loads(salary_env)
        except ValueError:
            logger.error("SALARY_CONFIG is not valid JSON, falling back to default salary table")

    app.config.update(overrides)

    if not app.config['ENABLE_HTTPS']:
        logger.warning("HTTPS enforcement DISABLED - Acceptable for development only!")
    elif app.config['FORCE_HTTPS_REDIRECT']:
        logger.info("HTTPS enforcement enabled with HTTP to HTTPS redirect")


def _init_extensions(app):
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)
    login_manager.login_view = 'auth.login'
    login_manager.login_message = 'Please log in to access this page.'
    login_manager.login_message_category = 'info'

    # Models register their tables on import
    from stockplus.data.core.user_info import user  # noqa: F401
    from stockplus.data.core import table_revision  # noqa: F401
    from stockplus.data.inventory import item, stock_transaction  # noqa: F401
    from stockplus.data.staff import employee, production_record  # noqa: F401

    from stockplus.buisness.core.change_feed import register_change_listeners
    register_change_listeners()


def _register_templates(app):
    from stockplus.utils.formatting import format_currency, format_date, format_datetime, format_number

    app.jinja_env.filters.update(
        currency=format_currency,
        datetime=format_datetime,
        date=format_date,
        number=format_number,
    )


def _register_security(app):

    @app.before_request
    def enforce_https():
        if not (app.config.get('ENABLE_HTTPS') and app.config.get('FORCE_HTTPS_REDIRECT')):
            return None
        if request.is_secure or request.headers.get('X-Forwarded-Proto') == 'https':
            return None
        return redirect(request.url.replace('http://', 'https://', 1), code=301)

    @app.after_request
    def set_security_headers(response):
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-XSS-Protection'] = '1; mode=block'
        response.headers['Content-Security-Policy'] = CONTENT_SECURITY_POLICY
        if app.config.get('ENABLE_HTTPS'):
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response


def create_app(config_overrides=None):
    """
    Build the Stock Plus Flask app.

    Args:
        config_overrides (dict, optional): Config values applied after the
            environment is read, e.g. an in-memory database for tests.

    Raises:
        RuntimeError: If no SECRET_KEY is configured
    """
    app = Flask(
        __name__,
        template_folder=str(PACKAGE_DIR / 'presentation' / 'templates'),
        static_folder=str(PACKAGE_DIR / 'presentation' / 'static'),
    )
    logger.info("Initializing Flask application")

    _load_config(app, config_overrides)
    _init_extensions(app)
    _register_templates(app)
    _register_security(app)

    from stockplus.auth import auth
    from stockplus.presentation.routes import main, init_app as init_routes

    app.register_blueprint(auth)
    app.register_blueprint(main)
    init_routes(app)

    logger.info("Flask application initialization complete")
    return app
