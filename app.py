#!/usr/bin/env python3
"""
Stock Plus entry point.

    python app.py                     build the database (with demo data) and serve
    python app.py --build-only        build and exit
    python app.py --no-demo-data      start on an empty warehouse
    python app.py --clear-demo-data   wipe items, transactions, employees and production first

Host, port, debug and reloader come from FLASK_HOST, FLASK_PORT,
FLASK_DEBUG and USE_RELOADER. Run generate_env.py once to create the
.env file with SECRET_KEY and the account passwords.
"""

import argparse
import os
import sys

from dotenv import load_dotenv

load_dotenv()

from stockplus import create_app  # noqa: E402
from stockplus.build import build_database  # noqa: E402
from stockplus.utils.logger import get_logger  # noqa: E402

logger = get_logger("stockplus.run")

TRUTHY = ('true', '1', 'yes', 'on')


def _env_flag(name):
    return os.environ.get(name, 'False').lower() in TRUTHY


def server_settings():
    """Keyword arguments for app.run(), read from the environment"""
    return {
        'host': os.environ.get('FLASK_HOST', '127.0.0.1'),
        'port': int(os.environ.get('FLASK_PORT', '5000')),
        'debug': _env_flag('FLASK_DEBUG'),
        'use_reloader': _env_flag('USE_RELOADER'),
    }


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(description='Stock Plus inventory, production and payroll dashboard')
    parser.add_argument('--build-only', action='store_true',
                        help='Build tables and critical data, then exit without starting the server')
    parser.add_argument('--no-demo-data', action='store_false', dest='enable_demo_data',
                        help='Skip the demo items, employees, transactions and production')
    parser.add_argument('--clear-demo-data', action='store_true',
                        help='Delete all stock, transaction, employee and production data first')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_arguments(argv)
    app = create_app()

    # Critical users are verified on every start, whatever the flags
    build_database(app=app, enable_demo_data=args.enable_demo_data, clear_demo_data=args.clear_demo_data)

    if args.build_only:
        logger.info("Build finished, not starting the server")
        return 0

    settings = server_settings()
    if settings['debug']:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info("Serving Stock Plus on {host}:{port} (debug={debug}, reloader={use_reloader})".format(**settings))
    app.run(**settings)
    return 0


if __name__ == '__main__':
    sys.exit(main())
