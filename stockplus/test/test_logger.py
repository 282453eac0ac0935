"""
Tests for the JSON application logger
"""

import json
import logging

from stockplus.utils.logger import JsonFormatter, get_logger


def _record(message='Stock updated', level=logging.INFO):
    return logging.LogRecord('stockplus.inventory', level, __file__, 12, message, None, None, func='record')


def test_loggers_nest_under_root():
    assert get_logger().name == 'stockplus'
    assert get_logger('stockplus.routes.stock').name == 'stockplus.routes.stock'
    assert get_logger('payroll').name == 'stockplus.payroll'


def test_json_formatter_outside_request():
    entry = json.loads(JsonFormatter().format(_record()))

    assert entry['message'] == 'Stock updated'
    assert entry['level'] == 'INFO'
    assert entry['logger'] == 'stockplus.inventory'
    assert entry['line'] == 12
    assert 'path' not in entry


def test_json_formatter_includes_exception():
    try:
        raise ValueError("Insufficient stock. Available: 3")
    except ValueError:
        import sys
        record = logging.LogRecord('stockplus', logging.ERROR, __file__, 1, 'failed', None, sys.exc_info())

    entry = json.loads(JsonFormatter().format(record))

    assert 'Insufficient stock' in entry['exc_info']


def test_json_formatter_adds_request_fields(app):
    with app.test_request_context('/stock/', method='POST'):
        entry = json.loads(JsonFormatter().format(_record()))

    assert entry['method'] == 'POST'
    assert entry['path'] == '/stock/'
    assert 'user' not in entry, "No user is loaded for an anonymous request"
