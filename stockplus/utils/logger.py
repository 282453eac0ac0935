"""
Application logging.

One "stockplus" root logger writes JSON lines to logs/stockplus.log,
logs/errors.log and the console. Module loggers such as
"stockplus.routes.stock" propagate to it. Lines written while a request
is being handled also carry the request method, path and the logged-in
username.
"""

import json
import logging
import os
import threading
from pathlib import Path

ROOT_LOGGER_NAME = "stockplus"

LOG_FIELDS = {
    "timestamp": "asctime",
    "level": "levelname",
    "logger": "name",
    "function": "funcName",
    "line": "lineno",
    "message": "message",
}


def _request_fields() -> dict:
    from flask import g, has_request_context, request

    if not has_request_context():
        return {}
    fields = {"method": request.method, "path": request.path}
    # Only a user Flask-Login has already loaded, never a fresh lookup
    user = g.get("_login_user")
    if user is not None and getattr(user, "is_authenticated", False):
        fields["user"] = user.username
    return fields


def _level_from_env(name: str, default: int) -> int:
    return getattr(logging, os.environ.get(name, "").upper(), default)


class JsonFormatter(logging.Formatter):
    """Render each LogRecord as a single JSON object."""

    def __init__(self, fields: dict = None, datefmt: str = "%Y-%m-%dT%H:%M:%S"):
        super().__init__(datefmt=datefmt)
        self.fields = fields if fields is not None else LOG_FIELDS

    def format(self, record) -> str:
        record.message = record.getMessage()
        record.asctime = self.formatTime(record, self.datefmt)

        entry = {key: getattr(record, attribute, None) for key, attribute in self.fields.items()}
        entry.update(_request_fields())

        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
            entry["exc_info"] = record.exc_text
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


class SingletonLogger:
    """
    Configures the root application logger once per process.

    Log files are truncated on start. The directory comes from
    STOCKPLUS_LOG_DIR (default "logs") and the console level from
    STOCKPLUS_CONSOLE_LOG_LEVEL (default DEBUG).
    """
    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance.root = cls._configure_root()
                cls._instance = instance
        return cls._instance

    @staticmethod
    def _configure_root() -> logging.Logger:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(logging.DEBUG)
        root.handlers.clear()

        logs_dir = Path(os.environ.get("STOCKPLUS_LOG_DIR", "logs"))
        logs_dir.mkdir(parents=True, exist_ok=True)

        formatter = JsonFormatter()
        handlers = (
            (logging.FileHandler(logs_dir / "stockplus.log", mode='w', encoding='utf-8'), logging.INFO),
            (logging.FileHandler(logs_dir / "errors.log", mode='w', encoding='utf-8'), logging.ERROR),
            (logging.StreamHandler(), _level_from_env("STOCKPLUS_CONSOLE_LOG_LEVEL", logging.DEBUG)),
        )
        for handler, level in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            root.addHandler(handler)
        return root

    def get_logger(self, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        if not name or name == ROOT_LOGGER_NAME:
            return self.root
        if not name.startswith(ROOT_LOGGER_NAME + "."):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return logging.getLogger(name)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Get a logger under the "stockplus" root.

    Args:
        name (str): Dotted logger name, e.g. "stockplus.routes.stock".
            Names outside the root are nested under it.

    Returns:
        logging.Logger: Logger instance
    """
    return SingletonLogger().get_logger(name)
