import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from expense_tracker import config


APP_LOGGER_NAME = "expense_tracker"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries whose INFO output drowns out the request log
QUIET_LOGGERS = (
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "alembic",
    "uvicorn.access",
    "httpx",
    "multipart",
    "faker",
)
SQL_LOGGER = "sqlalchemy.engine"


def setup_logging(
    app_log_level: Optional[str] = None,
    third_party_log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    sql_echo: Optional[bool] = None,
) -> logging.Logger:
    """
    Configure the ``expense_tracker`` logger tree.

    Levels and the optional log file default to the values in
    ``expense_tracker.config``. Console output goes to stderr so it sits
    next to uvicorn's own messages. When SQL echo is on, the SQLAlchemy
    engine logger is left alone so its statements stay visible.

    Safe to call more than once; handlers are replaced, not stacked.
    """
    app_level = _level(app_log_level or config.APP_LOG_LEVEL, logging.INFO)
    third_party_level = _level(third_party_log_level or config.THIRD_PARTY_LOG_LEVEL, logging.WARNING)
    log_file = log_file or config.LOG_FILE
    sql_echo = config.SQL_ECHO if sql_echo is None else sql_echo

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(app_level)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=config.LOG_MAX_BYTES,
            backupCount=config.LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(third_party_level)
    if not sql_echo:
        logging.getLogger(SQL_LOGGER).setLevel(third_party_level)

    app_logger.propagate = False
    return app_logger


def get_logger(name: str = APP_LOGGER_NAME) -> logging.Logger:
    """Logger nested under ``expense_tracker`` so it shares its handlers."""
    if name == APP_LOGGER_NAME or name.startswith(f"{APP_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


def _level(name: str, default: int) -> int:
    return getattr(logging, name.upper(), default)
