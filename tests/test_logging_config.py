import logging

import pytest

from expense_tracker.logging_config import APP_LOGGER_NAME, SQL_LOGGER, get_logger, setup_logging


@pytest.fixture
def restore_logging():
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    sql_logger = logging.getLogger(SQL_LOGGER)
    saved = (app_logger.level, list(app_logger.handlers), sql_logger.level)
    yield
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(saved[0])
    for handler in saved[1]:
        app_logger.addHandler(handler)
    sql_logger.setLevel(saved[2])


def test_setup_logging_writes_to_log_file(tmp_path, restore_logging):
    log_file = tmp_path / "logs" / "app.log"
    setup_logging(app_log_level="DEBUG", log_file=str(log_file), sql_echo=False)

    get_logger("services.export").debug("export finished")
    for handler in logging.getLogger(APP_LOGGER_NAME).handlers:
        handler.flush()

    text = log_file.read_text(encoding="utf-8")
    assert "export finished" in text
    assert "[expense_tracker.services.export]" in text


def test_setup_logging_does_not_stack_handlers(restore_logging):
    setup_logging(sql_echo=False)
    setup_logging(sql_echo=False)
    assert len(logging.getLogger(APP_LOGGER_NAME).handlers) == 1


def test_sql_logger_quieted_unless_echo(restore_logging):
    logging.getLogger(SQL_LOGGER).setLevel(logging.NOTSET)
    setup_logging(third_party_log_level="ERROR", sql_echo=True)
    assert logging.getLogger(SQL_LOGGER).level == logging.NOTSET

    setup_logging(third_party_log_level="ERROR", sql_echo=False)
    assert logging.getLogger(SQL_LOGGER).level == logging.ERROR


def test_get_logger_nests_under_app_logger():
    assert get_logger("expense_tracker.crud").name == "expense_tracker.crud"
    assert get_logger("scripts.seed").name == "expense_tracker.scripts.seed"
