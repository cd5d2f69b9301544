"""Tests for settings and logging setup."""

import logging

import pytest

from obraledger.config import Settings, load_settings
from obraledger.domain.errors import ValidationError
from obraledger.logging_config import HANDLER_TAG, setup_logging


def test_load_settings_defaults():
    settings = load_settings({})
    assert settings == Settings()
    assert settings.log_level == "WARNING"
    assert settings.database_path is None


def test_load_settings_from_environment():
    settings = load_settings(
        {
            "OBRALEDGER_DB_PATH": "/tmp/ledger.db",
            "OBRALEDGER_LOG_LEVEL": "debug",
            "OBRALEDGER_LOG_FILE": "/tmp/obraledger.log",
            "OBRALEDGER_CHART": "/tmp/chart.json",
        }
    )

    assert settings.database_path == "/tmp/ledger.db"
    assert settings.log_level == "DEBUG"
    assert settings.log_level_number == logging.DEBUG
    assert settings.log_file == "/tmp/obraledger.log"
    assert settings.chart_path == "/tmp/chart.json"


def test_invalid_log_level():
    with pytest.raises(ValidationError, match="log level"):
        load_settings({"OBRALEDGER_LOG_LEVEL": "chatty"})


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_setup_logging_writes_log_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "obraledger.log"

    setup_logging("INFO", log_file)
    logging.getLogger("obraledger.test").info("entry recorded")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert "entry recorded" in log_file.read_text(encoding="utf-8")
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_setup_logging_replaces_its_own_handlers(restore_root_logger):
    setup_logging("WARNING")
    setup_logging("ERROR")

    ours = [h for h in restore_root_logger.handlers if getattr(h, HANDLER_TAG, False)]
    assert len(ours) == 1
    assert ours[0].level == logging.ERROR
