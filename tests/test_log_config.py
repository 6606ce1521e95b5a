import logging
from logging.handlers import TimedRotatingFileHandler

import pytest

from adclient import log_config


@pytest.fixture(autouse=True)
def restore_root():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def _ours():
    return [h for h in logging.getLogger().handlers if h in (log_config._console_handler, log_config._file_handler)]


def test_console_only():
    log_config.setup_logging(level="debug")
    assert logging.getLogger().level == logging.DEBUG
    assert len(_ours()) == 1
    assert logging.getLogger("ldap3").level == logging.WARNING


def test_invalid_level_falls_back_to_info():
    log_config.setup_logging(level="verbose")
    assert logging.getLogger().level == logging.INFO


def test_file_handler_and_reconfigure(tmp_path):
    log_file = tmp_path / "logs" / "adclient.log"
    log_config.setup_logging(level="INFO", log_file=str(log_file))
    assert isinstance(log_config._file_handler, TimedRotatingFileHandler)
    assert log_file.parent.is_dir()

    log_config.setup_logging(level="WARNING")
    assert log_config._file_handler is None
    assert len(_ours()) == 1
