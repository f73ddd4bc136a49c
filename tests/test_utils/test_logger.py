"""Tests for logging setup"""

import logging

import pytest
from pythonjsonlogger import jsonlogger

from queue_monitor.utils.logger import ROOT_LOGGER, get_logger, setup_logger


@pytest.fixture(autouse=True)
def reset_root_logger():
    yield
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestSetupLogger:

    def test_json_format(self):
        logger = setup_logger({'monitor': {'log_format': 'json'}})

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, jsonlogger.JsonFormatter)

    def test_text_format_and_level(self):
        logger = setup_logger({'monitor': {'log_level': 'debug'}})

        assert logger.level == logging.DEBUG
        assert not isinstance(logger.handlers[0].formatter, jsonlogger.JsonFormatter)
        assert logging.getLogger('urllib3').level == logging.DEBUG

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / 'logs' / 'monitor.log'

        logger = setup_logger({'monitor': {'log_file': str(log_file)}})
        get_logger('Monitor').info("poll started")
        for handler in logger.handlers:
            handler.flush()

        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        assert "poll started" in log_file.read_text()

    def test_unwritable_file_falls_back_to_stdout(self, tmp_path):
        blocker = tmp_path / 'blocker'
        blocker.write_text("")

        logger = setup_logger({'monitor': {'log_file': str(blocker / 'monitor.log')}})

        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0], logging.FileHandler)

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logger({'monitor': {}})
        logger = setup_logger({'monitor': {}})

        assert len(logger.handlers) == 1
