"""
Unit tests for the logging helpers.
"""

import logging

from griddler.logging_utils import LOGGER_NAME, get_logger


class TestGetLogger:

    def test_base_logger(self):
        logger = get_logger()

        assert logger.name == LOGGER_NAME
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1

    def test_child_logger_shares_base_handler(self):
        child = get_logger("grid")
        get_logger("line")

        assert child.name == f"{LOGGER_NAME}.grid"
        assert child.handlers == []
        assert child.propagate
        assert len(logging.getLogger(LOGGER_NAME).handlers) == 1

    def test_child_records_reach_caplog(self, caplog):
        with caplog.at_level(logging.INFO, logger=LOGGER_NAME):
            get_logger("grid").info("hello")

        assert any(r.name == f"{LOGGER_NAME}.grid" and r.message == "hello" for r in caplog.records)
