# tests/unit/core/test_logging_config.py
import logging

from retailpulse.core.logging_config import QUIET_LOGGERS, configure_logging


def test_library_loggers_are_quieted():
    configure_logging("DEBUG")

    assert logging.getLogger("retailpulse").level == logging.DEBUG
    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_unknown_level_falls_back_to_info():
    configure_logging("chatty")
    assert logging.getLogger("retailpulse").level == logging.INFO
