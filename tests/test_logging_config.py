"""
Tests for the logging setup.
"""

import logging

from tournament_scheduler.core.logging_config import setup_logging


def test_setup_logging_installs_one_stdout_handler():
    root = setup_logging(logging.DEBUG)

    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG
    assert logging.getLogger("tournament_scheduler").level == logging.DEBUG
    assert logging.getLogger("uvicorn").level == logging.WARNING

    setup_logging(logging.WARNING)
    assert len(root.handlers) == 1
    assert logging.getLogger("tournament_scheduler").level == logging.WARNING
