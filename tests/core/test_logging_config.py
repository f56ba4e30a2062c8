"""Tests for logging setup."""

import logging

from finfamily_sync.core.logging_config import configure_logging


def test_configure_logging_adds_one_handler() -> None:
    root = configure_logging("debug")
    configure_logging(logging.WARNING)

    handlers = [h for h in root.handlers if getattr(h, "_finfamily", False)]
    assert len(handlers) == 1
    assert root.level == logging.WARNING
    assert root.name == "finfamily_sync"
