# ABOUTME: Shared pytest fixtures
import logging

import pytest


@pytest.fixture
def app_logging():
    """Undo setup_logging's root handlers and level after a test."""
    root = logging.getLogger()
    saved_level = root.level
    yield root
    for handler in root.handlers[:]:
        if type(handler) in (logging.FileHandler, logging.StreamHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)
