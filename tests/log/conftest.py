"""Fixtures for logging tests."""

import os

import pytest


@pytest.fixture(autouse=True)
def restore_logger():
    """Restore the genaischema logger and log env vars after each test."""
    from genaischema._logging import logger

    handlers = logger.handlers[:]
    level = logger.level
    saved_format = os.environ.get("GENAISCHEMA_LOG_FORMAT")

    yield logger

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)

    if saved_format is None:
        os.environ.pop("GENAISCHEMA_LOG_FORMAT", None)
    else:
        os.environ["GENAISCHEMA_LOG_FORMAT"] = saved_format
