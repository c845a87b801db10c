"""Fixtures compartidos: logging silencioso y aislado entre tests."""

import pytest

from launchkit.config.schema import LoggingConfig
from launchkit.logging import configure_logging


@pytest.fixture(autouse=True)
def quiet_logging():
    """Configura structlog sin handlers para que los tests no escriban en stderr."""
    configure_logging(LoggingConfig(), quiet=True)
    yield
    configure_logging(LoggingConfig(), quiet=True)
