"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module only
configures the root handler once, at application startup.
"""

import logging

from ledger.config import settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging() -> None:
    """Configure the root logger from settings (DEBUG overrides LOG_LEVEL)."""
    level = logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
