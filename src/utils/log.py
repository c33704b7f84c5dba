"""
Logging setup shared by actions and applications.

Library modules only ever call logging.getLogger(__name__); they never
configure handlers. Entry points (actions/, main.py) call configure_logging()
once at startup, with the level and format taken from LoggingSettings.
"""

import logging
from typing import Optional

from src.config.settings import LoggingSettings, get_settings

ROOT_LOGGER_NAME = "src"


def configure_logging(settings: Optional[LoggingSettings] = None, force: bool = False) -> logging.Logger:
    """
    Configure root logging from LoggingSettings.

    Args:
        settings: LoggingSettings to apply. If omitted, uses get_settings().logging.
        force: Replace handlers already installed on the root logger.

    Returns:
        The package logger ("src"), set to the configured level.
    """
    settings = settings or get_settings().logging
    logging.basicConfig(
        level=settings.numeric_level,
        format=settings.format,
        force=force,
    )
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(settings.numeric_level)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger namespaced under the package logger.

    get_logger("actions.scan") -> logger "src.actions.scan"; names already
    under "src" are returned as-is.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
