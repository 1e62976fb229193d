"""
Service Logger Setup

Configures stdlib logging for a service from LoggingConfig.

Usage:
    from core.logger import setup_service_logger

    logger = setup_service_logger("campaign_conflict_service")
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from core.config.logging_config import LoggingConfig

_DRIVER_LOGGERS = ("asyncpg", "nats", "nats.aio.client")


def setup_service_logger(
    service_name: str,
    level: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure root handlers once and return the service logger.

    Args:
        service_name: Logger name for the service
        level: Override for the configured log level
        config: Logging configuration (defaults to environment)

    Returns:
        Logger named after the service
    """
    config = config or LoggingConfig.from_env()
    log_level = getattr(logging, (level or config.log_level).upper(), logging.INFO)
    formatter = logging.Formatter(config.log_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Replace handlers so repeated setup does not duplicate output
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if config.enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if config.quiet_drivers and log_level > logging.DEBUG:
        for name in _DRIVER_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(service_name)
    logger.debug(f"Logging configured for {service_name} at {logging.getLevelName(log_level)}")
    return logger


__all__ = ["setup_service_logger"]
