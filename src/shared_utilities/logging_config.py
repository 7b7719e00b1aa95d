"""
Loguru setup for the advisory updater.

Console output always goes to stderr; a rotating JSON log file is added when
ENABLE_FILE_LOGGING is true.
"""

import os
import sys
from pathlib import Path
from typing import Any

from loguru import logger

SERVICE_NAME = "branch-freshness-advisory"

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> | "
    "<level>{message}</level> | {extra}"
)


class LoggingManager:
    """Owns the loguru handlers for one process."""

    def __init__(self, service_name: str = SERVICE_NAME):
        self.service_name = service_name

    def configure_logging(
        self,
        level: str = "INFO",
        enable_file_logging: bool = False,
        log_file_path: Path | None = None,
    ) -> None:
        """
        Replace any existing handlers with the advisory updater's.

        Args:
            level: Minimum level (DEBUG, INFO, WARNING, ERROR)
            enable_file_logging: Also write serialized records to a file
            log_file_path: Log file; defaults to logs/<service>.log under cwd
        """
        logger.remove()
        logger.configure(extra={"service_name": self.service_name, "component": "-"})
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=level,
            colorize=True,
            diagnose=False,
        )

        if enable_file_logging:
            if log_file_path is None:
                log_file_path = Path.cwd() / "logs" / f"{self.service_name}.log"
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            logger.add(
                str(log_file_path),
                level=level,
                rotation="10 MB",
                retention="30 days",
                compression="gz",
                diagnose=False,
                serialize=True,
            )

        logger.debug("Logging configured", level=level, file_logging=enable_file_logging)

    def get_logger(self, name: str) -> Any:
        """Return the shared logger bound to ``name`` as its component."""
        return logger.bind(component=name)


_logging_manager: LoggingManager | None = None


def get_logging_manager() -> LoggingManager:
    global _logging_manager
    if _logging_manager is None:
        _logging_manager = LoggingManager()
    return _logging_manager


def configure_logging(
    level: str | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure logging, filling unset options from LOG_LEVEL and ENABLE_FILE_LOGGING.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()
    if enable_file_logging is None:
        enable_file_logging = os.getenv("ENABLE_FILE_LOGGING", "false").lower() == "true"

    get_logging_manager().configure_logging(
        level=level, enable_file_logging=enable_file_logging
    )


def get_logger(name: str) -> Any:
    return get_logging_manager().get_logger(name)
