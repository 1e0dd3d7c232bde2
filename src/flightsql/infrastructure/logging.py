"""
Logging configuration for flightsql.

Uses Loguru as backend. Two entry points:
- setup_logging(): configures sinks once, at CLI or application startup
- get_logger(name): returns the global logger bound with a module name

Level conventions used across the package:

    DEBUG    - SQL text right before it is sent, connection parameters
               (never the password)
    INFO     - sessions opened and closed, tutorial steps started
    SUCCESS  - query executed, with row count and timing
    WARNING  - statement refused by the SQL guard, tutorial step failed
    ERROR    - driver failures translated into flightsql errors

Without setup_logging() Loguru keeps its default stderr sink, and records
bound by get_logger() still carry extra["name"].
"""

from loguru import logger
from pathlib import Path
import sys


# Flag to prevent multiple setups
_is_configured = False


def setup_logging(
    level: str = "DEBUG",
    console_level: str = "INFO",
    log_dir: str = "logs",
    log_filename: str = "flightsql.log"
) -> None:
    """
    Configure logging for the application.

    Call this function ONCE at startup. Subsequent calls are ignored.

    Args:
        level: Minimum level for the log FILE. Default: "DEBUG"
        console_level: Minimum level for the CONSOLE. Default: "INFO"
        log_dir: Directory for log files, created if missing
        log_filename: Name of the log file

    Example:
        from flightsql.infrastructure.logging import setup_logging

        setup_logging(console_level="WARNING")
    """
    global _is_configured

    if _is_configured:
        return

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger.remove()

    # timestamp | level | module:function:line | message
    log_format = (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
        "{level:<8} | "
        "{extra[name]}:{function}:{line} | "
        "{message}"
    )

    logger.add(
        sink=log_path / log_filename,
        level=level,
        format=log_format,
        rotation="50 MB",
        retention="7 days",
        encoding="utf-8",
    )

    console_format = (
        "<level>{level:<8}</level> | "
        "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan> | "
        "{message}"
    )

    logger.add(
        sink=sys.stderr,
        level=console_level,
        format=console_format,
        colorize=True,
    )

    _is_configured = True

    logger.bind(name="flightsql.infrastructure.logging").info(
        f"Logging configured - file={level}, console={console_level}, path={log_path / log_filename}"
    )


def get_logger(name: str):
    """
    Get the Loguru logger bound with a module name.

    Args:
        name: Module name. Always pass __name__.

    Returns:
        Loguru logger with extra["name"] set.
    """
    return logger.bind(name=name)
