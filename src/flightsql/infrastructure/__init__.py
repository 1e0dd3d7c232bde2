"""
Infrastructure module - Logging and configuration loading.
"""

from flightsql.infrastructure.config import YamlConfig, load_environment
from flightsql.infrastructure.logging import setup_logging, get_logger

__all__ = [
    "YamlConfig",
    "load_environment",
    "setup_logging",
    "get_logger",
]
