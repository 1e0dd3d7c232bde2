"""
Configuration loading
=====================

Settings come from two places:
- environment variables, optionally seeded from a .env file (python-dotenv)
- a YAML file with dot-notation access

Example:
    >>> from flightsql.infrastructure.config import YamlConfig
    >>>
    >>> config = YamlConfig("config/flightsql.yaml")
    >>> db = config.get("databases.flights")
    >>> db["host"]
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

# Environment variable pointing at the YAML config file
CONFIG_PATH_ENV = "FLIGHTSQL_CONFIG_PATH"


def load_environment(dotenv_path: Optional[str] = None) -> bool:
    """
    Load a .env file into os.environ without overriding existing values.

    Returns:
        True if a .env file was found and loaded
    """
    return load_dotenv(dotenv_path=dotenv_path, override=False)


def config_path_from_env() -> Optional[str]:
    """Path of the YAML config file, if FLIGHTSQL_CONFIG_PATH is set"""
    value = os.getenv(CONFIG_PATH_ENV)
    return value or None


class YamlConfig:
    """
    Simple YAML loader with dot-notation access.

    Example:
        >>> config = YamlConfig("config/flightsql.yaml")
        >>> config.get("databases.flights")["database"]
    """

    def __init__(self, yaml_path: str):
        """
        Load the YAML file.

        Args:
            yaml_path: Path to the YAML file (absolute, or relative to the
                current working directory)

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file does not contain a mapping
        """
        path = Path(yaml_path).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            self._data = yaml.safe_load(f)

        if not isinstance(self._data, dict):
            raise ValueError(f"Invalid config: expected dict, got {type(self._data)}")

        self.path = path

    def get(self, path: str) -> Any:
        """
        Dot-notation access.

        Args:
            path: Dot-separated path (e.g. "databases.flights")

        Returns:
            Raw value (dict/list/primitive)

        Raises:
            KeyError: If path is not found
        """
        keys = path.split(".")
        current = self._data
        for key in keys:
            if not isinstance(current, dict) or key not in current:
                raise KeyError(f"Path '{path}' not found")
            current = current[key]
        return current

    def get_or_default(self, path: str, default: Any = None) -> Any:
        try:
            return self.get(path)
        except KeyError:
            return default
