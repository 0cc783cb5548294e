"""YAML configuration for autolend.

A configuration file holds nested mappings; settings are addressed with
dot-separated keys such as ``strategy.minimum_balance``. Sections that other
components consume as a whole (``strategy``, ``portfolio``) are taken out
with Config.section().
"""

from pathlib import Path
from typing import Any

import yaml

from autolend.utils.exceptions import ConfigurationError

PROJECT_ROOT = Path(__file__).parent.parent.parent
DEFAULT_CONFIG = PROJECT_ROOT / "config" / "strategy.yaml"


class Config:
    """Read-only view of a nested configuration mapping.

    Example:
        >>> config = Config.from_file("config/strategy.yaml")
        >>> minimum_balance = config.get("strategy.minimum_balance", 0)
        >>> strategy = config.section("strategy")
        >>> strategy.get("defaults.max_loan_share")
        0.01
    """

    def __init__(self, config_dict: dict[str, Any]) -> None:
        self._config = config_dict

    @classmethod
    def from_file(cls, filepath: str | Path) -> "Config":
        """Load configuration from YAML file.

        An empty file gives an empty configuration.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If the file is not valid YAML or not a mapping
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {filepath}")

        with open(path, "r", encoding="utf-8") as f:
            try:
                config_dict = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in {filepath}: {e}") from e

        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError(
                f"Configuration file {filepath} must contain a mapping, "
                f"got {type(config_dict).__name__}"
            )

        return cls(config_dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a value by dot-separated key.

        Missing keys, explicit nulls and paths through non-mappings all give
        the default.

        Example:
            >>> config.get("strategy.investment_ceiling")
            150000
            >>> config.get("missing.key", "fallback")
            'fallback'
        """
        value: Any = self._config
        for part in key.split("."):
            if not isinstance(value, dict):
                return default
            value = value.get(part)
            if value is None:
                return default
        return value

    def section(self, key: str) -> "Config":
        """Take out a nested mapping as its own Config.

        Raises:
            ConfigurationError: If the key is missing or not a mapping
        """
        value = self.get(key)
        if not isinstance(value, dict):
            raise ConfigurationError(f"Configuration has no '{key}' section")
        return Config(value)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __getitem__(self, key: str) -> Any:
        """Look up a required value.

        Raises:
            KeyError: If key not found
        """
        value = self.get(key)
        if value is None:
            raise KeyError(f"Configuration key not found: {key}")
        return value

    def to_dict(self) -> dict[str, Any]:
        """Get the full configuration as dictionary."""
        return self._config.copy()


def load_config(filepath: str | Path | None = None) -> Config:
    """Load a configuration file, ``config/strategy.yaml`` by default."""
    return Config.from_file(DEFAULT_CONFIG if filepath is None else filepath)
