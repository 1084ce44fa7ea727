"""Configuration management for GroGetter."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .grocery_store import DEFAULT_LIST_NAME
from .kv_store import BackendType
from .models import DEFAULT_CATEGORY_NAME, QuantityUnit


@dataclass
class DataConfig:
    """Data storage configuration."""

    storage_dir: Path
    backend: str = BackendType.JSON.value


@dataclass
class DefaultsConfig:
    """Default values configuration."""

    list_name: str = DEFAULT_LIST_NAME
    category: str = DEFAULT_CATEGORY_NAME
    unit: str = QuantityUnit.PIECE.value
    seed_default_list: bool = True


@dataclass
class Config:
    """Complete application configuration."""

    data: DataConfig
    defaults: DefaultsConfig


class ConfigManager:
    """Manages application configuration from TOML files."""

    def __init__(self, config_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional explicit path to config file.
                        If not provided, searches standard locations.
        """
        self.config_path = config_path or self._find_config()
        self._config = self._load_config()

    @property
    def data(self) -> DataConfig:
        """Get data configuration."""
        return self._config.data

    @property
    def defaults(self) -> DefaultsConfig:
        """Get defaults configuration."""
        return self._config.defaults

    def _find_config(self) -> Path:
        """Find config file in standard locations."""
        locations = [
            Path.cwd() / "config.toml",
            Path.home() / ".config" / "grogetter" / "config.toml",
            Path.home() / ".grogetter" / "config.toml",
        ]

        for loc in locations:
            if loc.exists():
                return loc

        # Return default location if none found
        return Path.home() / ".config" / "grogetter" / "config.toml"

    def _load_config(self) -> Config:
        """Load configuration from TOML file."""
        if not self.config_path.exists():
            return self._default_config()

        with open(self.config_path, "rb") as f:
            data = tomllib.load(f)

        data_section = data.get("data", {})
        defaults_section = data.get("defaults", {})
        return Config(
            data=DataConfig(
                storage_dir=Path(
                    data_section.get("storage_dir", "~/grogetter/data")
                ).expanduser(),
                backend=data_section.get("backend", BackendType.JSON.value),
            ),
            defaults=DefaultsConfig(
                list_name=defaults_section.get("list_name", DEFAULT_LIST_NAME),
                category=defaults_section.get("category", DEFAULT_CATEGORY_NAME),
                unit=defaults_section.get("unit", QuantityUnit.PIECE.value),
                seed_default_list=defaults_section.get("seed_default_list", True),
            ),
        )

    def _default_config(self) -> Config:
        """Return default configuration."""
        return Config(
            data=DataConfig(storage_dir=Path.home() / "grogetter" / "data"),
            defaults=DefaultsConfig(),
        )

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get config value by dot-notation path.

        Args:
            key_path: Dot-separated path like 'data.storage_dir'
            default: Default value if path not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split(".")
        value: Any = self._config

        for key in keys:
            if hasattr(value, key):
                value = getattr(value, key)
            elif isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default

        return value if value is not None else default
