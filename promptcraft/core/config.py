"""Configuration management and loading"""

import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from promptcraft.core.errors import ConfigError
from promptcraft.models.config import PromptCraftConfig
from promptcraft.utils.files import get_user_config_dir

__all__ = ["ConfigError", "ConfigManager", "config_manager"]

# Environment variable -> (config section, key)
ENV_OVERRIDES = {
    "PROMPTCRAFT_PROMPTS_DIR": ("library", "prompts_dir"),
    "PROMPTCRAFT_STATE_PATH": ("usage", "state_path"),
    "PROMPTCRAFT_LOG_LEVEL": ("logging", "level"),
}


class ConfigManager:
    """Finds, validates and writes PromptCraft configuration files.

    Lookup order: an explicit path, then ``DEFAULT_CONFIG_PATHS`` in order,
    then built-in defaults. ``PROMPTCRAFT_*`` environment variables are
    applied on top of whichever source wins.
    """

    DEFAULT_CONFIG_PATHS = [
        Path("promptcraft.yaml"),
        Path("~/.promptcraft/config.yaml"),
        get_user_config_dir() / "config.yaml",
    ]

    def find_config_file(self) -> Path | None:
        """First existing file among the default locations"""
        for path in self.DEFAULT_CONFIG_PATHS:
            candidate = Path(path).expanduser()
            if candidate.is_file():
                return candidate
        return None

    def load_config(self, config_path: Path | None = None) -> PromptCraftConfig:
        """Load configuration from file or defaults"""
        if config_path is not None:
            config_path = Path(config_path)
            if not config_path.exists():
                raise ConfigError(f"Configuration file not found: {config_path}")
        else:
            config_path = self.find_config_file()

        if config_path is None:
            return self._load_default_config()
        return self._load_from_file(config_path)

    def _read_yaml(self, config_path: Path) -> dict:
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}")
        except OSError as e:
            raise ConfigError(f"Error loading configuration from {config_path}: {e}")

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Invalid configuration in {config_path}: expected a mapping"
            )
        return data

    def _load_from_file(self, config_path: Path) -> PromptCraftConfig:
        """Load configuration from YAML file"""
        config_data = self._apply_env_overrides(self._read_yaml(config_path))
        try:
            return PromptCraftConfig(**config_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {config_path}: {e}")

    def _load_default_config(self) -> PromptCraftConfig:
        """Built-in defaults with environment overrides"""
        try:
            return PromptCraftConfig(**self._apply_env_overrides({}))
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration from environment: {e}")

    def _apply_env_overrides(self, config_data: dict) -> dict:
        """Apply environment variable overrides"""
        for env_var, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if not value:
                continue
            section_data = config_data.setdefault(section, {})
            if not isinstance(section_data, dict):
                raise ConfigError(
                    f"Invalid configuration: '{section}' must be a mapping "
                    f"to apply {env_var}"
                )
            section_data[key] = value
        return config_data

    def save_config(self, config: PromptCraftConfig, config_path: Path) -> None:
        """Write configuration as YAML, paths as plain strings"""
        config_path = Path(config_path)
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w") as f:
                yaml.dump(
                    config.model_dump(mode="json"),
                    f,
                    default_flow_style=False,
                    sort_keys=False,
                )
        except OSError as e:
            raise ConfigError(f"Error saving configuration to {config_path}: {e}")


# Global config manager instance
config_manager = ConfigManager()
