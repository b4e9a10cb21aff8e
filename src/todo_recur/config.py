"""Configuration management for the Todo Recur application."""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "~/.todo-recur"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or parsed."""


@dataclass
class ConfigModel:
    """Global configuration model for Todo Recur."""

    # File paths
    data_dir: str = DEFAULT_DATA_DIR
    tasks_file: str = "tasks.yaml"

    # Display preferences
    locale: str = "en"  # en, ja
    date_format: str = "%Y-%m-%d"
    default_filter: str = "all"  # all, today, planned, not_today
    no_color: bool = False

    # Behavior settings
    clear_spawn_flag_on_reopen: bool = True  # False keeps the flag set after un-completing
    log_level: str = "WARNING"

    def __post_init__(self):
        self.data_dir = os.path.expanduser(self.data_dir)

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        return yaml.safe_dump(data, default_flow_style=False, allow_unicode=True)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring unknown keys."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a YAML mapping")

        known = {f.name for f in fields(cls)}
        for key in sorted(set(data) - known):
            logger.warning("Ignoring unknown configuration key %r", key)
        return cls(**{k: v for k, v in data.items() if k in known})

    def get_tasks_path(self) -> Path:
        """Get the task snapshot file path."""
        return Path(self.data_dir) / self.tasks_file

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"


def default_config_path() -> Path:
    """Config file location, honouring ``TODO_RECUR_CONFIG``."""
    override = os.environ.get("TODO_RECUR_CONFIG")
    if override:
        return Path(override).expanduser()
    return ConfigModel().get_config_path()


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file, falling back to defaults when it is missing.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    if config_path is None:
        config_path = default_config_path()
    config_path = Path(config_path)

    if not config_path.exists():
        logger.debug("No configuration at %s, using defaults", config_path)
        return ConfigModel()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = ConfigModel.from_yaml(f.read())
    except (OSError, yaml.YAMLError, TypeError) as e:
        raise ConfigError(f"Failed to load config from {config_path}: {e}") from e

    logger.debug("Loaded configuration from %s", config_path)
    return config


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> Path:
    """Save configuration to file."""
    if config_path is None:
        config_path = config.get_config_path()
    config_path = Path(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        f.write(config.to_yaml())
    logger.info("Configuration saved to %s", config_path)
    return config_path
