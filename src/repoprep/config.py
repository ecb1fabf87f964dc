"""Configuration loading and validation."""

from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = ".repoprep.yaml"

DEFAULTS: dict[str, Any] = {
    "ref": "",
    "clean": True,
    "remove_on_failure": False,
}


class ConfigError(Exception):
    """Raised when config is invalid or not found."""
    pass


def find_config(start_dir: Path | None = None) -> Path:
    """Find .repoprep.yaml by searching upward from start_dir.

    Args:
        start_dir: Directory to start search from. Defaults to cwd.

    Returns:
        Path to the config file.

    Raises:
        ConfigError: If no config file found.
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = start_dir.resolve()

    while True:
        config_path = current / CONFIG_FILENAME
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            raise ConfigError(f"No {CONFIG_FILENAME} found")
        current = parent


def load_config(config_path: Path) -> dict[str, Any]:
    """Load and validate config from YAML file.

    Args:
        config_path: Path to the config file.

    Returns:
        Validated config dict with defaults applied.

    Raises:
        ConfigError: If config is invalid or unreadable.
    """
    try:
        with open(config_path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config: {e}") from e

    if config is None:
        raise ConfigError("Invalid config: empty file")

    return validate_config(config)


def validate_config(config: dict[str, Any]) -> dict[str, Any]:
    """Validate config structure and values.

    Args:
        config: Raw config dict.

    Returns:
        Validated config dict with defaults applied.

    Raises:
        ConfigError: If config is invalid.
    """
    if not isinstance(config, dict):
        raise ConfigError("Invalid config: expected mapping")

    # Check version
    if "version" not in config:
        raise ConfigError("Missing required field: version")

    if config["version"] != 1:
        raise ConfigError(f"Unsupported config version: {config['version']}")

    # Check repository section
    if "repository" not in config:
        raise ConfigError("Missing required field: repository")

    repository = config["repository"]
    if not isinstance(repository, dict):
        raise ConfigError("Invalid config: repository must be a mapping")

    if "url" not in repository:
        raise ConfigError("Missing required field: repository.url")

    for key in ("url", "path", "remote"):
        if key in repository and not isinstance(repository[key], str):
            raise ConfigError(f"Invalid config: repository.{key} must be a string")

    if "ref" in config and not isinstance(config["ref"], str):
        raise ConfigError("Invalid config: ref must be a string")

    for key in ("clean", "remove_on_failure"):
        if key in config and not isinstance(config[key], bool):
            raise ConfigError(f"Invalid config: {key} must be true or false")

    return {**DEFAULTS, **config}
