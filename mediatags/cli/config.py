"""Configuration management for the CLI."""

import os
from pathlib import Path
from typing import Any

import yaml

DEFAULTS: dict[str, Any] = {
    "no_color": False,
    "width": 120,
    "expand_all": False,
    "untagged_label": "Untagged",
}


class Config:
    """Configuration management for the CLI application."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}")
        except OSError as e:
            raise ValueError(f"Error reading config file: {e}")
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths to check."""
        paths = []

        # User config
        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths.append(xdg_config_home / "mediatags" / "config.yaml")

        # Project config
        paths.append(Path(".mediatags.yaml"))
        paths.append(Path("mediatags.yaml"))

        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge multiple configuration dictionaries."""
        result = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def load_config(extra: Path | None = None) -> dict[str, Any]:
    """Load configuration from defaults, files and environment variables.

    Later sources win: defaults, then the default config paths, then
    ``extra``, then environment variables.
    """
    config = dict(DEFAULTS)

    for path in Config.get_config_paths():
        if path.exists():
            config = Config.merge_configs(config, Config.from_file(path))

    if extra is not None:
        config = Config.merge_configs(config, Config.from_file(extra))

    env_overrides: dict[str, Any] = {}
    if no_color := os.environ.get("MEDIATAGS_NO_COLOR"):
        env_overrides["no_color"] = no_color.lower() not in ("0", "false", "no", "")
    if width := os.environ.get("MEDIATAGS_WIDTH"):
        try:
            env_overrides["width"] = int(width)
        except ValueError:
            raise ValueError(f"MEDIATAGS_WIDTH must be an integer, got {width!r}")

    return Config.merge_configs(config, env_overrides)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
