"""Configuration loader with YAML and environment variable support.

Reads ~/.config/witstream/config.yaml (if present) and applies environment
variable overrides. A config file is optional when WIT_API_TOKEN is set.

Environment variables:
- WIT_API_TOKEN: Override api_token
- WITSTREAM_BASE_URL: Override base_url
- WITSTREAM_API_VERSION: Override api_version
- WITSTREAM_STRICT_STREAM_END: Override strict_stream_end ("1", "true", "yes")
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from witstream.constants import CURRENT_VERSION
from witstream.models.config import WitConfig, check_config_permissions


_TRUE_VALUES = {"1", "true", "yes", "on"}


def default_config_path() -> Path:
    """~/.config/witstream/config.yaml, resolved at call time."""
    return Path.home() / ".config" / "witstream" / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> WitConfig:
    """Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to config file. If None, uses ~/.config/witstream/config.yaml

    Returns:
        Validated WitConfig object

    Raises:
        FileNotFoundError: If there is neither a config file nor WIT_API_TOKEN
        PermissionError: If the config file is group/world accessible
        ValueError: If the configuration is invalid
    """
    if config_path is None:
        config_path = default_config_path()

    if config_path.exists():
        check_config_permissions(config_path)
        with config_path.open() as f:
            data = yaml.safe_load(f) or {}
    else:
        # No config file: environment variables must provide everything
        data = {}

    data = _apply_env_overrides(data)

    if "api_token" not in data:
        raise FileNotFoundError(
            f"Configuration file not found at {config_path} and WIT_API_TOKEN is not set.\n\n"
            f"Either set WIT_API_TOKEN or create the file with the following format:\n\n"
            f"api_token: YOUR_WIT_TOKEN_HERE\n"
            f"api_version: \"{CURRENT_VERSION}\"\n\n"
            f"Then run: chmod 600 {config_path}\n"
        )

    return WitConfig(**data)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply environment variable overrides to configuration data.

    Args:
        data: Base configuration dictionary from YAML

    Returns:
        Configuration dictionary with environment overrides applied
    """
    data = dict(data)

    if env_token := os.getenv("WIT_API_TOKEN"):
        data["api_token"] = env_token

    if env_base_url := os.getenv("WITSTREAM_BASE_URL"):
        data["base_url"] = env_base_url

    if env_version := os.getenv("WITSTREAM_API_VERSION"):
        data["api_version"] = env_version

    if env_strict := os.getenv("WITSTREAM_STRICT_STREAM_END"):
        data["strict_stream_end"] = env_strict.strip().lower() in _TRUE_VALUES

    return data
