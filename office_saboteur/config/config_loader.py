"""
Configuration loader for YAML-based server configurations.
"""

import os
import yaml
from dataclasses import replace
from pathlib import Path
from typing import Optional

from .game_config import GameConfig, default_config


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        GameConfig instance with values from YAML file

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        return replace(default_config)

    # Create config from dict, using defaults for missing values
    config = GameConfig()

    for key, value in config_dict.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            # Warn about unknown keys but don't fail
            print(f"Warning: Unknown config key '{key}' in YAML file")

    return config


def apply_env_overrides(config: GameConfig) -> GameConfig:
    """Override host and port from the HOST and PORT environment variables."""
    if os.environ.get("PORT"):
        config.port = int(os.environ["PORT"])
    if os.environ.get("HOST"):
        config.host = os.environ["HOST"]
    return config


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load configuration from YAML file or return a copy of the default.

    Environment overrides are applied in both cases.
    """
    if config_path is None:
        config = replace(default_config)
    else:
        config = load_config_from_yaml(config_path)

    return apply_env_overrides(config)
