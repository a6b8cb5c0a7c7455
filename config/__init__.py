"""
Configuration module for the counter service.
"""

from .defaults import DEFAULT_PORT, DEFAULT_RESET_TIMEZONE
from .loader import (
    env_overrides,
    get_config,
    load_config,
    load_config_file,
    merge_configs,
    parse_reset_time,
    strip_jsonc_comments,
)
from .settings import JsonBinConfig, ResetConfig, Settings

__all__ = [
    # Constants
    "DEFAULT_PORT",
    "DEFAULT_RESET_TIMEZONE",
    # Config models
    "Settings",
    "JsonBinConfig",
    "ResetConfig",
    # Loader functions
    "load_config",
    "get_config",
    "env_overrides",
    "load_config_file",
    "merge_configs",
    "parse_reset_time",
    "strip_jsonc_comments",
]
