"""Configuration loading utilities."""

import json
import logging
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

from .defaults import CONFIG_FILENAMES, DEFAULT_CORS_ORIGINS
from .settings import Settings

logger = logging.getLogger(__name__)

RESET_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")

# String literals are matched first so comment markers inside them survive
JSONC_TOKEN_PATTERN = re.compile(r'("(?:\\.|[^"\\])*")|//[^\n]*|/\*.*?\*/', re.DOTALL)


def _keep_strings(match: re.Match[str]) -> str:
    literal = match.group(1)
    return literal if literal is not None else ""


def strip_jsonc_comments(content: str) -> str:
    """
    Strip comments from JSONC content to convert to valid JSON.

    Handles:
    - Single-line comments, whole-line or trailing: // comment
    - Multi-line comments: /* comment */

    Comment markers inside string values (such as URLs) are left alone.

    Args:
        content: JSONC content string

    Returns:
        JSON string with comments removed
    """
    return JSONC_TOKEN_PATTERN.sub(_keep_strings, content)


def load_config_file(path: Path) -> dict[str, Any] | None:
    """
    Load a config file from the given path.

    Supports both .json and .jsonc files with comment stripping.

    Args:
        path: Path to the config file

    Returns:
        Parsed config dictionary or None if the file is missing or invalid
    """
    if not path.exists():
        return None

    try:
        content = path.read_text()
        if path.suffix == ".jsonc":
            content = strip_jsonc_comments(content)
        data = json.loads(content)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level must be an object", path)
        return None
    return data


def parse_reset_time(value: str) -> tuple[int, int]:
    """Parse ``HH:MM`` into an (hour, minute) pair."""
    match = RESET_TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"RESET_TIME must be HH:MM, got {value!r}")
    return int(match.group(1)), int(match.group(2))


def env_overrides(env: dict[str, str] | None = None) -> dict[str, Any]:
    """
    Collect configuration overrides from environment variables.

    Args:
        env: Environment mapping (defaults to os.environ)

    Returns:
        Partial config dictionary shaped like Settings
    """
    env = dict(os.environ) if env is None else env
    data: dict[str, Any] = {}

    if "COUNTER_STORAGE" in env:
        data["storage"] = env["COUNTER_STORAGE"].strip().lower()
    if "COUNTER_DB_PATH" in env:
        data["sqlite_path"] = env["COUNTER_DB_PATH"]

    jsonbin: dict[str, Any] = {}
    if "BIN_ID" in env:
        jsonbin["bin_id"] = env["BIN_ID"]
    if "API_KEY" in env:
        jsonbin["api_key"] = env["API_KEY"]
    if jsonbin:
        data["jsonbin"] = jsonbin

    reset: dict[str, Any] = {}
    if "RESET_TIME" in env:
        reset["hour"], reset["minute"] = parse_reset_time(env["RESET_TIME"])
    if "RESET_TIMEZONE" in env:
        reset["timezone"] = env["RESET_TIMEZONE"]
    if "RESET_ENABLED" in env:
        reset["enabled"] = env["RESET_ENABLED"].strip().lower() in ("1", "true", "yes")
    if reset:
        data["reset"] = reset

    if "HOST" in env:
        data["host"] = env["HOST"]
    if "PORT" in env:
        data["port"] = int(env["PORT"])
    if "CORS_ORIGINS" in env:
        origins = env["CORS_ORIGINS"]
        data["cors_origins"] = (
            [origin.strip() for origin in origins.split(",") if origin.strip()]
            if origins != DEFAULT_CORS_ORIGINS
            else [DEFAULT_CORS_ORIGINS]
        )
    if "LOG_LEVEL" in env:
        data["log_level"] = env["LOG_LEVEL"]

    return data


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two configuration dictionaries.

    Args:
        base: Base configuration
        override: Override configuration (takes precedence)

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def load_config(
    project_root: Path | None = None, env: dict[str, str] | None = None
) -> Settings:
    """
    Load configuration from the project config file and the environment.

    The first of counter.jsonc / counter.json found in the project root is
    used; environment variables take precedence over it.

    Args:
        project_root: Project root directory (defaults to current working directory)
        env: Environment mapping (defaults to os.environ)

    Returns:
        Validated Settings model
    """
    if project_root is None:
        project_root = Path.cwd()

    config_data: dict[str, Any] = {}
    for filename in CONFIG_FILENAMES:
        file_data = load_config_file(project_root / filename)
        if file_data:
            config_data = file_data
            break

    config_data = merge_configs(config_data, env_overrides(env))
    return Settings(**config_data)


@lru_cache(maxsize=1)
def get_config(project_root: Path | None = None) -> Settings:
    """
    Get cached configuration.

    To reload the config, clear the cache with get_config.cache_clear().
    """
    return load_config(project_root or Path.cwd())
