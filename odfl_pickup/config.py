"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. explicit path argument
2. ./odfl_pickup.yaml (working directory)
3. ~/.odfl_pickup/config.yaml (user home)

Environment variables override YAML: ODFL_PICKUP_<FIELD>.
${VAR} references in YAML values resolve from environment at load time.

Example file:

    production_mode: false
    timeout: 15
    log_level: info
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from odfl_pickup.mode import (
    DEFAULT_ENDPOINT_URL,
    DEFAULT_TIMEOUT_SECONDS,
    ModeController,
    get_mode_controller,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "ODFL_PICKUP_"

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Args:
        value: String potentially containing ${VAR} references.

    Returns:
        String with all ${VAR} references replaced by their env values.
        Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class PickupConfig(BaseModel):
    """Settings for the pickup client process."""

    production_mode: bool = False
    timeout: float = Field(DEFAULT_TIMEOUT_SECONDS, gt=0)
    endpoint_url: str = DEFAULT_ENDPOINT_URL
    log_level: str = "info"


def _find_config_file() -> Path | None:
    """Search for config file in standard locations.

    Returns:
        Path to config file if found, None otherwise.
    """
    candidates = [
        Path.cwd() / "odfl_pickup.yaml",
        Path.cwd() / "odfl_pickup.yml",
        Path.home() / ".odfl_pickup" / "config.yaml",
        Path.home() / ".odfl_pickup" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply ODFL_PICKUP_<FIELD> env var overrides to config data.

    Args:
        data: Parsed YAML config dict.

    Returns:
        Config dict with env var overrides applied. Pydantic coerces the
        string values during validation.
    """
    for name in PickupConfig.model_fields:
        value = os.environ.get(ENV_PREFIX + name.upper())
        if value is not None:
            data[name] = value
    return data


def load_config(config_path: str | None = None) -> PickupConfig:
    """Load pickup configuration from YAML with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.odfl_pickup/).

    Returns:
        Validated PickupConfig. Defaults plus env overrides when no file
        is found.

    Raises:
        FileNotFoundError: If config_path is given but does not exist.
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    raw_data: dict[str, Any] = {}
    if path is not None:
        logger.info("Loading config from %s", path)
        with open(path) as f:
            raw_data = yaml.safe_load(f) or {}

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)
    return PickupConfig(**data)


def apply_config(config: PickupConfig, mode: ModeController | None = None) -> ModeController:
    """Push a loaded config into a mode controller.

    ``production_mode: false`` does not demote a controller that is
    already in production.

    Returns:
        The controller that was updated.
    """
    mode = mode or get_mode_controller()
    mode.set_timeout(config.timeout)
    mode.set_endpoint_url(config.endpoint_url)
    mode.set_production_mode(config.production_mode)
    return mode


def configure_logging(config: PickupConfig) -> None:
    """Set the package logger level from ``config.log_level``."""
    logging.getLogger("odfl_pickup").setLevel(config.log_level.upper())
