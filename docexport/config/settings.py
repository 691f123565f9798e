"""Configuration utilities for docexport."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..exceptions import ConfigurationError
from .constants import (
    DEFAULT_API_VERSION,
    DEFAULT_DATASET,
    DOCEXPORT_CONFIG_DIR,
    ENV_VAR_DEFINITIONS,
)


@dataclass(frozen=True)
class StoreSettings:
    """Connection settings for the document store."""

    project_id: str
    dataset: str = DEFAULT_DATASET
    api_version: str = DEFAULT_API_VERSION
    token: Optional[str] = None
    use_cdn: bool = False


def get_config_dir() -> Path:
    """Get the configuration directory, respecting DOCEXPORT_CONFIG_DIR.

    Tests point DOCEXPORT_CONFIG_DIR at a temp directory so log files never
    land in the real home directory.
    """
    override = os.environ.get("DOCEXPORT_CONFIG_DIR")
    config_dir = Path(override) if override else DOCEXPORT_CONFIG_DIR
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def validate_env_var(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a single environment variable value.

    Args:
        name: The environment variable name.
        value: The current value (or None if not set).

    Returns:
        Tuple of (is_valid, error_message).
    """
    if name not in ENV_VAR_DEFINITIONS:
        return True, None  # Unknown vars are always valid

    valid_values = ENV_VAR_DEFINITIONS[name].get("valid_values")

    if value is None or valid_values is None:
        return True, None

    if value.lower() not in [v.lower() for v in valid_values]:
        return False, f"Invalid value '{value}' for {name}. Valid values: {valid_values}"

    return True, None


def validate_all_env_vars() -> List[str]:
    """Validate all DOCEXPORT environment variables.

    Returns:
        List of error messages (empty if all valid).
    """
    errors = []
    for name in ENV_VAR_DEFINITIONS:
        is_valid, error = validate_env_var(name, os.environ.get(name))
        if not is_valid:
            errors.append(error)
    return errors


def get_env_var(name: str, validate: bool = True) -> Optional[str]:
    """Get an environment variable with optional validation.

    Args:
        name: The environment variable name.
        validate: Whether to validate the value against known definitions.

    Returns:
        The environment variable value, its default, or None.

    Raises:
        ConfigurationError: If validate=True and the value is invalid.
    """
    value = os.environ.get(name)

    if validate and value is not None:
        is_valid, error = validate_env_var(name, value)
        if not is_valid:
            raise ConfigurationError(error, setting=name)

    if value is None and name in ENV_VAR_DEFINITIONS:
        return ENV_VAR_DEFINITIONS[name].get("default")

    return value


def get_env_info() -> Dict[str, Dict]:
    """Get information about all DOCEXPORT environment variables.

    Sensitive values are masked to their first four characters.
    """
    info = {}
    for name, definition in ENV_VAR_DEFINITIONS.items():
        value = os.environ.get(name)
        is_valid, _ = validate_env_var(name, value)

        display_value = value
        if value and definition.get("sensitive"):
            display_value = value[:4] + "..." if len(value) > 4 else "***"

        info[name] = {
            "description": definition.get("description", ""),
            "value": display_value,
            "is_set": value is not None,
            "valid": is_valid,
            "default": definition.get("default"),
            "sensitive": definition.get("sensitive", False),
        }
    return info


def get_store_settings() -> StoreSettings:
    """Build store settings from the environment.

    Raises:
        ConfigurationError: If no project id is configured or a value is invalid.
    """
    project_id = get_env_var("DOCEXPORT_PROJECT_ID")
    if not project_id or not project_id.strip():
        raise ConfigurationError(
            "No document store project configured. Set DOCEXPORT_PROJECT_ID.",
            setting="DOCEXPORT_PROJECT_ID",
        )

    return StoreSettings(
        project_id=project_id.strip(),
        dataset=get_env_var("DOCEXPORT_DATASET") or DEFAULT_DATASET,
        api_version=get_env_var("DOCEXPORT_API_VERSION") or DEFAULT_API_VERSION,
        token=get_env_var("DOCEXPORT_TOKEN") or None,
        use_cdn=(get_env_var("DOCEXPORT_USE_CDN") or "false").lower() == "true",
    )


def get_output_dir() -> Path:
    """Directory export files are written to by default."""
    return Path(get_env_var("DOCEXPORT_OUTPUT_DIR") or ".").expanduser()


def get_configured_types() -> List[str]:
    """Explicit document types from DOCEXPORT_DOCUMENT_TYPES, if any."""
    raw = get_env_var("DOCEXPORT_DOCUMENT_TYPES") or ""
    return [t.strip() for t in raw.split(",") if t.strip()]
