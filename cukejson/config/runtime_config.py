"""Runtime configuration for the formatter.

Provides centralized access to validation, output and logging settings.
Environment variables take precedence over YAML config.

Usage:
    from cukejson.config.runtime_config import (
        get_input_schema,
        is_output_check_enabled,
        get_output_indent,
    )

    schema = get_input_schema()          # "messages.schema.json" or a path
    if is_output_check_enabled():
        ...

Environment variables:
    CUKEJSON_INPUT_SCHEMA   alternate input batch schema (name or path)
    CUKEJSON_OUTPUT_SCHEMA  alternate report schema (name or path)
    CUKEJSON_CHECK_OUTPUT   1/true/yes/on to validate the assembled report
    CUKEJSON_OUTPUT_INDENT  integer indent for the written report
    CUKEJSON_LOG_LEVEL      log level used by the CLI
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path(__file__).parent / "formatter.yaml"
_cached_config: Optional[Dict[str, Any]] = None

TRUTHY_VALUES = ("1", "true", "yes", "on")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_config() -> Dict[str, Any]:
    """Load formatter.yaml configuration, with caching."""
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH, encoding="utf-8") as f:
            _cached_config = yaml.safe_load(f) or _default_config()
    else:
        _cached_config = _default_config()

    return _cached_config


def _default_config() -> Dict[str, Any]:
    """Return default configuration if formatter.yaml doesn't exist."""
    return {
        "version": "1.0",
        "validation": {
            "input_schema": "messages.schema.json",
            "output_schema": "cucumber_report.schema.json",
            "check_output": False,
        },
        "output": {"indent": None},
        "logging": {"level": "INFO"},
    }


def reset_config() -> None:
    """Reset cached config (for testing)."""
    global _cached_config
    _cached_config = None


def _section(name: str) -> Dict[str, Any]:
    value = _load_config().get(name)
    return value if isinstance(value, dict) else {}


def get_input_schema() -> str:
    """Input batch schema, from CUKEJSON_INPUT_SCHEMA or config."""
    env_value = os.environ.get("CUKEJSON_INPUT_SCHEMA")
    if env_value:
        return env_value
    return _section("validation").get("input_schema") or "messages.schema.json"


def get_output_schema() -> str:
    """Report schema, from CUKEJSON_OUTPUT_SCHEMA or config."""
    env_value = os.environ.get("CUKEJSON_OUTPUT_SCHEMA")
    if env_value:
        return env_value
    return _section("validation").get("output_schema") or "cucumber_report.schema.json"


def is_output_check_enabled() -> bool:
    """Check if the assembled report should be validated before writing.

    Environment variable precedence (highest to lowest):
    1. CUKEJSON_CHECK_OUTPUT
    2. Config file value
    3. Default: False
    """
    env_value = os.environ.get("CUKEJSON_CHECK_OUTPUT")
    if env_value is not None:
        return env_value.strip().lower() in TRUTHY_VALUES
    return bool(_section("validation").get("check_output", False))


def get_output_indent() -> Optional[int]:
    """Indent for the written report; None means compact output.

    Logs a warning and returns None if an invalid value is configured.
    """
    env_value = os.environ.get("CUKEJSON_OUTPUT_INDENT")
    raw: Any = env_value if env_value else _section("output").get("indent")
    if raw is None or raw == "":
        return None
    try:
        indent = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid output indent '%s'. Falling back to compact output.", raw)
        return None
    if indent < 0:
        logger.warning("Output indent %d is negative. Falling back to compact output.", indent)
        return None
    return indent


def get_log_level() -> str:
    """Log level name for the CLI, from CUKEJSON_LOG_LEVEL or config."""
    raw = os.environ.get("CUKEJSON_LOG_LEVEL") or _section("logging").get("level") or "INFO"
    level = str(raw).upper()
    if level not in VALID_LOG_LEVELS:
        logger.warning(
            "Invalid log level '%s' (valid: %s). Falling back to 'INFO'.",
            raw,
            ", ".join(VALID_LOG_LEVELS),
        )
        return "INFO"
    return level
