"""
schema_validator.py - JSON schema validation of message batches and reports.

Two schemas ship with the package under cukejson/schemas/:
- messages.schema.json: shape of the input envelope batch
- cucumber_report.schema.json: shape of the legacy report

The input batch is validated after assembly and before anything is written.
A violation is fatal: SchemaViolationError is raised and the conversion stops.
Report validation is optional (see config.runtime_config.is_output_check_enabled).

Usage:
    from cukejson.runtime.schema_validator import validate_batch, validate_report

    validate_batch(store.envelopes())
    validate_report(report_to_list(report))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import jsonschema

from cukejson.runtime.errors import SchemaLoadError, SchemaViolationError

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent.parent / "schemas"
MESSAGES_SCHEMA = "messages.schema.json"
REPORT_SCHEMA = "cucumber_report.schema.json"

# Cached bundled schemas to avoid repeated file reads
_SCHEMA_CACHE: Dict[str, Dict[str, Any]] = {}


def clear_schema_cache() -> None:
    """Reset cached schemas (for testing)."""
    _SCHEMA_CACHE.clear()


def _resolve_schema_path(name_or_path: Union[str, Path]) -> Path:
    path = Path(name_or_path)
    if not path.is_absolute() and len(path.parts) == 1 and (SCHEMA_DIR / path).exists():
        return SCHEMA_DIR / path
    return path


def load_schema(name_or_path: Union[str, Path] = MESSAGES_SCHEMA) -> Dict[str, Any]:
    """Load a schema document by bundled name or by path.

    Bundled schemas are cached; explicit paths are read every time.

    Raises:
        SchemaLoadError: If the file cannot be read, is not JSON, or is not
            a valid Draft 7 schema.
    """
    path = _resolve_schema_path(name_or_path)
    cacheable = path.parent == SCHEMA_DIR
    key = str(path)
    if cacheable and key in _SCHEMA_CACHE:
        return _SCHEMA_CACHE[key]

    logger.info("JSON schema path: %s", path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            schema = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise SchemaLoadError(f"Failed to load schema from {path}: {e}") from e

    try:
        jsonschema.Draft7Validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise SchemaLoadError(f"Invalid schema in {path}: {e.message}") from e

    if cacheable:
        _SCHEMA_CACHE[key] = schema
    return schema


def collect_schema_errors(instance: Any, schema: Dict[str, Any]) -> List[str]:
    """Validate an instance and return formatted error messages.

    Returns:
        Error messages ordered by location in the instance (empty if valid).
    """
    validator = jsonschema.Draft7Validator(schema)
    errors: List[str] = []
    for error in sorted(validator.iter_errors(instance), key=lambda e: e.json_path):
        errors.append(f"Validation error at {error.json_path}: {error.message}")
    return errors


def _validate(instance: Any, schema: Dict[str, Any], subject: str, log: logging.Logger) -> None:
    log.info("Start %s JSON schema validation...", subject)
    errors = collect_schema_errors(instance, schema)
    if errors:
        log.error("JSON schema validation failed for %s: %s", subject, errors)
        raise SchemaViolationError(errors, subject=subject)
    log.info("%s JSON schema validation passed!", subject.capitalize())


def validate_batch(
    envelopes: List[Dict[str, Any]],
    schema: Optional[Dict[str, Any]] = None,
    log: Optional[logging.Logger] = None,
) -> None:
    """Validate the input envelope batch.

    Raises:
        SchemaViolationError: If the batch does not conform.
    """
    if schema is None:
        schema = load_schema(MESSAGES_SCHEMA)
    _validate(envelopes, schema, "message batch", log or logger)


def validate_report(
    report: List[Dict[str, Any]],
    schema: Optional[Dict[str, Any]] = None,
    log: Optional[logging.Logger] = None,
) -> None:
    """Validate an assembled report (as plain data).

    Raises:
        SchemaViolationError: If the report does not conform.
    """
    if schema is None:
        schema = load_schema(REPORT_SCHEMA)
    _validate(report, schema, "report", log or logger)
