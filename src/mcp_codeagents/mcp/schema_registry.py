"""Shared JSON schemas, their examples and tool argument validation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

from jsonschema import Draft7Validator, SchemaError, ValidationError

SCHEMA_DIR = Path(__file__).resolve().parents[1] / "schemas"
EXAMPLE_DIR = SCHEMA_DIR / "examples"

SchemaValidationError = ValidationError
"""Alias for jsonschema.ValidationError.
Keeps callers unaware of the implementation.
"""

InvalidSchemaError = SchemaError

SCHEMA_FILES = {
    "tool_response_v1": "tool_response_schema_v1.json",
    "tool_listing_v1": "tool_listing_schema_v1.json",
    "finding_v1": "finding_schema_v1.json",
    "agents_config_v1": "agents_config_schema_v1.json",
    "orchestration_report_v1": "orchestration_report_schema_v1.json",
}

EXAMPLE_FILES = {
    "tool_response_example_min": "tool_response_example_min.json",
    "tool_response_example_error": "tool_response_example_error.json",
    "tool_listing_example_min": "tool_listing_example_min.json",
    "finding_example_min": "finding_example_min.json",
    "agents_config_example_default": "agents_config_example_default.json",
    "orchestration_report_example_min": "orchestration_report_example_min.json",
}

EXAMPLE_SCHEMAS = {
    "tool_response_example_min": "tool_response_v1",
    "tool_response_example_error": "tool_response_v1",
    "tool_listing_example_min": "tool_listing_v1",
    "finding_example_min": "finding_v1",
    "agents_config_example_default": "agents_config_v1",
    "orchestration_report_example_min": "orchestration_report_v1",
}
"""Which registered schema each example document must satisfy."""

_SCHEMAS: dict[str, Mapping[str, Any]] = {}
_EXAMPLES: dict[str, Mapping[str, Any]] = {}


def _load_json_file(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def get_schema(name: str) -> Mapping[str, Any]:
    """Return the JSON schema with the given registry name."""

    if name not in _SCHEMAS:
        _SCHEMAS[name] = _load_json_file(SCHEMA_DIR / SCHEMA_FILES[name])
    return _SCHEMAS[name]


def get_example(name: str) -> Mapping[str, Any]:
    """Return a representative example payload by name."""

    if name not in _EXAMPLES:
        _EXAMPLES[name] = _load_json_file(EXAMPLE_DIR / EXAMPLE_FILES[name])
    return _EXAMPLES[name]


def validate(name: str, instance: Any) -> None:
    """Validate an instance against a named schema."""

    Draft7Validator(get_schema(name)).validate(instance)


def check_input_schema(schema: Mapping[str, Any]) -> None:
    """Raise ``InvalidSchemaError`` unless ``schema`` is valid Draft 7."""

    Draft7Validator.check_schema(schema)


def _location(error: ValidationError) -> str:
    path = ".".join(str(part) for part in error.absolute_path)
    return path or "(root)"


def argument_errors(
    schema: Mapping[str, Any], arguments: Mapping[str, Any]
) -> list[str]:
    """Return every violation of ``schema`` by ``arguments``, sorted by path."""

    validator = Draft7Validator(schema)
    errors = sorted(
        validator.iter_errors(arguments),
        key=lambda error: (list(map(str, error.absolute_path)), error.message),
    )
    return [f"{_location(error)}: {error.message}" for error in errors]
