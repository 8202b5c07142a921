"""Embedded JSON Schema for the state machine configuration.

The schema is built once from the codec tables so the enumerated ``type``
values and their payload fields always match what the decoder accepts. It is
purely structural: required keys, value types and allowed discriminants. It
does not know whether a label exists or whether a timeout makes sense.

Extra properties are allowed everywhere so newer documents still validate
against older builds.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from jsonschema import Draft7Validator

from .codec import (
    ACTIONS,
    CONDITIONS,
    MAX_TIMEOUT_DAYS,
    STRING,
    TYPE_FIELD,
    UNSIGNED,
    VariantCodec,
)
from .schema_registry import get_schema_descriptor

SCHEMA_KEY = "$schema"
SCHEMA_URL = "http://json-schema.org/draft-07/schema#"

_PAYLOAD_TYPES: dict[str, dict[str, Any]] = {
    STRING: {"type": "string"},
    UNSIGNED: {"type": "integer", "minimum": 0, "maximum": MAX_TIMEOUT_DAYS},
}


@dataclass(frozen=True)
class SchemaViolation:
    """One structural defect: where it is and what is wrong."""

    pointer: str
    message: str
    validator: str

    def __str__(self) -> str:
        return f"{self.message} at {self.pointer or '/'}"

    def as_dict(self) -> dict[str, str]:
        return {"pointer": self.pointer, "message": self.message, "validator": self.validator}


def _variant_schema(codec: VariantCodec, title: str) -> dict[str, Any]:
    properties: dict[str, Any] = {
        TYPE_FIELD: {"type": "string", "enum": list(codec.tags)},
    }
    rules: list[dict[str, Any]] = []
    for spec in codec.specs:
        if spec.field is None:
            continue
        properties.setdefault(spec.field, dict(_PAYLOAD_TYPES[spec.kind]))
        rules.append(
            {
                "if": {
                    "required": [TYPE_FIELD],
                    "properties": {TYPE_FIELD: {"const": spec.tag}},
                },
                "then": {"required": [spec.field]},
            }
        )
    return {
        "title": title,
        "type": "object",
        "required": [TYPE_FIELD],
        "properties": properties,
        "allOf": rules,
    }


def _build_config_schema() -> dict[str, Any]:
    descriptor = get_schema_descriptor("config")
    return {
        SCHEMA_KEY: SCHEMA_URL,
        "$comment": f"issuebot config schema v{descriptor.version}",
        "title": "StateMachine",
        "type": "object",
        "required": ["states"],
        "properties": {
            "states": {"type": "array", "items": {"$ref": "#/definitions/state"}},
        },
        "definitions": {
            "state": {
                "type": "object",
                "required": ["label", "description", "transitions"],
                "properties": {
                    "label": {"type": "string"},
                    "description": {"type": "string"},
                    "transitions": {
                        "type": "array",
                        "items": {"$ref": "#/definitions/transition"},
                    },
                },
            },
            "transition": {
                "type": "object",
                "required": ["description", "conditions", "actions"],
                "properties": {
                    "description": {"type": "string"},
                    "conditions": {
                        "type": "array",
                        "items": {"$ref": "#/definitions/condition"},
                    },
                    "actions": {
                        "type": "array",
                        "items": {"$ref": "#/definitions/action"},
                    },
                },
            },
            "condition": _variant_schema(CONDITIONS, "Condition"),
            "action": _variant_schema(ACTIONS, "Action"),
        },
    }


_CONFIG_SCHEMA = _build_config_schema()


def get_config_schema() -> dict[str, Any]:
    """Return a copy of the embedded configuration schema."""
    return copy.deepcopy(_CONFIG_SCHEMA)


def get_schemas() -> dict[str, Any]:
    """Return a mapping of schema name -> JSON Schema dictionary."""
    return {"config": get_config_schema()}


@lru_cache(maxsize=1)
def _config_validator() -> Draft7Validator:
    Draft7Validator.check_schema(_CONFIG_SCHEMA)
    return Draft7Validator(_CONFIG_SCHEMA)


def _escape_token(part: Any) -> str:
    return str(part).replace("~", "~0").replace("/", "~1")


def _path_sort_key(path: Any) -> tuple[tuple[int, int, str], ...]:
    return tuple((0, p, "") if isinstance(p, int) else (1, 0, str(p)) for p in path)


def validate_document(raw: Any) -> list[SchemaViolation]:
    """Validate a parsed document, returning every violation (empty when valid).

    Violations are ordered by their location in the document with array
    indices compared numerically.
    """
    errors = sorted(
        _config_validator().iter_errors(raw),
        key=lambda err: _path_sort_key(err.absolute_path),
    )
    return [
        SchemaViolation(
            pointer="".join(f"/{_escape_token(p)}" for p in err.absolute_path),
            message=err.message,
            validator=str(err.validator),
        )
        for err in errors
    ]


__all__ = [
    "SCHEMA_URL",
    "SchemaViolation",
    "get_config_schema",
    "get_schemas",
    "validate_document",
]
