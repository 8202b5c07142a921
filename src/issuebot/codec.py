"""Tagged-union codec for conditions and actions.

On the wire (YAML/JSON) a condition or action is a flat mapping: a ``type``
discriminant plus whichever payload field that type owns::

    {"type": "timeout", "timeout": 10}
    {"type": "add-label", "label": "stale"}
    {"type": "close"}

In memory each one is a dedicated frozen dataclass from :mod:`issuebot.models`.
This module is the only place that knows how the two shapes map onto each
other. Decoding never trusts that schema validation already ran: a missing
payload is a :class:`MissingFieldError`, not a crash. Payload fields that the
resolved type does not own are ignored.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .errors import DecodeError, InvalidFieldError, MissingFieldError, UnknownVariantError
from .models import (
    Action,
    Activity,
    AddLabel,
    Close,
    Command,
    Condition,
    Label,
    PostComment,
    PullRequest,
    RemoveLabel,
    ReplaceLabel,
    Timeout,
)

TYPE_FIELD = "type"
MAX_TIMEOUT_DAYS = 65535

STRING = "string"
UNSIGNED = "unsigned"


@dataclass(frozen=True)
class VariantSpec:
    name: str
    tag: str
    cls: type[Any]
    field: str | None = None  # wire payload field
    attr: str | None = None  # dataclass attribute holding the payload
    kind: str = STRING


def _check_payload(spec: VariantSpec, field: str, value: Any) -> Any:
    if spec.kind == UNSIGNED:
        # bool is an int subclass; `timeout: true` must not become 1 day
        if isinstance(value, bool):
            raise InvalidFieldError(spec.name, field, "an integer", value)
        # draft 7 "integer" accepts 10.0, so the decoder must too
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if not isinstance(value, int):
            raise InvalidFieldError(spec.name, field, "an integer", value)
        if not 0 <= value <= MAX_TIMEOUT_DAYS:
            raise InvalidFieldError(
                spec.name, field, f"between 0 and {MAX_TIMEOUT_DAYS}", value
            )
        return value
    if not isinstance(value, str):
        raise InvalidFieldError(spec.name, field, "a string", value)
    return value


class VariantCodec:
    """Bidirectional mapping for one closed family of variants."""

    def __init__(self, family: str, specs: Iterable[VariantSpec]) -> None:
        self.family = family
        self.specs: tuple[VariantSpec, ...] = tuple(specs)
        self._by_tag = {spec.tag: spec for spec in self.specs}
        self._by_cls = {spec.cls: spec for spec in self.specs}

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(spec.tag for spec in self.specs)

    def decode(self, value: Any) -> Any:
        if not isinstance(value, Mapping):
            raise DecodeError(
                f"{self.family} must be a mapping, got {type(value).__name__}"
            )
        if value.get(TYPE_FIELD) is None:
            raise MissingFieldError(self.family, TYPE_FIELD)
        tag = value[TYPE_FIELD]
        spec = self._by_tag.get(tag) if isinstance(tag, str) else None
        if spec is None:
            raise UnknownVariantError(self.family, tag)
        if spec.field is None or spec.attr is None:
            return spec.cls()
        payload = value.get(spec.field)
        if payload is None:
            raise MissingFieldError(spec.name, spec.field)
        return spec.cls(**{spec.attr: _check_payload(spec, spec.field, payload)})

    def encode(self, variant: Any) -> dict[str, Any]:
        spec = self._by_cls.get(type(variant))
        if spec is None:
            raise TypeError(f"{variant!r} is not a {self.family} variant")
        out: dict[str, Any] = {TYPE_FIELD: spec.tag}
        if spec.field is not None and spec.attr is not None:
            out[spec.field] = getattr(variant, spec.attr)
        return out


CONDITIONS = VariantCodec(
    "Condition",
    [
        VariantSpec("Activity", "activity", Activity),
        VariantSpec("Command", "command", Command, "command", "command"),
        VariantSpec("Label", "label", Label, "label", "label"),
        VariantSpec("PullRequest", "pull-request", PullRequest),
        VariantSpec("Timeout", "timeout", Timeout, "timeout", "days", UNSIGNED),
    ],
)

ACTIONS = VariantCodec(
    "Action",
    [
        VariantSpec("AddLabel", "add-label", AddLabel, "label", "label"),
        VariantSpec("Close", "close", Close),
        VariantSpec("PostComment", "post-comment", PostComment, "comment", "comment"),
        VariantSpec("ReplaceLabel", "replace-label", ReplaceLabel, "label", "label"),
        VariantSpec("RemoveLabel", "remove-label", RemoveLabel, "label", "label"),
    ],
)


def decode_condition(value: Any) -> Condition:
    return CONDITIONS.decode(value)


def encode_condition(condition: Condition) -> dict[str, Any]:
    return CONDITIONS.encode(condition)


def decode_action(value: Any) -> Action:
    return ACTIONS.decode(value)


def encode_action(action: Action) -> dict[str, Any]:
    return ACTIONS.encode(action)


def condition_tags() -> tuple[str, ...]:
    return CONDITIONS.tags


def action_tags() -> tuple[str, ...]:
    return ACTIONS.tags


__all__ = [
    "VariantSpec",
    "VariantCodec",
    "CONDITIONS",
    "ACTIONS",
    "TYPE_FIELD",
    "MAX_TIMEOUT_DAYS",
    "decode_condition",
    "encode_condition",
    "decode_action",
    "encode_action",
    "condition_tags",
    "action_tags",
]
