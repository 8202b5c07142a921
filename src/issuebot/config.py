from __future__ import annotations

import os
from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .codec import decode_action, decode_condition, encode_action, encode_condition
from .errors import (
    ConfigError,
    ConfigParseError,
    DecodeError,
    DuplicateStateError,
    InvalidFieldError,
    MissingFieldError,
    SchemaValidationError,
    SourceReadError,
)
from .logging import get_logger
from .models import State, StateMachine, Transition
from .schemas import validate_document

DEFAULT_CONFIG_FILE = "issuebot.yaml"
DEFAULT_API_URL = "https://api.github.com"


@dataclass
class RuntimeSettings:
    """Process settings taken from the environment, never from the config document."""

    log_level: str
    log_json: bool
    quiet: bool
    github_api_url: str
    github_token: str


def settings_from_env(env: Mapping[str, str] | None = None) -> RuntimeSettings:
    env = os.environ if env is None else env
    return RuntimeSettings(
        log_level=env.get("ISSUEBOT_LOG_LEVEL", "INFO").upper(),
        log_json=env.get("ISSUEBOT_LOG_JSON") == "1",
        quiet=env.get("ISSUEBOT_QUIET") == "1",
        github_api_url=env.get("GITHUB_API_URL") or DEFAULT_API_URL,
        github_token=env.get("GITHUB_TOKEN", ""),
    )


def _require(node: Any, owner: str, key: str) -> Any:
    if not isinstance(node, Mapping):
        raise DecodeError(f"{owner} must be a mapping, got {type(node).__name__}")
    value = node.get(key)
    if value is None:
        raise MissingFieldError(owner, key)
    return value


def _require_str(node: Any, owner: str, key: str) -> str:
    value = _require(node, owner, key)
    if not isinstance(value, str):
        raise InvalidFieldError(owner, key, "a string", value)
    return value


def _require_list(node: Any, owner: str, key: str) -> list[Any]:
    value = _require(node, owner, key)
    if not isinstance(value, list):
        raise InvalidFieldError(owner, key, "a list", value)
    return value


def _build_transition(raw: Any) -> Transition:
    return Transition(
        description=_require_str(raw, "Transition", "description"),
        conditions=tuple(
            decode_condition(c) for c in _require_list(raw, "Transition", "conditions")
        ),
        actions=tuple(decode_action(a) for a in _require_list(raw, "Transition", "actions")),
    )


def _build_state(raw: Any) -> State:
    return State(
        label=_require_str(raw, "State", "label"),
        description=_require_str(raw, "State", "description"),
        transitions=tuple(
            _build_transition(t) for t in _require_list(raw, "State", "transitions")
        ),
    )


def build_state_machine(raw: Any) -> StateMachine:
    """Decode an already-parsed document into the typed model.

    Does not run schema validation; structural gaps surface as
    :class:`MissingFieldError` / :class:`InvalidFieldError` instead.
    """
    states = _require_list(raw, "StateMachine", "states")
    return StateMachine(states=tuple(_build_state(s) for s in states))


def _check_unique_labels(machine: StateMachine) -> None:
    counts = Counter(state.label for state in machine.states)
    dupes = [label for label, n in counts.items() if n > 1]
    if dupes:
        raise DuplicateStateError(dupes)


def dump_state_machine(machine: StateMachine) -> dict[str, Any]:
    """Encode a StateMachine back into its plain wire form."""
    return {
        "states": [
            {
                "label": state.label,
                "description": state.description,
                "transitions": [
                    {
                        "description": t.description,
                        "conditions": [encode_condition(c) for c in t.conditions],
                        "actions": [encode_action(a) for a in t.actions],
                    }
                    for t in state.transitions
                ],
            }
            for state in machine.states
        ]
    }


def dump_config_text(machine: StateMachine) -> str:
    return yaml.safe_dump(dump_state_machine(machine), sort_keys=False, allow_unicode=True)


def _parse(text: str, source: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        where = f"line {mark.line + 1}, column {mark.column + 1}" if mark is not None else None
        problem = getattr(exc, "problem", None) or str(exc)
        raise ConfigParseError(source, str(problem), where) from exc


def load_config_text(text: str, source: str = "<string>") -> StateMachine:
    """Parse, validate and decode configuration text."""
    log = get_logger()
    raw = _parse(text, source)
    violations = validate_document(raw)
    if violations:
        log.warning(
            "config failed schema validation",
            source=source,
            violation_count=len(violations),
        )
        raise SchemaValidationError(source, violations)
    machine = build_state_machine(raw)
    _check_unique_labels(machine)
    log.debug(
        "config decoded",
        source=source,
        state_count=len(machine.states),
        transition_count=sum(len(s.transitions) for s in machine.states),
    )
    return machine


def load_config(path: str | Path) -> StateMachine:
    """Load the state machine configuration from ``path``.

    Raises a :class:`ConfigError` subclass for each failing stage: the file
    cannot be read, is not YAML, violates the schema, or cannot be decoded.
    """
    p = Path(path)
    with get_logger().timed_operation("config_load", source=str(p)):
        try:
            with p.open(encoding="utf-8") as fh:
                text = fh.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(p, str(exc)) from exc
        return load_config_text(text, source=str(p))


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_FILE",
    "RuntimeSettings",
    "settings_from_env",
    "build_state_machine",
    "dump_state_machine",
    "dump_config_text",
    "load_config_text",
    "load_config",
]
