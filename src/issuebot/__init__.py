"""issuebot - declarative issue lifecycle state machine.

High-level public API (stable):

from issuebot import load_config

machine = load_config('issuebot.yaml')
for state in machine.states:
    print(state.label, len(state.transitions))

Loading validates the YAML document against the embedded JSON Schema (every
violation is reported at once) before decoding it into immutable dataclasses.
"""

from __future__ import annotations

from .codec import decode_action, decode_condition, encode_action, encode_condition
from .config import dump_config_text, dump_state_machine, load_config, load_config_text
from .errors import (
    ConfigError,
    ConfigParseError,
    DecodeError,
    DuplicateStateError,
    IssueBotError,
    MissingFieldError,
    SchemaValidationError,
    SourceReadError,
    UnknownVariantError,
)
from .models import Action, Condition, State, StateMachine, Transition
from .schemas import validate_document

__version__ = "0.1.0"

__all__ = [
    "load_config",
    "load_config_text",
    "dump_state_machine",
    "dump_config_text",
    "validate_document",
    "decode_condition",
    "encode_condition",
    "decode_action",
    "encode_action",
    "StateMachine",
    "State",
    "Transition",
    "Condition",
    "Action",
    "IssueBotError",
    "ConfigError",
    "SourceReadError",
    "ConfigParseError",
    "SchemaValidationError",
    "DuplicateStateError",
    "DecodeError",
    "UnknownVariantError",
    "MissingFieldError",
    "__version__",
]
