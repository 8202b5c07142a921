"""Error taxonomy & redaction.

Every failure raised by issuebot derives from :class:`IssueBotError` so callers
can catch the whole family at once, or pick out a single stage of the config
pipeline:

- SourceReadError       -> the config file could not be read
- ConfigParseError      -> the text is not valid YAML
- SchemaValidationError -> structural violations (all of them, not just the first)
- DecodeError           -> a condition/action node could not be turned into a variant
- DuplicateStateError   -> two states share a label
- GitHubAPIError        -> the REST API answered with an error

Public helpers:
- classify_error(exc) -> ErrorInfo
- redact(text) -> str
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover
    from .schemas import SchemaViolation

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ghp_[A-Za-z0-9]{20,40}"),  # GitHub classic tokens
    re.compile(r"github_pat_\w{20,}"),  # GitHub fine-grained tokens
    re.compile(r"gh[osu]_[A-Za-z0-9]{20,40}"),  # OAuth / app tokens
    re.compile(r"(?i)bearer\s+[A-Za-z0-9_\-\.]{8,}"),
]

_REDACTION_PLACEHOLDER = "<redacted>"


class IssueBotError(RuntimeError):
    """Base class for every error raised by issuebot."""


class ConfigError(IssueBotError):
    """Loading the state machine configuration failed."""


class SourceReadError(ConfigError):
    def __init__(self, path: str | Path, reason: str):
        super().__init__(f"Cannot read configuration {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class ConfigParseError(ConfigError):
    def __init__(self, source: str, diagnostic: str, mark: str | None = None):
        where = f" ({mark})" if mark else ""
        super().__init__(f"Invalid YAML in {source}{where}: {diagnostic}")
        self.source = source
        self.diagnostic = diagnostic
        self.mark = mark


class SchemaValidationError(ConfigError):
    def __init__(self, source: str, violations: Iterable[SchemaViolation]):
        self.source = source
        self.violations: tuple[SchemaViolation, ...] = tuple(violations)
        lines = "".join(f"\n  - {v}" for v in self.violations)
        super().__init__(
            f"{source} failed schema validation with "
            f"{len(self.violations)} violation(s):{lines}"
        )


class DuplicateStateError(ConfigError):
    def __init__(self, labels: Sequence[str]):
        super().__init__(f"Duplicate state label(s): {', '.join(labels)}")
        self.labels = tuple(labels)


class DecodeError(ConfigError):
    """A tagged wire value could not be decoded into a typed variant."""


class UnknownVariantError(DecodeError):
    def __init__(self, family: str, tag: Any):
        super().__init__(f"Unknown {family} type {tag!r}")
        self.family = family
        self.tag = tag


class MissingFieldError(DecodeError):
    def __init__(self, variant: str, field: str):
        super().__init__(f"{variant} requires field '{field}'")
        self.variant = variant
        self.field = field


class InvalidFieldError(DecodeError):
    def __init__(self, variant: str, field: str, expected: str, value: Any = None):
        super().__init__(f"{variant} field '{field}' must be {expected}, got {value!r}")
        self.variant = variant
        self.field = field
        self.expected = expected
        self.value = value


class GitHubAPIError(IssueBotError):
    """Raised when the GitHub REST API returns an error or an unusable payload."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response_text: str | None = None,
    ):
        super().__init__(redact(message))
        self.status = status
        self.response_text = redact(response_text) if response_text else response_text


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False
    details: dict[str, Any] | None = None


def redact(text: str) -> str:
    """Redact sensitive tokens in arbitrary text."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:  # noqa: PLR0911
    """Map an exception onto a stable category for logging and CLI output.

    Known issuebot errors are classified by type; anything else falls back to
    keyword matching on the message (network-ish -> transient).
    """
    name = exc.__class__.__name__
    msg = redact(str(exc))

    if isinstance(exc, SourceReadError):
        return ErrorInfo("config.io", msg, name, details={"path": str(exc.path)})
    if isinstance(exc, ConfigParseError):
        return ErrorInfo("config.parse", msg, name, details={"mark": exc.mark})
    if isinstance(exc, SchemaValidationError):
        return ErrorInfo(
            "config.schema",
            msg,
            name,
            details={"violations": [v.as_dict() for v in exc.violations]},
        )
    if isinstance(exc, DuplicateStateError):
        return ErrorInfo("config.semantic", msg, name, details={"labels": list(exc.labels)})
    if isinstance(exc, DecodeError):
        return ErrorInfo("config.decode", msg, name)
    if isinstance(exc, GitHubAPIError):
        transient = exc.status is not None and exc.status >= 500
        return ErrorInfo("github.http", msg, name, transient=transient, details={"status": exc.status})

    low = msg.lower()
    if any(k in low for k in ("timeout", "timed out", "connection reset", "temporarily unavailable")):
        return ErrorInfo("network", msg, name, transient=True)
    return ErrorInfo("generic", msg, name)


__all__ = [
    "IssueBotError",
    "ConfigError",
    "SourceReadError",
    "ConfigParseError",
    "SchemaValidationError",
    "DuplicateStateError",
    "DecodeError",
    "UnknownVariantError",
    "MissingFieldError",
    "InvalidFieldError",
    "GitHubAPIError",
    "ErrorInfo",
    "classify_error",
    "redact",
]
