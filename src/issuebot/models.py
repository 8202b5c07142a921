from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Activity:
    """The issue was updated."""


@dataclass(frozen=True)
class Command:
    """A maintainer typed ``command`` in the issue comments."""

    command: str


@dataclass(frozen=True)
class Label:
    """The issue carries ``label``."""

    label: str


@dataclass(frozen=True)
class PullRequest:
    """A pull request resolving the issue is attached."""


@dataclass(frozen=True)
class Timeout:
    """The issue was not updated for ``days`` days."""

    days: int


@dataclass(frozen=True)
class AddLabel:
    """Add ``label`` to the issue."""

    label: str


@dataclass(frozen=True)
class ReplaceLabel:
    """Replace the issue's labels with ``label``."""

    label: str


@dataclass(frozen=True)
class RemoveLabel:
    """Remove ``label`` from the issue."""

    label: str


@dataclass(frozen=True)
class PostComment:
    """Post ``comment`` on the issue."""

    comment: str


@dataclass(frozen=True)
class Close:
    """Close the issue."""


Condition = Union[Activity, Command, Label, PullRequest, Timeout]
Action = Union[AddLabel, ReplaceLabel, RemoveLabel, PostComment, Close]


@dataclass(frozen=True)
class Transition:
    """Edge out of a state.

    Fires when every condition holds; an empty ``conditions`` tuple means the
    transition is unconditional. ``actions`` run in listed order.
    """

    description: str
    conditions: tuple[Condition, ...]
    actions: tuple[Action, ...]


@dataclass(frozen=True)
class State:
    label: str
    description: str
    transitions: tuple[Transition, ...]


@dataclass(frozen=True)
class StateMachine:
    """Root of a loaded configuration; replaced as a unit on reload."""

    states: tuple[State, ...]


__all__ = [
    "Activity",
    "Command",
    "Label",
    "PullRequest",
    "Timeout",
    "AddLabel",
    "ReplaceLabel",
    "RemoveLabel",
    "PostComment",
    "Close",
    "Condition",
    "Action",
    "Transition",
    "State",
    "StateMachine",
]
