from __future__ import annotations

import dataclasses

import pytest

from issuebot.codec import ACTIONS, CONDITIONS, VariantSpec
from issuebot.models import Close, Label, State, StateMachine, Timeout, Transition


def _machine() -> StateMachine:
    return StateMachine(
        states=(
            State(
                label="open",
                description="Newly opened",
                transitions=(
                    Transition(
                        description="Close resolved",
                        conditions=(Label("resolved"), Timeout(3)),
                        actions=(Close(),),
                    ),
                ),
            ),
        )
    )


def test_models_compare_structurally() -> None:
    assert _machine() == _machine()
    assert hash(_machine()) == hash(_machine())


def test_models_are_read_only() -> None:
    machine = _machine()
    with pytest.raises(dataclasses.FrozenInstanceError):
        machine.states[0].label = "closed"  # type: ignore[misc]


def test_payload_variants_differ_by_value() -> None:
    assert Timeout(3) != Timeout(4)
    assert Label("a") != Label("b")
    assert Close() == Close()


@pytest.mark.parametrize("variant", CONDITIONS.specs + ACTIONS.specs, ids=lambda spec: spec.name)
def test_every_variant_is_documented(variant: VariantSpec) -> None:
    assert variant.cls.__doc__ and not variant.cls.__doc__.startswith(variant.cls.__name__ + "(")
