import pytest

from issuebot.schema_registry import (
    get_schema_descriptor,
    get_schema_registry,
    iter_schema_descriptors,
)


def test_schema_registry_contains_config_entry() -> None:
    registry = get_schema_registry()
    assert set(registry) == {"config"}
    config = registry["config"]
    assert config.version.isdigit()
    assert config.filename == "issuebot.config.schema.json"


def test_iter_schema_descriptors_matches_registry() -> None:
    assert [d.name for d in iter_schema_descriptors()] == ["config"]


def test_unknown_schema_name() -> None:
    with pytest.raises(KeyError):
        get_schema_descriptor("summary")
