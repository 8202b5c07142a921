"""Central schema registry with version metadata and filenames."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class SchemaDescriptor:
    """Describes a schema embedded in issuebot."""

    name: str
    version: str
    filename: str
    description: str


# Versions move with the package build; documents do not declare one.
_REGISTRY: dict[str, SchemaDescriptor] = {
    "config": SchemaDescriptor(
        name="config",
        version="20240301",
        filename="issuebot.config.schema.json",
        description="State machine configuration: states, transitions, conditions and actions.",
    ),
}


def _clone_descriptor(descriptor: SchemaDescriptor) -> SchemaDescriptor:
    return SchemaDescriptor(
        name=descriptor.name,
        version=descriptor.version,
        filename=descriptor.filename,
        description=descriptor.description,
    )


def get_schema_descriptor(name: str) -> SchemaDescriptor:
    """Return a defensive copy of a schema descriptor by name."""

    try:
        descriptor = _REGISTRY[name]
    except KeyError as exc:
        raise KeyError(f"Unknown schema '{name}'") from exc
    return _clone_descriptor(descriptor)


def get_schema_registry() -> dict[str, SchemaDescriptor]:
    """Return a copy of the known schema descriptors keyed by name."""

    return {name: _clone_descriptor(descriptor) for name, descriptor in _REGISTRY.items()}


def iter_schema_descriptors() -> Iterable[SchemaDescriptor]:
    for descriptor in _REGISTRY.values():
        yield _clone_descriptor(descriptor)


__all__ = [
    "SchemaDescriptor",
    "get_schema_descriptor",
    "get_schema_registry",
    "iter_schema_descriptors",
]
