"""Graph model - the root aggregate and its metadata.

A Graph holds metadata plus ordered sequences of components, links and
external links. Order is significant: it is preserved through
serialization and used for stable diff and display output.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator

from riviere.graph.component import Component, ComponentType
from riviere.graph.relations import ExternalLink, Link

GRAPH_FORMAT_VERSION = "1.0"


class SystemType(Enum):
    """Role a domain plays in the overall system."""

    DOMAIN = "domain"
    BFF = "bff"
    UI = "ui"
    OTHER = "other"


class CustomPropertyType(Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


@dataclass
class SourceInfo:
    """Provenance record for a repository the graph was extracted from."""

    repository: str
    commit: str | None = None
    extracted_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"repository": self.repository}
        if self.commit is not None:
            data["commit"] = self.commit
        if self.extracted_at is not None:
            data["extractedAt"] = self.extracted_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceInfo:
        return cls(
            repository=data["repository"],
            commit=data.get("commit"),
            extracted_at=data.get("extractedAt"),
        )


@dataclass
class DomainMetadata:
    """Description of a domain.

    Attributes:
        description: Human-readable summary.
        system_type: The domain's role.
        extra: Any further keys, kept verbatim.
    """

    description: str
    system_type: SystemType
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "description": self.description,
            "systemType": self.system_type.value,
        }
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DomainMetadata:
        extra = {k: v for k, v in data.items() if k not in ("description", "systemType")}
        return cls(
            description=data["description"],
            system_type=SystemType(data["systemType"]),
            extra=extra,
        )


@dataclass
class CustomPropertyDefinition:
    type: CustomPropertyType
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type.value}
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CustomPropertyDefinition:
        return cls(type=CustomPropertyType(data["type"]), description=data.get("description"))


def _properties_to_dict(
    properties: dict[str, CustomPropertyDefinition] | None,
) -> dict[str, Any] | None:
    if properties is None:
        return None
    return {name: prop.to_dict() for name, prop in properties.items()}


def _properties_from_dict(
    data: dict[str, Any] | None,
) -> dict[str, CustomPropertyDefinition] | None:
    if data is None:
        return None
    return {name: CustomPropertyDefinition.from_dict(prop) for name, prop in data.items()}


@dataclass
class CustomTypeDefinition:
    """Definition of a user-declared component type."""

    description: str | None = None
    required_properties: dict[str, CustomPropertyDefinition] | None = None
    optional_properties: dict[str, CustomPropertyDefinition] | None = None

    def required_names(self) -> list[str]:
        return list(self.required_properties or {})

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.description is not None:
            data["description"] = self.description
        required = _properties_to_dict(self.required_properties)
        if required is not None:
            data["requiredProperties"] = required
        optional = _properties_to_dict(self.optional_properties)
        if optional is not None:
            data["optionalProperties"] = optional
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CustomTypeDefinition:
        return cls(
            description=data.get("description"),
            required_properties=_properties_from_dict(data.get("requiredProperties")),
            optional_properties=_properties_from_dict(data.get("optionalProperties")),
        )


@dataclass
class Metadata:
    """Graph-level metadata.

    ``custom_types`` is None when the graph carries no ``customTypes`` key.
    """

    sources: list[SourceInfo] = field(default_factory=list)
    domains: dict[str, DomainMetadata] = field(default_factory=dict)
    name: str | None = None
    description: str | None = None
    generated: str | None = None
    custom_types: dict[str, CustomTypeDefinition] | None = None

    def has_custom_type(self, name: str) -> bool:
        return self.custom_types is not None and name in self.custom_types


@dataclass
class Graph:
    """Container for a complete architecture graph.

    Treated as an immutable value once validated; the builder is the only
    holder that mutates one.

    Attributes:
        metadata: Sources, domains and custom types.
        components: Components in insertion order.
        links: Links between components in insertion order.
        external_links: Links to external systems. None when the graph
            carries no ``externalLinks`` key, read as empty.
        version: Graph format version.
    """

    metadata: Metadata
    components: list[Component] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    external_links: list[ExternalLink] | None = None
    version: str = GRAPH_FORMAT_VERSION

    def iter_components(self) -> Iterator[Component]:
        yield from self.components

    def iter_external_links(self) -> Iterator[ExternalLink]:
        yield from self.external_links or []

    def find_by_id(self, component_id: str) -> Component | None:
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def components_by_type(self, component_type: ComponentType) -> Iterator[Component]:
        for component in self.components:
            if component.type is component_type:
                yield component

    def clone(self) -> Graph:
        """Create a deep copy of this graph."""
        return copy.deepcopy(self)


__all__ = [
    "GRAPH_FORMAT_VERSION",
    "SystemType",
    "CustomPropertyType",
    "SourceInfo",
    "DomainMetadata",
    "CustomPropertyDefinition",
    "CustomTypeDefinition",
    "Metadata",
    "Graph",
]
