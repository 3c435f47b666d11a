"""Relations - links between components and to external systems.

This module defines the edges of an architecture graph:
- LinkType: synchronous or asynchronous invocation
- Link: a directed edge between two components
- ExternalTarget / ExternalLink: an edge to a system outside the graph
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from riviere.graph.component import SourceLocation


class LinkType(Enum):
    """How a link's source invokes its target."""

    SYNC = "sync"
    ASYNC = "async"


def _link_type_from(value: str | None) -> LinkType | None:
    return LinkType(value) if value is not None else None


@dataclass
class Link:
    """A directed edge between two components.

    Attributes:
        source: Id of the calling component.
        target: Id of the called component. Not required to exist until
            the graph is validated.
        type: Invocation style, if known.
        id: Explicit link id, if any.
        payload: Optional payload description (``{type?, schema?}``).
        source_location: Where the call is made.
    """

    source: str
    target: str
    type: LinkType | None = None
    id: str | None = None
    payload: dict[str, Any] | None = None
    source_location: SourceLocation | None = None

    @property
    def key(self) -> str:
        """Identity used for diffing: the explicit id, else ``source->target``."""
        if self.id is not None:
            return self.id
        return f"{self.source}->{self.target}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id is not None:
            data["id"] = self.id
        data["source"] = self.source
        data["target"] = self.target
        if self.type is not None:
            data["type"] = self.type.value
        if self.payload is not None:
            data["payload"] = self.payload
        if self.source_location is not None:
            data["sourceLocation"] = self.source_location.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Link:
        location = data.get("sourceLocation")
        return cls(
            source=data["source"],
            target=data["target"],
            type=_link_type_from(data.get("type")),
            id=data.get("id"),
            payload=data.get("payload"),
            source_location=SourceLocation.from_dict(location) if location else None,
        )


@dataclass
class ExternalTarget:
    """A system outside the graph, identified by ``name`` alone."""

    name: str
    domain: str | None = None
    repository: str | None = None
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.domain is not None:
            data["domain"] = self.domain
        if self.repository is not None:
            data["repository"] = self.repository
        if self.url is not None:
            data["url"] = self.url
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExternalTarget:
        return cls(
            name=data["name"],
            domain=data.get("domain"),
            repository=data.get("repository"),
            url=data.get("url"),
        )


@dataclass
class ExternalLink:
    """A link from a component to an external system."""

    source: str
    target: ExternalTarget
    type: LinkType | None = None
    id: str | None = None
    description: str | None = None
    source_location: SourceLocation | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.id is not None:
            data["id"] = self.id
        data["source"] = self.source
        data["target"] = self.target.to_dict()
        if self.type is not None:
            data["type"] = self.type.value
        if self.description is not None:
            data["description"] = self.description
        if self.source_location is not None:
            data["sourceLocation"] = self.source_location.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExternalLink:
        location = data.get("sourceLocation")
        return cls(
            source=data["source"],
            target=ExternalTarget.from_dict(data["target"]),
            type=_link_type_from(data.get("type")),
            id=data.get("id"),
            description=data.get("description"),
            source_location=SourceLocation.from_dict(location) if location else None,
        )


__all__ = ["LinkType", "Link", "ExternalTarget", "ExternalLink"]
