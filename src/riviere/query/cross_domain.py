"""Cross-domain aggregation over links."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from riviere.graph.component import ComponentType
from riviere.graph.model import Graph
from riviere.graph.relations import LinkType


class ConnectionDirection(Enum):
    OUTGOING = "outgoing"
    INCOMING = "incoming"


@dataclass(frozen=True)
class CrossDomainLink:
    """A distinct (target domain, link type) pair leaving a domain."""

    target_domain: str
    link_type: LinkType | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "targetDomain": self.target_domain,
            "linkType": self.link_type.value if self.link_type else None,
        }


@dataclass
class DomainConnection:
    """Link counts between the queried domain and one other domain.

    Attributes:
        target_domain: The other domain.
        direction: Whether links leave or enter the queried domain.
        api_count: Links whose target is an API.
        event_count: Links whose target is an EventHandler.
    """

    target_domain: str
    direction: ConnectionDirection
    api_count: int = 0
    event_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "targetDomain": self.target_domain,
            "direction": self.direction.value,
            "apiCount": self.api_count,
            "eventCount": self.event_count,
        }


def _domain_index(graph: Graph) -> dict[str, str]:
    return {c.id: c.domain for c in graph.components}


def _link_type_sort_key(link_type: LinkType | None) -> str:
    # Untyped links sort before named types
    return link_type.value if link_type is not None else ""


def cross_domain_links(graph: Graph, domain: str) -> list[CrossDomainLink]:
    """Distinct links from ``domain`` into other known domains.

    Links are deduplicated by (target domain, link type); an untyped link
    is its own key. Results are sorted by target domain, then link type.
    """
    domain_of = _domain_index(graph)
    seen: set[tuple[str, LinkType | None]] = set()
    results: list[CrossDomainLink] = []

    for link in graph.links:
        source_domain = domain_of.get(link.source)
        target_domain = domain_of.get(link.target)
        if source_domain != domain or target_domain == domain or target_domain is None:
            continue
        key = (target_domain, link.type)
        if key in seen:
            continue
        seen.add(key)
        results.append(CrossDomainLink(target_domain=target_domain, link_type=link.type))

    results.sort(key=lambda r: (r.target_domain, _link_type_sort_key(r.link_type)))
    return results


def _count(
    connections: dict[str, DomainConnection],
    other_domain: str,
    direction: ConnectionDirection,
    target_type: ComponentType | None,
) -> None:
    connection = connections.get(other_domain)
    if connection is None:
        connection = DomainConnection(target_domain=other_domain, direction=direction)
        connections[other_domain] = connection
    if target_type is ComponentType.API:
        connection.api_count += 1
    elif target_type is ComponentType.EVENT_HANDLER:
        connection.event_count += 1


def domain_connections(graph: Graph, domain: str) -> list[DomainConnection]:
    """Outgoing and incoming connection counts for a domain, by other domain.

    Returns:
        Outgoing entries then incoming entries, stably sorted by the other
        domain's name.
    """
    domain_of = _domain_index(graph)
    type_of = {c.id: c.type for c in graph.components}
    outgoing: dict[str, DomainConnection] = {}
    incoming: dict[str, DomainConnection] = {}

    for link in graph.links:
        source_domain = domain_of.get(link.source)
        target_domain = domain_of.get(link.target)
        target_type = type_of.get(link.target)

        if source_domain == domain and target_domain is not None and target_domain != domain:
            _count(outgoing, target_domain, ConnectionDirection.OUTGOING, target_type)
        if target_domain == domain and source_domain is not None and source_domain != domain:
            _count(incoming, source_domain, ConnectionDirection.INCOMING, target_type)

    results = list(outgoing.values()) + list(incoming.values())
    results.sort(key=lambda c: c.target_domain)
    return results


__all__ = [
    "ConnectionDirection",
    "CrossDomainLink",
    "DomainConnection",
    "cross_domain_links",
    "domain_connections",
]
