"""Whole-graph statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from riviere.graph.component import ComponentType
from riviere.graph.model import Graph


@dataclass(frozen=True)
class GraphStats:
    component_count: int
    link_count: int
    domain_count: int
    api_count: int
    entity_count: int
    event_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "componentCount": self.component_count,
            "linkCount": self.link_count,
            "domainCount": self.domain_count,
            "apiCount": self.api_count,
            "entityCount": self.entity_count,
            "eventCount": self.event_count,
        }


def graph_stats(graph: Graph) -> GraphStats:
    """Count components, links, domains in use, APIs, entities and events.

    ``domain_count`` counts distinct domains of components, not declared
    domains.
    """
    components = graph.components
    entity_names = {
        c.entity for c in components if c.type is ComponentType.DOMAIN_OP and c.entity
    }
    return GraphStats(
        component_count=len(components),
        link_count=len(graph.links),
        domain_count=len({c.domain for c in components}),
        api_count=sum(1 for c in components if c.type is ComponentType.API),
        entity_count=len(entity_names),
        event_count=sum(1 for c in components if c.type is ComponentType.EVENT),
    )


__all__ = ["GraphStats", "graph_stats"]
