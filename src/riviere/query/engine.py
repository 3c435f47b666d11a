"""GraphQuery - read-only analysis over a validated architecture graph.

GraphQuery is a thin facade: each method delegates to a function in one
of the query modules, passing the wrapped Graph.
"""

from __future__ import annotations

import logging
from typing import Any

from riviere.graph.component import Component, ComponentType
from riviere.graph.model import Graph
from riviere.graph.relations import ExternalLink, Link
from riviere.graph.schema import parse_graph
from riviere.query import components as _components
from riviere.query import cross_domain as _cross_domain
from riviere.query import entities as _entities
from riviere.query import events as _events
from riviere.query import traversal as _traversal
from riviere.query.components import ComponentPredicate
from riviere.query.cross_domain import CrossDomainLink, DomainConnection
from riviere.query.diff import GraphDiff, diff_graphs
from riviere.query.entities import DomainSummary, Entity, EntityTransition
from riviere.query.events import EventHandlerInfo, PublishedEvent
from riviere.query.external import ExternalDomain, external_domains
from riviere.query.stats import GraphStats, graph_stats
from riviere.query.traversal import Flow, SearchWithFlowResult, TraceResult
from riviere.validation import ValidationResult, validate_graph

logger = logging.getLogger(__name__)


class GraphQuery:
    """Query engine over one Graph.

    The graph is treated as immutable; no method modifies it.

    Attributes:
        graph: The graph being queried.
    """

    def __init__(self, graph: Graph):
        self.graph = graph

    @classmethod
    def from_json(cls, data: Any) -> GraphQuery:
        """Validate decoded JSON and wrap the resulting graph.

        Raises:
            SchemaValidationError: If ``data`` is not a valid graph.
        """
        graph = parse_graph(data)
        logger.debug(
            "Loaded graph with %d components and %d links",
            len(graph.components),
            len(graph.links),
        )
        return cls(graph)

    # ─────────────────────────────────────────────────────────────────────────
    # Components
    # ─────────────────────────────────────────────────────────────────────────

    def components(self) -> list[Component]:
        return list(self.graph.components)

    def links(self) -> list[Link]:
        return list(self.graph.links)

    def external_links(self) -> list[ExternalLink]:
        return list(self.graph.iter_external_links())

    def find(self, predicate: ComponentPredicate) -> Component | None:
        return _components.find_component(self.graph, predicate)

    def find_all(self, predicate: ComponentPredicate) -> list[Component]:
        return _components.find_all_components(self.graph, predicate)

    def component_by_id(self, component_id: str) -> Component | None:
        return _components.component_by_id(self.graph, component_id)

    def search(self, query: str) -> list[Component]:
        return _components.search_components(self.graph, query)

    def components_by_type(self, component_type: ComponentType | str) -> list[Component]:
        return _components.components_by_type(self.graph, ComponentType(component_type))

    def components_in_domain(self, domain: str) -> list[Component]:
        return _components.components_in_domain(self.graph, domain)

    # ─────────────────────────────────────────────────────────────────────────
    # Traversal
    # ─────────────────────────────────────────────────────────────────────────

    def entry_points(self) -> list[Component]:
        return _traversal.entry_points(self.graph)

    def flows(self) -> list[Flow]:
        return _traversal.flows(self.graph)

    def trace_flow(self, component_id: str) -> TraceResult:
        return _traversal.trace_flow(self.graph, component_id)

    def search_with_flow(
        self, query: str, return_all_on_empty_query: bool = False
    ) -> SearchWithFlowResult:
        return _traversal.search_with_flow(self.graph, query, return_all_on_empty_query)

    def node_depths(self) -> dict[str, int]:
        return _traversal.node_depths(self.graph)

    def detect_orphans(self) -> list[str]:
        return _traversal.find_orphans(self.graph)

    # ─────────────────────────────────────────────────────────────────────────
    # Validation, diff and statistics
    # ─────────────────────────────────────────────────────────────────────────

    def validate(self) -> ValidationResult:
        result = validate_graph(self.graph)
        logger.debug("Structural validation: %d error(s)", len(result.errors))
        return result

    def diff(self, other: Graph | GraphQuery) -> GraphDiff:
        other_graph = other.graph if isinstance(other, GraphQuery) else other
        return diff_graphs(self.graph, other_graph)

    def stats(self) -> GraphStats:
        return graph_stats(self.graph)

    # ─────────────────────────────────────────────────────────────────────────
    # Domains
    # ─────────────────────────────────────────────────────────────────────────

    def domains(self) -> list[DomainSummary]:
        return _entities.domains(self.graph)

    def cross_domain_links(self, domain: str) -> list[CrossDomainLink]:
        return _cross_domain.cross_domain_links(self.graph, domain)

    def domain_connections(self, domain: str) -> list[DomainConnection]:
        return _cross_domain.domain_connections(self.graph, domain)

    def external_domains(self) -> list[ExternalDomain]:
        return external_domains(self.graph)

    # ─────────────────────────────────────────────────────────────────────────
    # Entities and events
    # ─────────────────────────────────────────────────────────────────────────

    def entities(self, domain: str | None = None) -> list[Entity]:
        return _entities.entities(self.graph, domain)

    def operations_for(self, entity: str) -> list[Component]:
        return _entities.operations_for(self.graph, entity)

    def business_rules_for(self, entity: str) -> list[str]:
        return _entities.business_rules_for(self.graph, entity)

    def transitions_for(self, entity: str) -> list[EntityTransition]:
        return _entities.transitions_for(self.graph, entity)

    def states_for(self, entity: str) -> list[str]:
        return _entities.states_for(self.graph, entity)

    def published_events(self, domain: str | None = None) -> list[PublishedEvent]:
        return _events.published_events(self.graph, domain)

    def event_handlers(self, event_name: str | None = None) -> list[EventHandlerInfo]:
        return _events.event_handlers(self.graph, event_name)


__all__ = ["GraphQuery"]
