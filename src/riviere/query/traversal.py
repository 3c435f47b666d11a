"""Traversal queries: entry points, orphans, flows, tracing and depths.

Three different walks live here:
- flows(): forward depth-first walk per entry point, with a visited set
  per flow so cycles terminate
- trace_flow(): breadth-first walk treating links as undirected
- node_depths(): multi-source breadth-first walk giving minimum hop counts
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from riviere.graph.component import Component
from riviere.graph.model import Graph
from riviere.graph.relations import ExternalLink, Link, LinkType
from riviere.query.components import component_by_id, search_components
from riviere.suggest.near_matches import source_not_found_error

logger = logging.getLogger(__name__)


@dataclass
class FlowStep:
    """One component visited while walking a flow.

    Attributes:
        component: The visited component.
        link_type: Type of the first outgoing link of the component, None
            when it has none or the link is untyped.
        depth: Recursion depth along the discovered path (not a shortest
            distance).
        external_links: External links whose source is this component.
    """

    component: Component
    link_type: LinkType | None
    depth: int
    external_links: list[ExternalLink] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component.to_dict(),
            "linkType": self.link_type.value if self.link_type else None,
            "depth": self.depth,
            "externalLinks": [link.to_dict() for link in self.external_links],
        }


@dataclass
class Flow:
    entry_point: Component
    steps: list[FlowStep] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "entryPoint": self.entry_point.to_dict(),
            "steps": [step.to_dict() for step in self.steps],
        }


@dataclass
class TraceResult:
    """Components and links connected to a starting component."""

    component_ids: list[str] = field(default_factory=list)
    link_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"componentIds": list(self.component_ids), "linkIds": list(self.link_ids)}


@dataclass
class SearchWithFlowResult:
    """Search matches plus every component on a flow through a match."""

    matching_ids: list[str] = field(default_factory=list)
    visible_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"matchingIds": list(self.matching_ids), "visibleIds": list(self.visible_ids)}


# ─────────────────────────────────────────────────────────────────────────────
# Indexes
# ─────────────────────────────────────────────────────────────────────────────


def _outgoing_links(graph: Graph) -> dict[str, list[Link]]:
    outgoing: dict[str, list[Link]] = {}
    for link in graph.links:
        outgoing.setdefault(link.source, []).append(link)
    return outgoing


def _external_links_by_source(graph: Graph) -> dict[str, list[ExternalLink]]:
    by_source: dict[str, list[ExternalLink]] = {}
    for link in graph.iter_external_links():
        by_source.setdefault(link.source, []).append(link)
    return by_source


def _incident_links(graph: Graph) -> dict[str, list[Link]]:
    """Links touching each component, in graph order."""
    incident: dict[str, list[Link]] = {}
    for link in graph.links:
        incident.setdefault(link.source, []).append(link)
        if link.target != link.source:
            incident.setdefault(link.target, []).append(link)
    return incident


# ─────────────────────────────────────────────────────────────────────────────
# Queries
# ─────────────────────────────────────────────────────────────────────────────


def entry_points(graph: Graph) -> list[Component]:
    """Components that start flows.

    An entry point is a UI, API, EventHandler or Custom component that is
    never the target of a link. UseCase components never qualify.
    """
    targets = {link.target for link in graph.links}
    return [
        c for c in graph.components if c.type.is_entry_point_type() and c.id not in targets
    ]


def find_orphans(graph: Graph) -> list[str]:
    """Ids of components with no links in or out, external links included."""
    connected: set[str] = set()
    for link in graph.links:
        connected.add(link.source)
        connected.add(link.target)
    for external in graph.iter_external_links():
        connected.add(external.source)
    return [c.id for c in graph.components if c.id not in connected]


def trace_flow(graph: Graph, start_id: str) -> TraceResult:
    """Collect everything connected to a component, ignoring direction.

    Args:
        graph: Graph to walk.
        start_id: Component to start from.

    Returns:
        TraceResult with component ids in visit order and link keys in the
        order they were crossed.

    Raises:
        ComponentNotFoundError: If ``start_id`` is not a component. The
            error carries near-match suggestions.
    """
    if component_by_id(graph, start_id) is None:
        raise source_not_found_error(graph.components, start_id, role="Component")

    incident = _incident_links(graph)
    visited: dict[str, None] = {}
    crossed: dict[str, None] = {}
    queue: deque[str] = deque([start_id])

    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited[current] = None

        for link in incident.get(current, []):
            if link.source == current and link.target not in visited:
                queue.append(link.target)
                crossed[link.key] = None
            if link.target == current and link.source not in visited:
                queue.append(link.source)
                crossed[link.key] = None

    return TraceResult(component_ids=list(visited), link_ids=list(crossed))


def flows(graph: Graph) -> list[Flow]:
    """Walk forward from every entry point.

    Each flow has its own visited set, so a component reachable from two
    entry points appears in both flows but at most once per flow. Links to
    ids that are not components are followed no further.
    """
    by_id = {c.id: c for c in graph.components}
    outgoing = _outgoing_links(graph)
    externals = _external_links_by_source(graph)

    result: list[Flow] = []
    for entry in entry_points(graph):
        steps: list[FlowStep] = []
        visited: set[str] = set()
        stack: list[tuple[str, int]] = [(entry.id, 0)]

        while stack:
            node_id, depth = stack.pop()
            if node_id in visited:
                continue
            visited.add(node_id)

            component = by_id.get(node_id)
            if component is None:
                continue

            edges = outgoing.get(node_id, [])
            steps.append(
                FlowStep(
                    component=component,
                    link_type=edges[0].type if edges else None,
                    depth=depth,
                    external_links=list(externals.get(node_id, [])),
                )
            )
            # Reversed so the first edge is explored first
            for edge in reversed(edges):
                stack.append((edge.target, depth + 1))

        result.append(Flow(entry_point=entry, steps=steps))
    return result


def node_depths(graph: Graph) -> dict[str, int]:
    """Minimum hop count from the nearest entry point for each reachable id.

    Components unreachable from any entry point are absent.
    """
    depths: dict[str, int] = {}
    starts = entry_points(graph)
    if not starts:
        return depths

    outgoing = _outgoing_links(graph)
    queue: deque[tuple[str, int]] = deque((c.id, 0) for c in starts)

    while queue:
        node_id, depth = queue.popleft()
        known = depths.get(node_id)
        if known is not None and known <= depth:
            continue
        depths[node_id] = depth
        for link in outgoing.get(node_id, []):
            queue.append((link.target, depth + 1))

    return depths


def search_with_flow(
    graph: Graph, query: str, return_all_on_empty_query: bool = False
) -> SearchWithFlowResult:
    """Search, then widen the result to every component connected to a match.

    Args:
        graph: Graph to search.
        query: Search text; surrounding whitespace is ignored.
        return_all_on_empty_query: When the query is blank, return every
            component instead of nothing.
    """
    if query.strip() == "":
        if return_all_on_empty_query:
            all_ids = [c.id for c in graph.components]
            return SearchWithFlowResult(matching_ids=all_ids, visible_ids=list(all_ids))
        return SearchWithFlowResult()

    matches = search_components(graph, query)
    visible: dict[str, None] = {}
    for component in matches:
        for component_id in trace_flow(graph, component.id).component_ids:
            visible[component_id] = None

    logger.debug("search_with_flow(%r): %d matches, %d visible", query, len(matches), len(visible))
    return SearchWithFlowResult(matching_ids=[c.id for c in matches], visible_ids=list(visible))


__all__ = [
    "FlowStep",
    "Flow",
    "TraceResult",
    "SearchWithFlowResult",
    "entry_points",
    "find_orphans",
    "trace_flow",
    "flows",
    "node_depths",
    "search_with_flow",
]
