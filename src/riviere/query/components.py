"""Component lookups: by id, predicate, type, domain and free-text search."""

from __future__ import annotations

from typing import Callable

from riviere.graph.component import Component, ComponentType
from riviere.graph.model import Graph

ComponentPredicate = Callable[[Component], bool]


def find_component(graph: Graph, predicate: ComponentPredicate) -> Component | None:
    """Return the first component matching ``predicate``, or None."""
    for component in graph.components:
        if predicate(component):
            return component
    return None


def find_all_components(graph: Graph, predicate: ComponentPredicate) -> list[Component]:
    return [c for c in graph.components if predicate(c)]


def component_by_id(graph: Graph, component_id: str) -> Component | None:
    return find_component(graph, lambda c: c.id == component_id)


def search_components(graph: Graph, query: str) -> list[Component]:
    """Case-insensitive substring search over name, domain and type.

    An empty query matches nothing.
    """
    if query == "":
        return []
    needle = query.lower()
    return find_all_components(
        graph,
        lambda c: needle in c.name.lower()
        or needle in c.domain.lower()
        or needle in c.type.value.lower(),
    )


def components_in_domain(graph: Graph, domain: str) -> list[Component]:
    return find_all_components(graph, lambda c: c.domain == domain)


def components_by_type(graph: Graph, component_type: ComponentType) -> list[Component]:
    return find_all_components(graph, lambda c: c.type is component_type)


__all__ = [
    "ComponentPredicate",
    "find_component",
    "find_all_components",
    "component_by_id",
    "search_components",
    "components_in_domain",
    "components_by_type",
]
