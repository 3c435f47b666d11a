"""Domain summaries and entity state-machine derivation.

Entities are not stored in the graph; they are derived from DomainOp
components that name an ``entity``. State ordering is best effort: it
yields a linear order for simple chains and a stable, complete (but not
necessarily meaningful) order for branching or cyclic machines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from riviere.graph.component import ComponentType, DomainOpComponent
from riviere.graph.model import Graph
from riviere.query.components import components_in_domain


@dataclass
class DomainSummary:
    """A declared domain with per-type component counts."""

    name: str
    description: str
    system_type: str
    component_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "systemType": self.system_type,
            "componentCounts": dict(self.component_counts),
        }


@dataclass
class Entity:
    """A domain entity and the operations acting on it."""

    name: str
    domain: str
    operations: list[DomainOpComponent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "domain": self.domain,
            "operations": [op.to_dict() for op in self.operations],
        }


@dataclass(frozen=True)
class EntityTransition:
    from_state: str
    to_state: str
    triggered_by: str

    def to_dict(self) -> dict[str, str]:
        return {"from": self.from_state, "to": self.to_state, "triggeredBy": self.triggered_by}


def domains(graph: Graph) -> list[DomainSummary]:
    """Summarize every domain declared in metadata, in declaration order."""
    summaries: list[DomainSummary] = []
    for name, metadata in graph.metadata.domains.items():
        members = components_in_domain(graph, name)
        counts = {t.value: 0 for t in ComponentType}
        for component in members:
            counts[component.type.value] += 1
        counts["total"] = len(members)
        summaries.append(
            DomainSummary(
                name=name,
                description=metadata.description,
                system_type=metadata.system_type.value,
                component_counts=counts,
            )
        )
    return summaries


def _domain_ops(graph: Graph) -> list[DomainOpComponent]:
    return [c for c in graph.components if c.type is ComponentType.DOMAIN_OP]


def operations_for(graph: Graph, entity: str) -> list[DomainOpComponent]:
    return [op for op in _domain_ops(graph) if op.entity == entity]


def entities(graph: Graph, domain: str | None = None) -> list[Entity]:
    """Group DomainOps that name an entity by (domain, entity).

    Args:
        graph: Graph to scan.
        domain: Only include operations in this domain.
    """
    grouped: dict[tuple[str, str], Entity] = {}
    for op in _domain_ops(graph):
        if op.entity is None:
            continue
        if domain and op.domain != domain:
            continue
        key = (op.domain, op.entity)
        if key not in grouped:
            grouped[key] = Entity(name=op.entity, domain=op.domain)
        grouped[key].operations.append(op)
    return list(grouped.values())


def business_rules_for(graph: Graph, entity: str) -> list[str]:
    """All business rules of an entity's operations, deduplicated in order."""
    rules: dict[str, None] = {}
    for op in operations_for(graph, entity):
        for rule in op.business_rules or []:
            rules[rule] = None
    return list(rules)


def transitions_for(graph: Graph, entity: str) -> list[EntityTransition]:
    """Every state transition of an entity, wildcards and branches included."""
    transitions: list[EntityTransition] = []
    for op in operations_for(graph, entity):
        for change in op.state_changes or []:
            transitions.append(
                EntityTransition(
                    from_state=change.from_state,
                    to_state=change.to_state,
                    triggered_by=op.operation_name,
                )
            )
    return transitions


def states_for(graph: Graph, entity: str) -> list[str]:
    """Order an entity's states by following its transitions.

    The wildcard ``*`` is not a state, but the target of a wildcard
    transition is. When several transitions leave the same state only the
    last one registered is followed for ordering.
    """
    operations = operations_for(graph, entity)

    states: dict[str, None] = {}
    from_states: dict[str, None] = {}
    to_states: set[str] = set()
    next_state: dict[str, str] = {}

    for op in operations:
        for change in op.state_changes or []:
            if not change.is_wildcard:
                states[change.from_state] = None
                from_states[change.from_state] = None
                next_state[change.from_state] = change.to_state
            states[change.to_state] = None
            to_states.add(change.to_state)

    ordered: list[str] = []
    visited: set[str] = set()
    for initial in (s for s in from_states if s not in to_states):
        state = initial
        while state not in visited:
            visited.add(state)
            ordered.append(state)
            # An empty target ends the chain; it is still listed afterwards
            state = next_state.get(state, "")
            if not state:
                break

    ordered.extend(s for s in states if s not in visited)
    return ordered


__all__ = [
    "DomainSummary",
    "Entity",
    "EntityTransition",
    "domains",
    "operations_for",
    "entities",
    "business_rules_for",
    "transitions_for",
    "states_for",
]
