"""riviere.query - Read-only analysis of architecture graphs."""

from riviere.query.cross_domain import ConnectionDirection, CrossDomainLink, DomainConnection
from riviere.query.diff import ComponentModification, DiffStats, GraphDiff, diff_graphs
from riviere.query.engine import GraphQuery
from riviere.query.entities import DomainSummary, Entity, EntityTransition
from riviere.query.events import EventHandlerInfo, EventSubscriber, PublishedEvent, SubscribedEvent
from riviere.query.external import ExternalDomain
from riviere.query.stats import GraphStats
from riviere.query.traversal import (
    Flow,
    FlowStep,
    SearchWithFlowResult,
    TraceResult,
    entry_points,
    find_orphans,
)

__all__ = [
    "GraphQuery",
    "ComponentModification",
    "ConnectionDirection",
    "CrossDomainLink",
    "DiffStats",
    "DomainConnection",
    "DomainSummary",
    "Entity",
    "EntityTransition",
    "EventHandlerInfo",
    "EventSubscriber",
    "ExternalDomain",
    "Flow",
    "FlowStep",
    "GraphDiff",
    "GraphStats",
    "PublishedEvent",
    "SearchWithFlowResult",
    "SubscribedEvent",
    "TraceResult",
    "diff_graphs",
    "entry_points",
    "find_orphans",
]
