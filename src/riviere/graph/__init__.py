"""riviere.graph - Architecture graph model, schema and serialization."""

from riviere.graph.component import (
    COMPONENT_CLASSES,
    APIComponent,
    ApiType,
    Component,
    ComponentType,
    CustomComponent,
    DomainOpComponent,
    EventComponent,
    EventHandlerComponent,
    HttpMethod,
    SourceLocation,
    StateTransition,
    UIComponent,
    UseCaseComponent,
)
from riviere.graph.component_id import ComponentId
from riviere.graph.model import (
    CustomPropertyDefinition,
    CustomPropertyType,
    CustomTypeDefinition,
    DomainMetadata,
    Graph,
    Metadata,
    SourceInfo,
    SystemType,
)
from riviere.graph.relations import ExternalLink, ExternalTarget, Link, LinkType
from riviere.graph.schema import check_graph, format_validation_errors, is_graph, parse_graph
from riviere.graph.serialize import graph_from_dict, graph_to_dict, graph_to_json

__all__ = [
    "COMPONENT_CLASSES",
    "APIComponent",
    "ApiType",
    "Component",
    "ComponentId",
    "ComponentType",
    "CustomComponent",
    "CustomPropertyDefinition",
    "CustomPropertyType",
    "CustomTypeDefinition",
    "DomainMetadata",
    "DomainOpComponent",
    "EventComponent",
    "EventHandlerComponent",
    "ExternalLink",
    "ExternalTarget",
    "Graph",
    "HttpMethod",
    "Link",
    "LinkType",
    "Metadata",
    "SourceInfo",
    "SourceLocation",
    "StateTransition",
    "SystemType",
    "UIComponent",
    "UseCaseComponent",
    "check_graph",
    "format_validation_errors",
    "graph_from_dict",
    "graph_to_dict",
    "graph_to_json",
    "is_graph",
    "parse_graph",
]
