"""Graph Serialization - convert a Graph to and from its JSON form.

Output keys follow a fixed order so that serializing the same graph twice
yields identical text.
"""

from __future__ import annotations

import json
from typing import Any

from riviere.graph.component import component_from_dict
from riviere.graph.model import (
    GRAPH_FORMAT_VERSION,
    CustomTypeDefinition,
    DomainMetadata,
    Graph,
    Metadata,
    SourceInfo,
)
from riviere.graph.relations import ExternalLink, Link

JSON_INDENT = 2


def serialize_metadata(metadata: Metadata, omit_empty: bool = False) -> dict[str, Any]:
    """Serialize graph metadata to a JSON-compatible dict.

    Args:
        metadata: The metadata to serialize.
        omit_empty: Drop ``customTypes`` when it has no entries.
    """
    result: dict[str, Any] = {}
    if metadata.name is not None:
        result["name"] = metadata.name
    if metadata.description is not None:
        result["description"] = metadata.description
    if metadata.generated is not None:
        result["generated"] = metadata.generated
    result["sources"] = [source.to_dict() for source in metadata.sources]
    result["domains"] = {name: domain.to_dict() for name, domain in metadata.domains.items()}
    if metadata.custom_types is not None and (metadata.custom_types or not omit_empty):
        result["customTypes"] = {
            name: definition.to_dict() for name, definition in metadata.custom_types.items()
        }
    return result


def graph_to_dict(graph: Graph, omit_empty: bool = False) -> dict[str, Any]:
    """Serialize a Graph to a JSON-compatible dict.

    Args:
        graph: The graph to serialize.
        omit_empty: Drop empty ``customTypes`` and ``externalLinks``. Used
            for finalized output; builder state keeps them.

    Returns:
        Dict suitable for JSON serialization.
    """
    result: dict[str, Any] = {
        "version": graph.version,
        "metadata": serialize_metadata(graph.metadata, omit_empty=omit_empty),
        "components": [component.to_dict() for component in graph.components],
        "links": [link.to_dict() for link in graph.links],
    }
    if graph.external_links is not None and (graph.external_links or not omit_empty):
        result["externalLinks"] = [link.to_dict() for link in graph.external_links]
    return result


def graph_to_json(graph: Graph, omit_empty: bool = False, indent: int = JSON_INDENT) -> str:
    """Serialize a Graph to pretty-printed JSON text."""
    data = graph_to_dict(graph, omit_empty=omit_empty)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def metadata_from_dict(data: dict[str, Any]) -> Metadata:
    custom_types = data.get("customTypes")
    return Metadata(
        sources=[SourceInfo.from_dict(s) for s in data.get("sources", [])],
        domains={
            name: DomainMetadata.from_dict(domain)
            for name, domain in data.get("domains", {}).items()
        },
        name=data.get("name"),
        description=data.get("description"),
        generated=data.get("generated"),
        custom_types={
            name: CustomTypeDefinition.from_dict(definition)
            for name, definition in custom_types.items()
        }
        if custom_types is not None
        else None,
    )


def graph_from_dict(data: dict[str, Any]) -> Graph:
    """Build a Graph from schema-valid decoded JSON.

    Callers handling untrusted input should go through
    ``riviere.graph.schema.parse_graph`` instead.
    """
    external = data.get("externalLinks")
    return Graph(
        version=data.get("version", GRAPH_FORMAT_VERSION),
        metadata=metadata_from_dict(data["metadata"]),
        components=[component_from_dict(c) for c in data.get("components", [])],
        links=[Link.from_dict(link) for link in data.get("links", [])],
        external_links=[ExternalLink.from_dict(link) for link in external]
        if external is not None
        else None,
    )


__all__ = [
    "JSON_INDENT",
    "serialize_metadata",
    "graph_to_dict",
    "graph_to_json",
    "metadata_from_dict",
    "graph_from_dict",
]
