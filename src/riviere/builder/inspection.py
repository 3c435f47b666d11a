"""Read-only inspection of a builder's graph: warnings and statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from riviere.graph.component import ComponentType
from riviere.graph.model import Graph
from riviere.query.traversal import find_orphans


class WarningCode(Enum):
    ORPHAN_COMPONENT = "ORPHAN_COMPONENT"
    UNUSED_DOMAIN = "UNUSED_DOMAIN"


@dataclass(frozen=True)
class BuilderWarning:
    """A non-fatal problem in a graph under construction.

    Exactly one of ``component_id`` and ``domain_name`` is set, depending
    on the code.
    """

    code: WarningCode
    message: str
    component_id: str | None = None
    domain_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.component_id is not None:
            result["componentId"] = self.component_id
        if self.domain_name is not None:
            result["domainName"] = self.domain_name
        return result


@dataclass
class BuilderStats:
    component_count: int = 0
    components_by_type: dict[str, int] = field(default_factory=dict)
    link_count: int = 0
    external_link_count: int = 0
    domain_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "componentCount": self.component_count,
            "componentsByType": dict(self.components_by_type),
            "linkCount": self.link_count,
            "externalLinkCount": self.external_link_count,
            "domainCount": self.domain_count,
        }


def find_warnings(graph: Graph) -> list[BuilderWarning]:
    """Orphaned components first, then declared domains with no components."""
    warnings = [
        BuilderWarning(
            code=WarningCode.ORPHAN_COMPONENT,
            message=f"Component '{component_id}' has no incoming or outgoing links",
            component_id=component_id,
        )
        for component_id in find_orphans(graph)
    ]

    used = {c.domain for c in graph.components}
    for domain in graph.metadata.domains:
        if domain not in used:
            warnings.append(
                BuilderWarning(
                    code=WarningCode.UNUSED_DOMAIN,
                    message=f"Domain '{domain}' is declared but has no components",
                    domain_name=domain,
                )
            )
    return warnings


def calculate_stats(graph: Graph) -> BuilderStats:
    """Count components (total and per type), links and declared domains."""
    by_type = {t.value: 0 for t in ComponentType}
    for component in graph.components:
        by_type[component.type.value] += 1
    return BuilderStats(
        component_count=len(graph.components),
        components_by_type=by_type,
        link_count=len(graph.links),
        external_link_count=len(graph.external_links or []),
        domain_count=len(graph.metadata.domains),
    )


__all__ = [
    "WarningCode",
    "BuilderWarning",
    "BuilderStats",
    "find_warnings",
    "calculate_stats",
]
