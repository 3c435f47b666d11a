"""Graph diffing.

Components are matched by id and links by key (explicit id, else
``source->target``). Links are only ever added or removed, never modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from riviere.graph.component import Component
from riviere.graph.model import Graph
from riviere.graph.relations import Link


@dataclass
class ComponentModification:
    """A component present in both graphs whose fields differ.

    Attributes:
        id: The shared component id.
        before: Component in the current graph.
        after: Component in the other graph.
        changed_fields: JSON field names whose values differ, ``id`` excluded.
    """

    id: str
    before: Component
    after: Component
    changed_fields: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "before": self.before.to_dict(),
            "after": self.after.to_dict(),
            "changedFields": list(self.changed_fields),
        }


@dataclass(frozen=True)
class DiffStats:
    components_added: int
    components_removed: int
    components_modified: int
    links_added: int
    links_removed: int

    def to_dict(self) -> dict[str, int]:
        return {
            "componentsAdded": self.components_added,
            "componentsRemoved": self.components_removed,
            "componentsModified": self.components_modified,
            "linksAdded": self.links_added,
            "linksRemoved": self.links_removed,
        }


@dataclass
class GraphDiff:
    added: list[Component] = field(default_factory=list)
    removed: list[Component] = field(default_factory=list)
    modified: list[ComponentModification] = field(default_factory=list)
    links_added: list[Link] = field(default_factory=list)
    links_removed: list[Link] = field(default_factory=list)

    @property
    def stats(self) -> DiffStats:
        return DiffStats(
            components_added=len(self.added),
            components_removed=len(self.removed),
            components_modified=len(self.modified),
            links_added=len(self.links_added),
            links_removed=len(self.links_removed),
        )

    def is_empty(self) -> bool:
        return not (
            self.added or self.removed or self.modified or self.links_added or self.links_removed
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "components": {
                "added": [c.to_dict() for c in self.added],
                "removed": [c.to_dict() for c in self.removed],
                "modified": [m.to_dict() for m in self.modified],
            },
            "links": {
                "added": [link.to_dict() for link in self.links_added],
                "removed": [link.to_dict() for link in self.links_removed],
            },
            "stats": self.stats.to_dict(),
        }


def changed_fields(before: Component, after: Component) -> list[str]:
    """Names of JSON fields whose values differ between two components.

    Fields are compared in their serialized form; a field present on only
    one side counts as changed.
    """
    before_data = before.to_dict()
    after_data = after.to_dict()
    keys = list(before_data)
    keys.extend(k for k in after_data if k not in before_data)
    return [k for k in keys if k != "id" and before_data.get(k) != after_data.get(k)]


def diff_graphs(current: Graph, other: Graph) -> GraphDiff:
    """Describe how ``other`` differs from ``current``.

    Returns:
        GraphDiff where "added" means only in ``other`` and "removed" means
        only in ``current``.
    """
    current_ids = {c.id for c in current.components}
    other_by_id = {c.id: c for c in other.components}

    result = GraphDiff(
        added=[c for c in other.components if c.id not in current_ids],
        removed=[c for c in current.components if c.id not in other_by_id],
    )

    for component in current.components:
        counterpart = other_by_id.get(component.id)
        if counterpart is None:
            continue
        fields = changed_fields(component, counterpart)
        if fields:
            result.modified.append(
                ComponentModification(
                    id=component.id,
                    before=component,
                    after=counterpart,
                    changed_fields=fields,
                )
            )

    current_keys = {link.key for link in current.links}
    other_keys = {link.key for link in other.links}
    result.links_added = [link for link in other.links if link.key not in current_keys]
    result.links_removed = [link for link in current.links if link.key not in other_keys]
    return result


__all__ = [
    "ComponentModification",
    "DiffStats",
    "GraphDiff",
    "changed_fields",
    "diff_graphs",
]
