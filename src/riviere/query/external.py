"""External system aggregation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from riviere.graph.model import Graph


@dataclass
class ExternalDomain:
    """An external system and the domains that call it.

    External targets are identified by name only, so links from different
    components to the same name are one external domain.
    """

    name: str
    source_domains: list[str] = field(default_factory=list)
    connection_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "sourceDomains": list(self.source_domains),
            "connectionCount": self.connection_count,
        }


def external_domains(graph: Graph) -> list[ExternalDomain]:
    """Group external links by target name, sorted by name.

    Links whose source is not a known component are skipped.
    """
    domain_of = {c.id: c.domain for c in graph.components}
    grouped: dict[str, ExternalDomain] = {}

    for link in graph.iter_external_links():
        source_domain = domain_of.get(link.source)
        if source_domain is None:
            continue
        entry = grouped.get(link.target.name)
        if entry is None:
            entry = ExternalDomain(name=link.target.name)
            grouped[link.target.name] = entry
        if source_domain not in entry.source_domains:
            entry.source_domains.append(source_domain)
        entry.connection_count += 1

    return sorted(grouped.values(), key=lambda d: d.name)


__all__ = ["ExternalDomain", "external_domains"]
