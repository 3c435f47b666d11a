"""Near-match suggestions for failed component lookups.

Ranks components by name similarity to a query. A component whose name
matches exactly but whose type or domain differs is always reported,
with a ``mismatch`` describing the disagreement.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from riviere.errors import ComponentNotFoundError, InvalidComponentIdError
from riviere.graph.component import Component, ComponentType
from riviere.graph.component_id import ComponentId
from riviere.suggest.similarity import similarity_score

DEFAULT_THRESHOLD = 0.6
DEFAULT_LIMIT = 10
NOT_FOUND_SUGGESTION_LIMIT = 3


@dataclass(frozen=True)
class NearMatchQuery:
    """What the caller was looking for.

    Attributes:
        name: Component name to match (case-insensitive).
        type: Expected component type, if known. A type name such as
            "UseCase" is converted to its ComponentType.
        domain: Expected domain, if known.
    """

    name: str
    type: ComponentType | None = None
    domain: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.type, str):
            object.__setattr__(self, "type", ComponentType(self.type))


@dataclass(frozen=True)
class NearMatchMismatch:
    """Right name, wrong bucket: which field disagreed and how."""

    field: str
    expected: str
    actual: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "expected": self.expected, "actual": self.actual}


@dataclass
class NearMatchResult:
    component: Component
    score: float
    mismatch: NearMatchMismatch | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "component": self.component.to_dict(),
            "score": round(self.score, 3),
        }
        if self.mismatch is not None:
            result["mismatch"] = self.mismatch.to_dict()
        return result


def _detect_mismatch(query: NearMatchQuery, component: Component) -> NearMatchMismatch | None:
    if query.name.lower() != component.name.lower():
        return None
    if query.type is not None and query.type != component.type:
        return NearMatchMismatch(
            field="type", expected=query.type.value, actual=component.type.value
        )
    if query.domain is not None and query.domain != component.domain:
        return NearMatchMismatch(field="domain", expected=query.domain, actual=component.domain)
    return None


def find_near_matches(
    components: Iterable[Component],
    query: NearMatchQuery,
    threshold: float = DEFAULT_THRESHOLD,
    limit: int = DEFAULT_LIMIT,
) -> list[NearMatchResult]:
    """Rank components similar to a query.

    Args:
        components: Candidates to score.
        query: Name plus optional expected type and domain.
        threshold: Minimum similarity for a plain match.
        limit: Maximum number of results.

    Returns:
        Matches sorted by score descending (ties keep input order). Empty
        when ``query.name`` is empty.
    """
    if query.name == "":
        return []

    results: list[NearMatchResult] = []
    for component in components:
        score = similarity_score(query.name, component.name)
        mismatch = _detect_mismatch(query, component)
        if score >= threshold or mismatch is not None:
            results.append(NearMatchResult(component=component, score=score, mismatch=mismatch))

    results.sort(key=lambda r: r.score, reverse=True)
    return results[:limit]


def source_not_found_error(
    components: Iterable[Component],
    component_id: str,
    role: str = "Source component",
    limit: int = NOT_FOUND_SUGGESTION_LIMIT,
) -> ComponentNotFoundError:
    """Build a not-found error carrying "did you mean" suggestions.

    Matching uses the name segment of ``component_id``. A string that is
    not a well-formed id is matched as a whole.
    """
    try:
        name = ComponentId.parse(component_id).name
    except InvalidComponentIdError:
        name = component_id
    matches = find_near_matches(components, NearMatchQuery(name=name), limit=limit)
    return ComponentNotFoundError(
        component_id,
        suggestions=[m.component.id for m in matches],
        role=role,
    )


__all__ = [
    "DEFAULT_THRESHOLD",
    "DEFAULT_LIMIT",
    "NOT_FOUND_SUGGESTION_LIMIT",
    "NearMatchQuery",
    "NearMatchMismatch",
    "NearMatchResult",
    "find_near_matches",
    "source_not_found_error",
]
