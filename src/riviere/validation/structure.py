"""Structural validation - checks that go beyond the JSON schema.

Checks performed:
- every link's source and target reference an existing component
- every Custom component names a type declared in metadata.customTypes

Validation never raises. Each error carries a slash-delimited ``path``
pointing at the offending element so tooling can highlight it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from riviere.graph.component import ComponentType
from riviere.graph.model import Graph


class ValidationErrorCode(Enum):
    INVALID_LINK_SOURCE = "INVALID_LINK_SOURCE"
    INVALID_LINK_TARGET = "INVALID_LINK_TARGET"
    INVALID_TYPE = "INVALID_TYPE"


@dataclass(frozen=True)
class ValidationError:
    """A structural problem found in a graph.

    Attributes:
        path: Pointer to the element, e.g. ``/links/3/target``.
        message: Human-readable description.
        code: Machine-readable error kind.
    """

    path: str
    message: str
    code: ValidationErrorCode

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "message": self.message, "code": self.code.value}


@dataclass
class ValidationResult:
    """Outcome of structural validation."""

    errors: list[ValidationError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "errors": [e.to_dict() for e in self.errors]}


def validate_graph(graph: Graph) -> ValidationResult:
    """Run every structural check against a graph.

    Args:
        graph: The graph to check.

    Returns:
        ValidationResult listing link errors first, then custom type errors.
    """
    errors = _check_links(graph)
    errors.extend(_check_custom_types(graph))
    return ValidationResult(errors=errors)


def _check_links(graph: Graph) -> list[ValidationError]:
    known = {component.id for component in graph.components}
    errors: list[ValidationError] = []
    for index, link in enumerate(graph.links):
        if link.source not in known:
            errors.append(
                ValidationError(
                    path=f"/links/{index}/source",
                    message=f"Link references non-existent source: {link.source}",
                    code=ValidationErrorCode.INVALID_LINK_SOURCE,
                )
            )
        if link.target not in known:
            errors.append(
                ValidationError(
                    path=f"/links/{index}/target",
                    message=f"Link references non-existent target: {link.target}",
                    code=ValidationErrorCode.INVALID_LINK_TARGET,
                )
            )
    return errors


def _check_custom_types(graph: Graph) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for index, component in enumerate(graph.components):
        if component.type is not ComponentType.CUSTOM:
            continue
        if not graph.metadata.has_custom_type(component.custom_type_name):
            errors.append(
                ValidationError(
                    path=f"/components/{index}/customTypeName",
                    message=(
                        f"Custom type '{component.custom_type_name}' "
                        "is not defined in metadata.customTypes"
                    ),
                    code=ValidationErrorCode.INVALID_TYPE,
                )
            )
    return errors


__all__ = [
    "ValidationErrorCode",
    "ValidationError",
    "ValidationResult",
    "validate_graph",
]
