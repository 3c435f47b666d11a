"""Exception hierarchy for riviere.

Construction errors are raised at the offending call and carry the id or
name involved. Not-found errors additionally carry ranked suggestions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from riviere.validation.structure import ValidationError


class RiviereError(Exception):
    """Base exception for all riviere errors."""


# ─────────────────────────────────────────────────────────────────────────────
# Input and validation errors
# ─────────────────────────────────────────────────────────────────────────────


class SchemaValidationError(RiviereError, ValueError):
    """Raised when untrusted input does not have the shape of a graph.

    Attributes:
        errors: Structured schema errors (objects with ``path`` and ``message``).
    """

    def __init__(self, message: str, errors: list[Any] | None = None):
        super().__init__(message)
        self.errors = list(errors or [])


class ConfigError(RiviereError):
    """Raised when a configuration file cannot be read or parsed."""


class GraphValidationError(RiviereError):
    """Raised when a graph being finalized fails structural validation."""

    def __init__(self, errors: list[ValidationError]):
        self.errors = list(errors)
        messages = "; ".join(f"{e.path}: {e.message}" for e in self.errors)
        super().__init__(f"Validation failed: {messages}")


class InvalidGraphError(RiviereError):
    """Raised when a graph cannot be resumed by the builder."""


class InvalidComponentIdError(RiviereError, ValueError):
    """Raised when a string is not a well-formed component id."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"Invalid component ID format: '{value}'. Expected 'domain:module:type:name'"
        )


# ─────────────────────────────────────────────────────────────────────────────
# Construction errors
# ─────────────────────────────────────────────────────────────────────────────


class DuplicateComponentError(RiviereError):
    def __init__(self, component_id: str):
        self.component_id = component_id
        super().__init__(f"Component with ID '{component_id}' already exists")


class DuplicateDomainError(RiviereError):
    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(f"Domain '{domain}' already exists")


class DomainNotFoundError(RiviereError, LookupError):
    def __init__(self, domain: str):
        self.domain = domain
        super().__init__(f"Domain '{domain}' does not exist")


class CustomTypeNotFoundError(RiviereError, LookupError):
    """Raised when a Custom component names a type that was never defined."""

    def __init__(self, custom_type: str, defined_types: list[str]):
        self.custom_type = custom_type
        self.defined_types = list(defined_types)
        if self.defined_types:
            hint = f"Defined types: {', '.join(self.defined_types)}"
        else:
            hint = "No custom types have been defined."
        super().__init__(f"Custom type '{custom_type}' not defined. {hint}")


class CustomTypeAlreadyDefinedError(RiviereError):
    def __init__(self, custom_type: str):
        self.custom_type = custom_type
        super().__init__(f"Custom type '{custom_type}' already defined")


class MissingRequiredPropertiesError(RiviereError):
    def __init__(self, custom_type: str, missing: list[str]):
        self.custom_type = custom_type
        self.missing = list(missing)
        super().__init__(
            f"Missing required properties for '{custom_type}': {', '.join(self.missing)}"
        )


class InvalidEnrichmentTargetError(RiviereError):
    def __init__(self, component_id: str, component_type: str):
        self.component_id = component_id
        self.component_type = component_type
        super().__init__(
            f"Only DomainOp components can be enriched. "
            f"'{component_id}' is type '{component_type}'"
        )


# ─────────────────────────────────────────────────────────────────────────────
# Lookup errors
# ─────────────────────────────────────────────────────────────────────────────


class ComponentNotFoundError(RiviereError, LookupError):
    """Raised when a component id does not exist in the graph.

    Attributes:
        component_id: The id that was looked up.
        suggestions: Ids of similarly named components, best match first.
    """

    def __init__(
        self,
        component_id: str,
        suggestions: list[str] | None = None,
        role: str = "Component",
    ):
        self.component_id = component_id
        self.suggestions = list(suggestions or [])
        message = f"{role} '{component_id}' not found"
        if self.suggestions:
            message += f". Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)


__all__ = [
    "RiviereError",
    "ConfigError",
    "SchemaValidationError",
    "GraphValidationError",
    "InvalidGraphError",
    "InvalidComponentIdError",
    "DuplicateComponentError",
    "DuplicateDomainError",
    "DomainNotFoundError",
    "CustomTypeNotFoundError",
    "CustomTypeAlreadyDefinedError",
    "MissingRequiredPropertiesError",
    "InvalidEnrichmentTargetError",
    "ComponentNotFoundError",
]
