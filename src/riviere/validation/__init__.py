"""riviere.validation - Structural checks over architecture graphs."""

from riviere.validation.structure import (
    ValidationError,
    ValidationErrorCode,
    ValidationResult,
    validate_graph,
)

__all__ = [
    "ValidationError",
    "ValidationErrorCode",
    "ValidationResult",
    "validate_graph",
]
