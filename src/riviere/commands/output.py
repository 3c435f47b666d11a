"""
riviere.commands.output - JSON result envelopes shared by all commands.

Success: {"success": true, "data": ..., "warnings": [...]}
Failure: {"success": false, "error": {"code", "message", "suggestions"}}
"""

from __future__ import annotations

import json
import sys
from enum import Enum
from typing import Any

from riviere.errors import (
    ComponentNotFoundError,
    CustomTypeAlreadyDefinedError,
    CustomTypeNotFoundError,
    DomainNotFoundError,
    DuplicateComponentError,
    DuplicateDomainError,
    GraphValidationError,
    InvalidComponentIdError,
    InvalidEnrichmentTargetError,
    InvalidGraphError,
    MissingRequiredPropertiesError,
    RiviereError,
    SchemaValidationError,
)


class CliErrorCode(Enum):
    GRAPH_NOT_FOUND = "GRAPH_NOT_FOUND"
    GRAPH_CORRUPTED = "GRAPH_CORRUPTED"
    GRAPH_EXISTS = "GRAPH_EXISTS"
    COMPONENT_NOT_FOUND = "COMPONENT_NOT_FOUND"
    DOMAIN_NOT_FOUND = "DOMAIN_NOT_FOUND"
    CUSTOM_TYPE_NOT_FOUND = "CUSTOM_TYPE_NOT_FOUND"
    DUPLICATE_COMPONENT = "DUPLICATE_COMPONENT"
    DUPLICATE_DOMAIN = "DUPLICATE_DOMAIN"
    INVALID_LINK = "INVALID_LINK"
    AMBIGUOUS_API_MATCH = "AMBIGUOUS_API_MATCH"
    VALIDATION_ERROR = "VALIDATION_ERROR"


# Checked in order; first isinstance match wins
_ERROR_CODES: list[tuple[type[Exception], CliErrorCode]] = [
    (ComponentNotFoundError, CliErrorCode.COMPONENT_NOT_FOUND),
    (DomainNotFoundError, CliErrorCode.DOMAIN_NOT_FOUND),
    (CustomTypeNotFoundError, CliErrorCode.CUSTOM_TYPE_NOT_FOUND),
    (DuplicateComponentError, CliErrorCode.DUPLICATE_COMPONENT),
    (DuplicateDomainError, CliErrorCode.DUPLICATE_DOMAIN),
    (SchemaValidationError, CliErrorCode.GRAPH_CORRUPTED),
    (InvalidGraphError, CliErrorCode.GRAPH_CORRUPTED),
    (InvalidComponentIdError, CliErrorCode.INVALID_LINK),
    (CustomTypeAlreadyDefinedError, CliErrorCode.VALIDATION_ERROR),
    (MissingRequiredPropertiesError, CliErrorCode.VALIDATION_ERROR),
    (InvalidEnrichmentTargetError, CliErrorCode.VALIDATION_ERROR),
    (GraphValidationError, CliErrorCode.VALIDATION_ERROR),
]


def code_for(error: RiviereError) -> CliErrorCode:
    for error_type, code in _ERROR_CODES:
        if isinstance(error, error_type):
            return code
    return CliErrorCode.VALIDATION_ERROR


def format_success(data: Any, warnings: list[str] | None = None) -> dict[str, Any]:
    return {"success": True, "data": data, "warnings": list(warnings or [])}


def format_error(
    code: CliErrorCode,
    message: str,
    suggestions: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "success": False,
        "error": {"code": code.value, "message": message, "suggestions": list(suggestions or [])},
    }


def emit(envelope: dict[str, Any], indent: int | None = 2) -> int:
    """Print an envelope to stdout and return the matching exit code."""
    print(json.dumps(envelope, indent=indent, ensure_ascii=False), file=sys.stdout)
    return 0 if envelope["success"] else 1


def emit_success(data: Any, warnings: list[str] | None = None, indent: int | None = 2) -> int:
    return emit(format_success(data, warnings), indent=indent)


def emit_error(
    code: CliErrorCode,
    message: str,
    suggestions: list[str] | None = None,
    indent: int | None = 2,
) -> int:
    return emit(format_error(code, message, suggestions), indent=indent)


def emit_exception(error: RiviereError, indent: int | None = 2) -> int:
    """Report a riviere error, carrying its suggestions when it has any."""
    suggestions = list(getattr(error, "suggestions", []) or [])
    return emit_error(code_for(error), str(error), suggestions, indent=indent)


__all__ = [
    "CliErrorCode",
    "code_for",
    "format_success",
    "format_error",
    "emit",
    "emit_success",
    "emit_error",
    "emit_exception",
]
