"""Graph JSON schema and the validator that turns untrusted input into a Graph.

The schema is evaluated with ``jsonschema`` collecting every error rather
than stopping at the first. ``check_graph`` reports errors as data;
``parse_graph`` raises ``SchemaValidationError`` for bad input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from jsonschema import Draft202012Validator

from riviere.errors import SchemaValidationError
from riviere.graph.component import ApiType, ComponentType, HttpMethod
from riviere.graph.model import CustomPropertyType, Graph, SystemType
from riviere.graph.relations import LinkType
from riviere.graph.serialize import graph_from_dict

logger = logging.getLogger(__name__)


def _values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


_STRING_LIST = {"type": "array", "items": {"type": "string"}}

_COMMON_COMPONENT_PROPERTIES: dict[str, Any] = {
    "id": {"type": "string", "minLength": 1},
    "type": {"enum": _values(ComponentType)},
    "name": {"type": "string", "minLength": 1},
    "domain": {"type": "string", "minLength": 1},
    "module": {"type": "string", "minLength": 1},
    "description": {"type": "string"},
    "sourceLocation": {"$ref": "#/$defs/sourceLocation"},
    "metadata": {"type": "object"},
}

_COMMON_REQUIRED = ["id", "type", "name", "domain", "module", "sourceLocation"]

# Variant-specific (properties, required) per component type
_VARIANT_FIELDS: dict[ComponentType, tuple[dict[str, Any], list[str]]] = {
    ComponentType.UI: ({"route": {"type": "string"}}, ["route"]),
    ComponentType.API: (
        {
            "apiType": {"enum": _values(ApiType)},
            "httpMethod": {"enum": _values(HttpMethod)},
            "path": {"type": "string"},
            "operationName": {"type": "string"},
        },
        ["apiType"],
    ),
    ComponentType.USE_CASE: ({}, []),
    ComponentType.DOMAIN_OP: (
        {
            "operationName": {"type": "string"},
            "entity": {"type": "string"},
            "signature": {"$ref": "#/$defs/operationSignature"},
            "behavior": {"$ref": "#/$defs/operationBehavior"},
            "stateChanges": {"type": "array", "items": {"$ref": "#/$defs/stateTransition"}},
            "businessRules": _STRING_LIST,
        },
        ["operationName"],
    ),
    ComponentType.EVENT: (
        {"eventName": {"type": "string"}, "eventSchema": {"type": "string"}},
        ["eventName"],
    ),
    ComponentType.EVENT_HANDLER: ({"subscribedEvents": _STRING_LIST}, ["subscribedEvents"]),
    ComponentType.CUSTOM: ({"customTypeName": {"type": "string"}}, ["customTypeName"]),
}


def _variant_schema(component_type: ComponentType) -> dict[str, Any]:
    properties, required = _VARIANT_FIELDS[component_type]
    return {
        "if": {
            "properties": {"type": {"const": component_type.value}},
            "required": ["type"],
        },
        "then": {
            "properties": {**_COMMON_COMPONENT_PROPERTIES, **properties},
            "required": required,
            "additionalProperties": False,
        },
    }


GRAPH_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Architecture graph",
    "type": "object",
    "required": ["version", "metadata", "components", "links"],
    "additionalProperties": False,
    "properties": {
        "version": {"type": "string", "pattern": r"^\d+\.\d+\Z"},
        "metadata": {"$ref": "#/$defs/metadata"},
        "components": {"type": "array", "items": {"$ref": "#/$defs/component"}},
        "links": {"type": "array", "items": {"$ref": "#/$defs/link"}},
        "externalLinks": {"type": "array", "items": {"$ref": "#/$defs/externalLink"}},
    },
    "$defs": {
        "sourceLocation": {
            "type": "object",
            "required": ["repository", "filePath"],
            "additionalProperties": False,
            "properties": {
                "repository": {"type": "string"},
                "filePath": {"type": "string"},
                "lineNumber": {"type": "integer", "minimum": 1},
                "endLineNumber": {"type": "integer", "minimum": 1},
                "methodName": {"type": "string"},
                "url": {"type": "string"},
            },
        },
        "stateTransition": {
            "type": "object",
            "required": ["from", "to"],
            "additionalProperties": False,
            "properties": {
                "from": {"type": "string"},
                "to": {"type": "string"},
                "trigger": {"type": "string"},
            },
        },
        "operationSignature": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "parameters": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["name", "type"],
                        "additionalProperties": False,
                        "properties": {
                            "name": {"type": "string"},
                            "type": {"type": "string"},
                            "description": {"type": "string"},
                        },
                    },
                },
                "returnType": {"type": "string"},
            },
        },
        "operationBehavior": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "reads": _STRING_LIST,
                "validates": _STRING_LIST,
                "modifies": _STRING_LIST,
                "emits": _STRING_LIST,
            },
        },
        "component": {
            "type": "object",
            "required": _COMMON_REQUIRED,
            "properties": _COMMON_COMPONENT_PROPERTIES,
            "allOf": [_variant_schema(t) for t in ComponentType],
        },
        "link": {
            "type": "object",
            "required": ["source", "target"],
            "additionalProperties": False,
            "properties": {
                "id": {"type": "string"},
                "source": {"type": "string"},
                "target": {"type": "string"},
                "type": {"enum": _values(LinkType)},
                "payload": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "type": {"type": "string"},
                        "schema": {"type": "object"},
                    },
                },
                "sourceLocation": {"$ref": "#/$defs/sourceLocation"},
            },
        },
        "externalLink": {
            "type": "object",
            "required": ["source", "target"],
            "additionalProperties": False,
            "properties": {
                "id": {"type": "string"},
                "source": {"type": "string"},
                "target": {
                    "type": "object",
                    "required": ["name"],
                    "additionalProperties": False,
                    "properties": {
                        "name": {"type": "string"},
                        "domain": {"type": "string"},
                        "repository": {"type": "string"},
                        "url": {"type": "string"},
                    },
                },
                "type": {"enum": _values(LinkType)},
                "description": {"type": "string"},
                "sourceLocation": {"$ref": "#/$defs/sourceLocation"},
            },
        },
        "customProperty": {
            "type": "object",
            "required": ["type"],
            "additionalProperties": False,
            "properties": {
                "type": {"enum": _values(CustomPropertyType)},
                "description": {"type": "string"},
            },
        },
        "customType": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "description": {"type": "string"},
                "requiredProperties": {
                    "type": "object",
                    "additionalProperties": {"$ref": "#/$defs/customProperty"},
                },
                "optionalProperties": {
                    "type": "object",
                    "additionalProperties": {"$ref": "#/$defs/customProperty"},
                },
            },
        },
        "domain": {
            # Extra keys on a domain entry are allowed and preserved
            "type": "object",
            "required": ["description", "systemType"],
            "properties": {
                "description": {"type": "string"},
                "systemType": {"enum": _values(SystemType)},
            },
        },
        "metadata": {
            "type": "object",
            "required": ["domains"],
            "additionalProperties": False,
            "properties": {
                "name": {"type": "string"},
                "description": {"type": "string"},
                "generated": {"type": "string"},
                "sources": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "required": ["repository"],
                        "additionalProperties": False,
                        "properties": {
                            "repository": {"type": "string"},
                            "commit": {"type": "string"},
                            "extractedAt": {"type": "string"},
                        },
                    },
                },
                "domains": {
                    "type": "object",
                    "additionalProperties": {"$ref": "#/$defs/domain"},
                },
                "customTypes": {
                    "type": "object",
                    "additionalProperties": {"$ref": "#/$defs/customType"},
                },
            },
        },
    },
}

_validator = Draft202012Validator(GRAPH_SCHEMA)


@dataclass(frozen=True)
class SchemaError:
    """A single schema violation.

    Attributes:
        path: Slash-delimited pointer to the offending value ("" for the root).
        message: Validator message.
    """

    path: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


def _pointer(parts) -> str:
    return "".join(f"/{part}" for part in parts)


def check_graph(data: Any) -> list[SchemaError]:
    """Validate raw decoded JSON against the graph schema.

    Returns:
        Every schema violation, ordered by path. Empty for valid input.
    """
    errors = [
        SchemaError(path=_pointer(err.absolute_path), message=err.message)
        for err in _validator.iter_errors(data)
    ]
    errors.sort(key=lambda e: e.path)
    return errors


def is_graph(data: Any) -> bool:
    """Check whether raw decoded JSON is a valid graph."""
    return _validator.is_valid(data)


def format_validation_errors(errors: list[SchemaError] | None) -> str:
    """Render schema errors as ``path: message`` lines."""
    if not errors:
        return "validation failed without specific errors"
    return "\n".join(f"{e.path}: {e.message}" for e in errors)


def parse_graph(data: Any) -> Graph:
    """Validate raw decoded JSON and convert it to a Graph.

    Args:
        data: Decoded JSON (dicts, lists and scalars).

    Returns:
        The validated Graph.

    Raises:
        SchemaValidationError: If ``data`` does not match the schema.
    """
    errors = check_graph(data)
    if errors:
        logger.debug("Rejected graph input with %d schema error(s)", len(errors))
        raise SchemaValidationError(
            f"Invalid graph:\n{format_validation_errors(errors)}",
            errors=errors,
        )
    return graph_from_dict(data)


__all__ = [
    "GRAPH_SCHEMA",
    "SchemaError",
    "check_graph",
    "is_graph",
    "format_validation_errors",
    "parse_graph",
]
