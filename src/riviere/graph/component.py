"""Components - the typed nodes of an architecture graph.

This module defines:
- ComponentType: the closed set of component variants
- SourceLocation: where a component is implemented
- One dataclass per variant (UIComponent, APIComponent, ...)
- Component: the union of all variants
- COMPONENT_CLASSES: the fixed type -> class dispatch table
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Union


class ComponentType(Enum):
    """Kinds of component in an architecture graph."""

    UI = "UI"
    API = "API"
    USE_CASE = "UseCase"
    DOMAIN_OP = "DomainOp"
    EVENT = "Event"
    EVENT_HANDLER = "EventHandler"
    CUSTOM = "Custom"

    @property
    def id_tag(self) -> str:
        """Type segment used when generating component ids (e.g. ``domainop``)."""
        return self.value.lower()

    def is_entry_point_type(self) -> bool:
        """Check if components of this type may start a flow.

        UseCase is never an entry point, even without incoming links.
        """
        return self in _ENTRY_POINT_TYPES


_ENTRY_POINT_TYPES = frozenset(
    {
        ComponentType.UI,
        ComponentType.API,
        ComponentType.EVENT_HANDLER,
        ComponentType.CUSTOM,
    }
)


class ApiType(Enum):
    REST = "REST"
    GRAPHQL = "GraphQL"
    OTHER = "other"


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass
class SourceLocation:
    """Location of a component's implementation.

    Attributes:
        repository: Repository URL or name.
        file_path: Path of the file within the repository.
        line_number: 1-based starting line, if known.
        end_line_number: 1-based ending line, if known.
        method_name: Implementing method or function name.
        url: Direct link to the code.
    """

    repository: str
    file_path: str
    line_number: int | None = None
    end_line_number: int | None = None
    method_name: str | None = None
    url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"repository": self.repository, "filePath": self.file_path}
        if self.line_number is not None:
            data["lineNumber"] = self.line_number
        if self.end_line_number is not None:
            data["endLineNumber"] = self.end_line_number
        if self.method_name is not None:
            data["methodName"] = self.method_name
        if self.url is not None:
            data["url"] = self.url
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceLocation:
        return cls(
            repository=data["repository"],
            file_path=data["filePath"],
            line_number=data.get("lineNumber"),
            end_line_number=data.get("endLineNumber"),
            method_name=data.get("methodName"),
            url=data.get("url"),
        )


@dataclass
class StateTransition:
    """A state change performed by a DomainOp.

    A ``from_state`` of ``"*"`` is a wildcard: the transition applies from
    any state.
    """

    from_state: str
    to_state: str
    trigger: str | None = None

    WILDCARD: ClassVar[str] = "*"

    @property
    def is_wildcard(self) -> bool:
        return self.from_state == self.WILDCARD

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"from": self.from_state, "to": self.to_state}
        if self.trigger is not None:
            data["trigger"] = self.trigger
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StateTransition:
        return cls(from_state=data["from"], to_state=data["to"], trigger=data.get("trigger"))


# ─────────────────────────────────────────────────────────────────────────────
# Component variants
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(kw_only=True)
class _ComponentFields:
    """Fields shared by every component variant.

    ``type`` is fixed per variant class and is not a constructor argument.
    """

    id: str
    name: str
    domain: str
    module: str
    source_location: SourceLocation
    description: str | None = None
    metadata: dict[str, Any] | None = None

    type: ClassVar[ComponentType]

    def _variant_dict(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the graph JSON shape with a fixed key order."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "domain": self.domain,
            "module": self.module,
        }
        data.update(self._variant_dict())
        if self.description is not None:
            data["description"] = self.description
        data["sourceLocation"] = self.source_location.to_dict()
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data


@dataclass(kw_only=True)
class UIComponent(_ComponentFields):
    type: ClassVar[ComponentType] = ComponentType.UI

    route: str

    def _variant_dict(self) -> dict[str, Any]:
        return {"route": self.route}


@dataclass(kw_only=True)
class APIComponent(_ComponentFields):
    type: ClassVar[ComponentType] = ComponentType.API

    api_type: ApiType
    http_method: HttpMethod | None = None
    path: str | None = None
    operation_name: str | None = None

    def _variant_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"apiType": self.api_type.value}
        if self.http_method is not None:
            data["httpMethod"] = self.http_method.value
        if self.path is not None:
            data["path"] = self.path
        if self.operation_name is not None:
            data["operationName"] = self.operation_name
        return data


@dataclass(kw_only=True)
class UseCaseComponent(_ComponentFields):
    type: ClassVar[ComponentType] = ComponentType.USE_CASE


@dataclass(kw_only=True)
class DomainOpComponent(_ComponentFields):
    """A state-changing operation on a domain entity."""

    type: ClassVar[ComponentType] = ComponentType.DOMAIN_OP

    operation_name: str
    entity: str | None = None
    signature: dict[str, Any] | None = None
    behavior: dict[str, Any] | None = None
    state_changes: list[StateTransition] | None = None
    business_rules: list[str] | None = None

    def _variant_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"operationName": self.operation_name}
        if self.entity is not None:
            data["entity"] = self.entity
        if self.signature is not None:
            data["signature"] = self.signature
        if self.behavior is not None:
            data["behavior"] = self.behavior
        if self.state_changes is not None:
            data["stateChanges"] = [t.to_dict() for t in self.state_changes]
        if self.business_rules is not None:
            data["businessRules"] = list(self.business_rules)
        return data


@dataclass(kw_only=True)
class EventComponent(_ComponentFields):
    type: ClassVar[ComponentType] = ComponentType.EVENT

    event_name: str
    event_schema: str | None = None

    def _variant_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"eventName": self.event_name}
        if self.event_schema is not None:
            data["eventSchema"] = self.event_schema
        return data


@dataclass(kw_only=True)
class EventHandlerComponent(_ComponentFields):
    type: ClassVar[ComponentType] = ComponentType.EVENT_HANDLER

    subscribed_events: list[str] = field(default_factory=list)

    def _variant_dict(self) -> dict[str, Any]:
        return {"subscribedEvents": list(self.subscribed_events)}


@dataclass(kw_only=True)
class CustomComponent(_ComponentFields):
    type: ClassVar[ComponentType] = ComponentType.CUSTOM

    custom_type_name: str

    def _variant_dict(self) -> dict[str, Any]:
        return {"customTypeName": self.custom_type_name}


Component = Union[
    UIComponent,
    APIComponent,
    UseCaseComponent,
    DomainOpComponent,
    EventComponent,
    EventHandlerComponent,
    CustomComponent,
]

COMPONENT_CLASSES: dict[ComponentType, type] = {
    ComponentType.UI: UIComponent,
    ComponentType.API: APIComponent,
    ComponentType.USE_CASE: UseCaseComponent,
    ComponentType.DOMAIN_OP: DomainOpComponent,
    ComponentType.EVENT: EventComponent,
    ComponentType.EVENT_HANDLER: EventHandlerComponent,
    ComponentType.CUSTOM: CustomComponent,
}


def component_from_dict(data: dict[str, Any]) -> Component:
    """Build the component variant named by ``data["type"]``.

    The input is expected to have passed schema validation.

    Raises:
        ValueError: If the type is not a known component type.
    """
    component_type = ComponentType(data["type"])
    common: dict[str, Any] = {
        "id": data["id"],
        "name": data["name"],
        "domain": data["domain"],
        "module": data["module"],
        "source_location": SourceLocation.from_dict(data["sourceLocation"]),
        "description": data.get("description"),
        "metadata": data.get("metadata"),
    }

    if component_type is ComponentType.UI:
        return UIComponent(route=data["route"], **common)
    if component_type is ComponentType.API:
        method = data.get("httpMethod")
        return APIComponent(
            api_type=ApiType(data["apiType"]),
            http_method=HttpMethod(method) if method is not None else None,
            path=data.get("path"),
            operation_name=data.get("operationName"),
            **common,
        )
    if component_type is ComponentType.USE_CASE:
        return UseCaseComponent(**common)
    if component_type is ComponentType.DOMAIN_OP:
        changes = data.get("stateChanges")
        rules = data.get("businessRules")
        return DomainOpComponent(
            operation_name=data["operationName"],
            entity=data.get("entity"),
            signature=data.get("signature"),
            behavior=data.get("behavior"),
            state_changes=[StateTransition.from_dict(t) for t in changes]
            if changes is not None
            else None,
            business_rules=list(rules) if rules is not None else None,
            **common,
        )
    if component_type is ComponentType.EVENT:
        return EventComponent(
            event_name=data["eventName"],
            event_schema=data.get("eventSchema"),
            **common,
        )
    if component_type is ComponentType.EVENT_HANDLER:
        return EventHandlerComponent(
            subscribed_events=list(data["subscribedEvents"]),
            **common,
        )
    return CustomComponent(custom_type_name=data["customTypeName"], **common)


__all__ = [
    "ComponentType",
    "ApiType",
    "HttpMethod",
    "SourceLocation",
    "StateTransition",
    "UIComponent",
    "APIComponent",
    "UseCaseComponent",
    "DomainOpComponent",
    "EventComponent",
    "EventHandlerComponent",
    "CustomComponent",
    "Component",
    "COMPONENT_CLASSES",
    "component_from_dict",
]
