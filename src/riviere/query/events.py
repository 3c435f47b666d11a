"""Event publication and subscription queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from riviere.graph.component import ComponentType, EventComponent, EventHandlerComponent
from riviere.graph.model import Graph


@dataclass(frozen=True)
class EventSubscriber:
    handler_id: str
    handler_name: str
    domain: str

    def to_dict(self) -> dict[str, str]:
        return {
            "handlerId": self.handler_id,
            "handlerName": self.handler_name,
            "domain": self.domain,
        }


@dataclass
class PublishedEvent:
    """An Event component with the handlers subscribed to it."""

    id: str
    event_name: str
    domain: str
    handlers: list[EventSubscriber] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "eventName": self.event_name,
            "domain": self.domain,
            "handlers": [h.to_dict() for h in self.handlers],
        }


@dataclass(frozen=True)
class SubscribedEvent:
    """A handler subscription resolved to the publishing domain.

    ``source_domain`` is None when no Event with that name exists.
    """

    event_name: str
    source_domain: str | None = None

    @property
    def source_known(self) -> bool:
        return self.source_domain is not None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"eventName": self.event_name, "sourceKnown": self.source_known}
        if self.source_domain is not None:
            result["sourceDomain"] = self.source_domain
        return result


@dataclass
class EventHandlerInfo:
    id: str
    handler_name: str
    domain: str
    subscribed_events: list[str] = field(default_factory=list)
    subscribed_events_with_domain: list[SubscribedEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "handlerName": self.handler_name,
            "domain": self.domain,
            "subscribedEvents": list(self.subscribed_events),
            "subscribedEventsWithDomain": [s.to_dict() for s in self.subscribed_events_with_domain],
        }


def _events(graph: Graph) -> list[EventComponent]:
    return [c for c in graph.components if c.type is ComponentType.EVENT]


def _handlers(graph: Graph) -> list[EventHandlerComponent]:
    return [c for c in graph.components if c.type is ComponentType.EVENT_HANDLER]


def published_events(graph: Graph, domain: str | None = None) -> list[PublishedEvent]:
    """Events, optionally limited to one domain, each with its subscribers."""
    handlers = _handlers(graph)
    results: list[PublishedEvent] = []
    for event in _events(graph):
        if domain and event.domain != domain:
            continue
        subscribers = [
            EventSubscriber(handler_id=h.id, handler_name=h.name, domain=h.domain)
            for h in handlers
            if event.event_name in h.subscribed_events
        ]
        results.append(
            PublishedEvent(
                id=event.id,
                event_name=event.event_name,
                domain=event.domain,
                handlers=subscribers,
            )
        )
    return results


def event_handlers(graph: Graph, event_name: str | None = None) -> list[EventHandlerInfo]:
    """Event handlers, optionally only those subscribed to ``event_name``.

    When several Events share a name, the last one in the graph decides the
    source domain.
    """
    event_domain = {e.event_name: e.domain for e in _events(graph)}
    results: list[EventHandlerInfo] = []
    for handler in _handlers(graph):
        if event_name and event_name not in handler.subscribed_events:
            continue
        results.append(
            EventHandlerInfo(
                id=handler.id,
                handler_name=handler.name,
                domain=handler.domain,
                subscribed_events=list(handler.subscribed_events),
                subscribed_events_with_domain=[
                    SubscribedEvent(event_name=name, source_domain=event_domain.get(name))
                    for name in handler.subscribed_events
                ],
            )
        )
    return results


__all__ = [
    "EventSubscriber",
    "PublishedEvent",
    "SubscribedEvent",
    "EventHandlerInfo",
    "published_events",
    "event_handlers",
]
