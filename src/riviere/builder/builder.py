"""Graph Builder - incremental construction of architecture graphs.

GraphBuilder owns exactly one mutable Graph. Construction errors (unknown
domain, duplicate id, undefined custom type, ...) are raised at the
offending call. Link targets are deliberately not checked until
``validate()``/``build()`` so graphs can be assembled in several passes.
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

from riviere.builder.inspection import BuilderStats, BuilderWarning, calculate_stats, find_warnings
from riviere.errors import (
    CustomTypeAlreadyDefinedError,
    CustomTypeNotFoundError,
    DomainNotFoundError,
    DuplicateComponentError,
    DuplicateDomainError,
    GraphValidationError,
    InvalidEnrichmentTargetError,
    InvalidGraphError,
    MissingRequiredPropertiesError,
)
from riviere.graph.component import (
    APIComponent,
    ApiType,
    Component,
    ComponentType,
    CustomComponent,
    DomainOpComponent,
    EventComponent,
    EventHandlerComponent,
    HttpMethod,
    SourceLocation,
    StateTransition,
    UIComponent,
    UseCaseComponent,
)
from riviere.graph.component_id import ComponentId
from riviere.graph.model import (
    GRAPH_FORMAT_VERSION,
    CustomPropertyDefinition,
    CustomTypeDefinition,
    DomainMetadata,
    Graph,
    Metadata,
    SourceInfo,
    SystemType,
)
from riviere.graph.relations import ExternalLink, ExternalTarget, Link, LinkType
from riviere.graph.schema import parse_graph
from riviere.graph.serialize import graph_to_json
from riviere.query.engine import GraphQuery
from riviere.query.traversal import find_orphans
from riviere.suggest.near_matches import (
    DEFAULT_LIMIT,
    DEFAULT_THRESHOLD,
    NearMatchQuery,
    NearMatchResult,
    find_near_matches,
    source_not_found_error,
)
from riviere.validation import ValidationResult, validate_graph

logger = logging.getLogger(__name__)

LocationInput = Union[SourceLocation, Mapping[str, Any]]


def _location(value: LocationInput) -> SourceLocation:
    if isinstance(value, SourceLocation):
        return value
    return SourceLocation.from_dict(dict(value))


def _source(value: SourceInfo | Mapping[str, Any]) -> SourceInfo:
    if isinstance(value, SourceInfo):
        return value
    return SourceInfo.from_dict(dict(value))


def _domain(value: DomainMetadata | Mapping[str, Any]) -> DomainMetadata:
    if isinstance(value, DomainMetadata):
        return value
    return DomainMetadata.from_dict(dict(value))


def _transition(value: StateTransition | Mapping[str, Any]) -> StateTransition:
    if isinstance(value, StateTransition):
        return value
    return StateTransition.from_dict(dict(value))


def _metadata(values: Mapping[str, Any] | None) -> dict[str, Any] | None:
    return dict(values) if values is not None else None


def _properties(
    values: Mapping[str, CustomPropertyDefinition | Mapping[str, Any]] | None,
) -> dict[str, CustomPropertyDefinition] | None:
    if values is None:
        return None
    return {
        name: prop
        if isinstance(prop, CustomPropertyDefinition)
        else CustomPropertyDefinition.from_dict(dict(prop))
        for name, prop in values.items()
    }


class GraphBuilder:
    """Mutable construction facade over a single architecture graph.

    Create one with ``GraphBuilder.new(...)`` or ``GraphBuilder.resume(...)``.
    Not thread-safe: callers must not mutate one builder concurrently.

    Attributes:
        graph: The graph under construction. ``custom_types`` and
            ``external_links`` are always present (possibly empty).
    """

    def __init__(self, graph: Graph):
        self.graph = graph
        if self.graph.metadata.custom_types is None:
            self.graph.metadata.custom_types = {}
        if self.graph.external_links is None:
            self.graph.external_links = []

    # ─────────────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def new(
        cls,
        sources: Iterable[SourceInfo | Mapping[str, Any]],
        domains: Mapping[str, DomainMetadata | Mapping[str, Any]],
        name: str | None = None,
        description: str | None = None,
    ) -> GraphBuilder:
        """Start an empty graph.

        Args:
            sources: Repository provenance records; at least one.
            domains: Domain name to metadata; at least one.
            name: Optional graph name.
            description: Optional graph description.

        Raises:
            ValueError: If ``sources`` or ``domains`` is empty.
        """
        source_list = [_source(s) for s in sources]
        if not source_list:
            raise ValueError("At least one source required")
        if not domains:
            raise ValueError("At least one domain required")

        metadata = Metadata(
            sources=source_list,
            domains={domain: _domain(meta) for domain, meta in domains.items()},
            name=name,
            description=description,
            custom_types={},
        )
        logger.debug("Starting graph with %d domain(s)", len(metadata.domains))
        return cls(Graph(metadata=metadata, external_links=[], version=GRAPH_FORMAT_VERSION))

    @classmethod
    def resume(cls, graph: Graph | Mapping[str, Any] | str) -> GraphBuilder:
        """Continue building an existing graph.

        Args:
            graph: A Graph, decoded graph JSON, or graph JSON text. Raw
                input is schema-validated first.

        Raises:
            SchemaValidationError: If raw input is not a valid graph.
            InvalidGraphError: If the graph has no sources or the text is not JSON.
        """
        if isinstance(graph, str):
            try:
                graph = json.loads(graph)
            except json.JSONDecodeError as e:
                raise InvalidGraphError(f"Invalid graph: not valid JSON ({e})") from e
        if not isinstance(graph, Graph):
            graph = parse_graph(graph)
        else:
            graph = graph.clone()

        if not graph.metadata.sources:
            raise InvalidGraphError("Invalid graph: missing sources")
        logger.debug("Resuming graph with %d component(s)", len(graph.components))
        return cls(graph)

    def add_source(self, source: SourceInfo | Mapping[str, Any]) -> None:
        self.graph.metadata.sources.append(_source(source))

    def add_domain(
        self,
        name: str,
        description: str,
        system_type: SystemType | str,
    ) -> None:
        """Declare a new domain.

        Raises:
            DuplicateDomainError: If the domain is already declared.
            ValueError: If ``system_type`` is not a known system type.
        """
        if name in self.graph.metadata.domains:
            raise DuplicateDomainError(name)
        self.graph.metadata.domains[name] = DomainMetadata(
            description=description,
            system_type=SystemType(system_type),
        )

    def define_custom_type(
        self,
        name: str,
        description: str | None = None,
        required_properties: Mapping[str, Any] | None = None,
        optional_properties: Mapping[str, Any] | None = None,
    ) -> None:
        """Register a custom component type.

        Raises:
            CustomTypeAlreadyDefinedError: If ``name`` is already registered.
        """
        custom_types = self._custom_types()
        if name in custom_types:
            raise CustomTypeAlreadyDefinedError(name)
        custom_types[name] = CustomTypeDefinition(
            description=description,
            required_properties=_properties(required_properties),
            optional_properties=_properties(optional_properties),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Components
    # ─────────────────────────────────────────────────────────────────────────

    def add_ui(
        self,
        *,
        name: str,
        domain: str,
        module: str,
        route: str,
        source_location: LocationInput,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> UIComponent:
        self._require_domain(domain)
        return self._register(
            UIComponent(
                id=self._component_id(domain, module, ComponentType.UI, name),
                name=name,
                domain=domain,
                module=module,
                route=route,
                source_location=_location(source_location),
                description=description,
                metadata=_metadata(metadata),
            )
        )

    def add_api(
        self,
        *,
        name: str,
        domain: str,
        module: str,
        api_type: ApiType | str,
        source_location: LocationInput,
        http_method: HttpMethod | str | None = None,
        path: str | None = None,
        operation_name: str | None = None,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> APIComponent:
        self._require_domain(domain)
        return self._register(
            APIComponent(
                id=self._component_id(domain, module, ComponentType.API, name),
                name=name,
                domain=domain,
                module=module,
                api_type=ApiType(api_type),
                http_method=HttpMethod(http_method) if http_method is not None else None,
                path=path,
                operation_name=operation_name,
                source_location=_location(source_location),
                description=description,
                metadata=_metadata(metadata),
            )
        )

    def add_use_case(
        self,
        *,
        name: str,
        domain: str,
        module: str,
        source_location: LocationInput,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> UseCaseComponent:
        self._require_domain(domain)
        return self._register(
            UseCaseComponent(
                id=self._component_id(domain, module, ComponentType.USE_CASE, name),
                name=name,
                domain=domain,
                module=module,
                source_location=_location(source_location),
                description=description,
                metadata=_metadata(metadata),
            )
        )

    def add_domain_op(
        self,
        *,
        name: str,
        domain: str,
        module: str,
        operation_name: str,
        source_location: LocationInput,
        entity: str | None = None,
        signature: dict[str, Any] | None = None,
        behavior: dict[str, Any] | None = None,
        state_changes: Iterable[StateTransition | Mapping[str, Any]] | None = None,
        business_rules: Iterable[str] | None = None,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> DomainOpComponent:
        self._require_domain(domain)
        return self._register(
            DomainOpComponent(
                id=self._component_id(domain, module, ComponentType.DOMAIN_OP, name),
                name=name,
                domain=domain,
                module=module,
                operation_name=operation_name,
                entity=entity,
                signature=signature,
                behavior=behavior,
                state_changes=[_transition(t) for t in state_changes]
                if state_changes is not None
                else None,
                business_rules=list(business_rules) if business_rules is not None else None,
                source_location=_location(source_location),
                description=description,
                metadata=_metadata(metadata),
            )
        )

    def add_event(
        self,
        *,
        name: str,
        domain: str,
        module: str,
        event_name: str,
        source_location: LocationInput,
        event_schema: str | None = None,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> EventComponent:
        self._require_domain(domain)
        return self._register(
            EventComponent(
                id=self._component_id(domain, module, ComponentType.EVENT, name),
                name=name,
                domain=domain,
                module=module,
                event_name=event_name,
                event_schema=event_schema,
                source_location=_location(source_location),
                description=description,
                metadata=_metadata(metadata),
            )
        )

    def add_event_handler(
        self,
        *,
        name: str,
        domain: str,
        module: str,
        subscribed_events: Iterable[str],
        source_location: LocationInput,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> EventHandlerComponent:
        self._require_domain(domain)
        return self._register(
            EventHandlerComponent(
                id=self._component_id(domain, module, ComponentType.EVENT_HANDLER, name),
                name=name,
                domain=domain,
                module=module,
                subscribed_events=list(subscribed_events),
                source_location=_location(source_location),
                description=description,
                metadata=_metadata(metadata),
            )
        )

    def add_custom(
        self,
        *,
        custom_type_name: str,
        name: str,
        domain: str,
        module: str,
        source_location: LocationInput,
        description: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> CustomComponent:
        """Add a component of a previously defined custom type.

        ``metadata`` holds the custom type's property values and must
        contain every required property.

        Raises:
            DomainNotFoundError: If ``domain`` is not declared.
            CustomTypeNotFoundError: If the custom type is not defined.
            MissingRequiredPropertiesError: If required properties are absent.
            DuplicateComponentError: If the generated id already exists.
        """
        self._require_domain(domain)
        definition = self._require_custom_type(custom_type_name)
        missing = [key for key in definition.required_names() if key not in (metadata or {})]
        if missing:
            raise MissingRequiredPropertiesError(custom_type_name, missing)

        return self._register(
            CustomComponent(
                id=self._component_id(domain, module, ComponentType.CUSTOM, name),
                name=name,
                domain=domain,
                module=module,
                custom_type_name=custom_type_name,
                source_location=_location(source_location),
                description=description,
                metadata=_metadata(metadata),
            )
        )

    def enrich_component(
        self,
        component_id: str,
        entity: str | None = None,
        state_changes: Iterable[StateTransition | Mapping[str, Any]] | None = None,
        business_rules: Iterable[str] | None = None,
    ) -> DomainOpComponent:
        """Add domain detail to an existing DomainOp.

        ``entity`` replaces the current value; state changes and business
        rules are appended to any already recorded.

        Raises:
            ComponentNotFoundError: If no component has ``component_id``.
            InvalidEnrichmentTargetError: If the component is not a DomainOp.
        """
        component = self.graph.find_by_id(component_id)
        if component is None:
            raise source_not_found_error(self.graph.components, component_id, role="Component")
        if component.type is not ComponentType.DOMAIN_OP:
            raise InvalidEnrichmentTargetError(component_id, component.type.value)

        if entity is not None:
            component.entity = entity
        if state_changes is not None:
            component.state_changes = (component.state_changes or []) + [
                _transition(t) for t in state_changes
            ]
        if business_rules is not None:
            component.business_rules = (component.business_rules or []) + list(business_rules)
        return component

    # ─────────────────────────────────────────────────────────────────────────
    # Links
    # ─────────────────────────────────────────────────────────────────────────

    def link(self, source: str, target: str, link_type: LinkType | str | None = None) -> Link:
        """Link two components.

        Only the source is checked now; the target may be added later and
        is verified by ``validate()``.

        Raises:
            ComponentNotFoundError: If ``source`` does not exist.
        """
        self._require_source(source)
        new_link = Link(
            source=source,
            target=target,
            type=LinkType(link_type) if link_type is not None else None,
        )
        self.graph.links.append(new_link)
        return new_link

    def link_external(
        self,
        source: str,
        target: ExternalTarget | Mapping[str, Any],
        link_type: LinkType | str | None = None,
        description: str | None = None,
        source_location: LocationInput | None = None,
    ) -> ExternalLink:
        """Link a component to a system outside the graph.

        Raises:
            ComponentNotFoundError: If ``source`` does not exist.
        """
        self._require_source(source)
        external = ExternalLink(
            source=source,
            target=target
            if isinstance(target, ExternalTarget)
            else ExternalTarget.from_dict(dict(target)),
            type=LinkType(link_type) if link_type is not None else None,
            description=description,
            source_location=_location(source_location) if source_location is not None else None,
        )
        self.graph.external_links.append(external)
        return external

    # ─────────────────────────────────────────────────────────────────────────
    # Inspection
    # ─────────────────────────────────────────────────────────────────────────

    def near_matches(
        self,
        query: NearMatchQuery | str,
        threshold: float = DEFAULT_THRESHOLD,
        limit: int = DEFAULT_LIMIT,
    ) -> list[NearMatchResult]:
        if isinstance(query, str):
            query = NearMatchQuery(name=query)
        return find_near_matches(self.graph.components, query, threshold=threshold, limit=limit)

    def warnings(self) -> list[BuilderWarning]:
        return find_warnings(self.graph)

    def stats(self) -> BuilderStats:
        return calculate_stats(self.graph)

    def validate(self) -> ValidationResult:
        return validate_graph(self.graph)

    def orphans(self) -> list[str]:
        return find_orphans(self.graph)

    def query(self) -> GraphQuery:
        """Query a snapshot of the current state.

        Later builder mutations are not visible through the returned object.
        """
        return GraphQuery(self._finalized_copy())

    # ─────────────────────────────────────────────────────────────────────────
    # Output
    # ─────────────────────────────────────────────────────────────────────────

    def serialize(self) -> str:
        """Full builder state as canonical 2-space JSON, suitable for ``resume``."""
        return graph_to_json(self.graph)

    def build(self) -> Graph:
        """Validate and return the finished graph.

        Empty ``customTypes`` and ``externalLinks`` are left out.

        Raises:
            GraphValidationError: Listing every structural error.
        """
        result = self.validate()
        if not result.valid:
            logger.warning("Graph failed validation with %d error(s)", len(result.errors))
            raise GraphValidationError(result.errors)
        return self._finalized_copy()

    def save(self, path: str | Path) -> Path:
        """Build the graph and write it as JSON.

        Raises:
            GraphValidationError: If the graph is invalid.
            FileNotFoundError: If the parent directory does not exist.
        """
        graph = self.build()
        target = Path(path)
        if not target.parent.is_dir():
            raise FileNotFoundError(f"Directory does not exist: {target.parent}")
        target.write_text(graph_to_json(graph, omit_empty=True), encoding="utf-8")
        logger.debug("Saved graph to %s", target)
        return target

    # ─────────────────────────────────────────────────────────────────────────
    # Internal helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _custom_types(self) -> dict[str, CustomTypeDefinition]:
        if self.graph.metadata.custom_types is None:
            self.graph.metadata.custom_types = {}
        return self.graph.metadata.custom_types

    def _require_domain(self, domain: str) -> None:
        if domain not in self.graph.metadata.domains:
            raise DomainNotFoundError(domain)

    def _require_custom_type(self, name: str) -> CustomTypeDefinition:
        custom_types = self._custom_types()
        definition = custom_types.get(name)
        if definition is None:
            raise CustomTypeNotFoundError(name, list(custom_types))
        return definition

    def _require_source(self, source: str) -> None:
        if self.graph.find_by_id(source) is None:
            raise source_not_found_error(self.graph.components, source)

    @staticmethod
    def _component_id(domain: str, module: str, component_type: ComponentType, name: str) -> str:
        return str(ComponentId.create(domain, module, component_type.id_tag, name))

    def _register(self, component: Component) -> Component:
        if self.graph.find_by_id(component.id) is not None:
            raise DuplicateComponentError(component.id)
        self.graph.components.append(component)
        logger.debug("Registered %s component %s", component.type.value, component.id)
        return component

    def _finalized_copy(self) -> Graph:
        graph = copy.deepcopy(self.graph)
        if not graph.metadata.custom_types:
            graph.metadata.custom_types = None
        if not graph.external_links:
            graph.external_links = None
        return graph


__all__ = ["GraphBuilder"]
