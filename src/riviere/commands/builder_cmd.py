"""
riviere.commands.builder_cmd - Build a graph incrementally from the command line.

Each subcommand loads the in-progress graph file, applies one change and
writes the full builder state back.
"""

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from riviere.builder import GraphBuilder
from riviere.commands.output import (
    CliErrorCode,
    emit,
    emit_error,
    emit_exception,
    emit_success,
    format_success,
)
from riviere.config import get_config
from riviere.errors import ConfigError, RiviereError
from riviere.graph.component import APIComponent, ComponentType, HttpMethod, SourceLocation
from riviere.graph.component_id import ComponentId
from riviere.graph.factory import load_builder, resolve_graph_path, store_builder
from riviere.graph.relations import ExternalTarget

# Option each component type cannot do without
_REQUIRED_OPTIONS: Dict[ComponentType, List[str]] = {
    ComponentType.UI: ["route"],
    ComponentType.API: ["api_type"],
    ComponentType.USE_CASE: [],
    ComponentType.DOMAIN_OP: ["operation_name"],
    ComponentType.EVENT: ["event_name"],
    ComponentType.EVENT_HANDLER: ["subscribed_events"],
    ComponentType.CUSTOM: ["custom_type"],
}


def run(args: argparse.Namespace) -> int:
    """
    Run a builder subcommand.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        config = get_config(args.config)
    except ConfigError as e:
        return emit_error(CliErrorCode.VALIDATION_ERROR, str(e))
    indent = config["output"]["indent"]
    graph_path = resolve_graph_path(args.graph, config)

    if args.builder_command == "init":
        return _init(args, graph_path, indent)

    handler = _HANDLERS.get(args.builder_command)
    if handler is None:
        return emit_error(
            CliErrorCode.VALIDATION_ERROR,
            f"Unknown builder command: {args.builder_command}",
            indent=indent,
        )

    try:
        builder = load_builder(graph_path)
    except FileNotFoundError:
        return emit_error(
            CliErrorCode.GRAPH_NOT_FOUND,
            f"Graph not found at {graph_path}",
            ["Run riviere builder init first"],
            indent=indent,
        )
    except (json.JSONDecodeError, RiviereError) as e:
        return emit_error(
            CliErrorCode.GRAPH_CORRUPTED, f"Cannot read graph at {graph_path}: {e}", indent=indent
        )

    try:
        return handler(args, builder, graph_path, indent)
    except RiviereError as e:
        return emit_exception(e, indent=indent)
    except ValueError as e:
        return emit_error(CliErrorCode.VALIDATION_ERROR, str(e), indent=indent)


# ─────────────────────────────────────────────────────────────────────────────
# Subcommands
# ─────────────────────────────────────────────────────────────────────────────


def _init(args: argparse.Namespace, graph_path: Path, indent: int) -> int:
    if graph_path.exists():
        return emit_error(
            CliErrorCode.GRAPH_EXISTS,
            f"Graph already exists at {graph_path}",
            ["Delete the file to reinitialize"],
            indent=indent,
        )
    if not args.source:
        return emit_error(
            CliErrorCode.VALIDATION_ERROR,
            "At least one source required",
            ["Add --source <url> flag"],
            indent=indent,
        )
    if not args.domain:
        return emit_error(
            CliErrorCode.VALIDATION_ERROR,
            "At least one domain required",
            ["Add --domain <json> flag"],
            indent=indent,
        )

    try:
        domains = _parse_domains(args.domain)
        builder = GraphBuilder.new(
            sources=[{"repository": url} for url in args.source],
            domains=domains,
            name=args.name,
            description=args.description,
        )
    except ValueError as e:
        return emit_error(CliErrorCode.VALIDATION_ERROR, str(e), indent=indent)

    store_builder(builder, graph_path)
    return emit_success(
        {"path": str(graph_path), "sources": len(args.source), "domains": list(domains)},
        indent=indent,
    )


def _add_source(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    source: Dict[str, Any] = {"repository": args.repository}
    if args.commit:
        source["commit"] = args.commit
    builder.add_source(source)
    store_builder(builder, graph_path)
    return emit_success({"repository": args.repository}, indent=indent)


def _add_domain(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    builder.add_domain(args.name, args.description, args.system_type)
    store_builder(builder, graph_path)
    return emit_success(
        {"name": args.name, "description": args.description, "systemType": args.system_type},
        indent=indent,
    )


def _add_component(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    component_type = ComponentType(args.type)
    missing = [name for name in _REQUIRED_OPTIONS[component_type] if not getattr(args, name)]
    if missing:
        flags = ", ".join("--" + name.replace("_", "-") for name in missing)
        return emit_error(
            CliErrorCode.VALIDATION_ERROR,
            f"{flags} required for {component_type.value} components",
            indent=indent,
        )

    location = SourceLocation(
        repository=args.repository,
        file_path=args.file_path,
        line_number=args.line_number,
    )
    common: Dict[str, Any] = {
        "name": args.name,
        "domain": args.domain,
        "module": args.module,
        "source_location": location,
        "description": args.description,
    }

    if component_type is ComponentType.UI:
        component = builder.add_ui(route=args.route, **common)
    elif component_type is ComponentType.API:
        component = builder.add_api(
            api_type=args.api_type,
            http_method=args.http_method,
            path=args.http_path,
            operation_name=args.operation_name,
            **common,
        )
    elif component_type is ComponentType.USE_CASE:
        component = builder.add_use_case(**common)
    elif component_type is ComponentType.DOMAIN_OP:
        component = builder.add_domain_op(
            operation_name=args.operation_name,
            entity=args.entity,
            **common,
        )
    elif component_type is ComponentType.EVENT:
        component = builder.add_event(
            event_name=args.event_name,
            event_schema=args.event_schema,
            **common,
        )
    elif component_type is ComponentType.EVENT_HANDLER:
        component = builder.add_event_handler(
            subscribed_events=_split_list(args.subscribed_events),
            **common,
        )
    else:
        component = builder.add_custom(
            custom_type_name=args.custom_type,
            metadata=_parse_properties(args.custom_property) or None,
            **common,
        )

    store_builder(builder, graph_path)
    return emit_success({"componentId": component.id}, indent=indent)


def _define_custom_type(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    builder.define_custom_type(
        args.name,
        description=args.description,
        required_properties=_parse_property_definitions(args.required_property),
        optional_properties=_parse_property_definitions(args.optional_property),
    )
    store_builder(builder, graph_path)
    return emit_success({"name": args.name}, indent=indent)


def _link(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    target = args.to
    if target is None:
        parts = [args.to_domain, args.to_module, args.to_type, args.to_name]
        if not all(parts):
            return emit_error(
                CliErrorCode.VALIDATION_ERROR,
                "Either --to or all of --to-domain, --to-module, --to-type, --to-name are required",
                indent=indent,
            )
        tag = ComponentType(args.to_type).id_tag
        target = str(ComponentId.create(args.to_domain, args.to_module, tag, args.to_name))

    link = builder.link(args.source, target, args.link_type)
    store_builder(builder, graph_path)
    return emit_success(link.to_dict(), indent=indent)


def _link_external(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    external = builder.link_external(
        args.source,
        ExternalTarget(name=args.target_name, domain=args.target_domain, url=args.target_url),
        link_type=args.link_type,
        description=args.description,
    )
    store_builder(builder, graph_path)
    return emit_success(external.to_dict(), indent=indent)


def _link_http(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    apis = [
        c for c in builder.graph.components if isinstance(c, APIComponent) and c.path == args.path
    ]
    if args.method:
        apis = [api for api in apis if api.http_method is HttpMethod(args.method)]

    if not apis:
        paths = sorted(
            {c.path for c in builder.graph.components if isinstance(c, APIComponent) and c.path}
        )
        suggestions = [f"Available paths: {', '.join(paths)}"] if paths else []
        return emit_error(
            CliErrorCode.COMPONENT_NOT_FOUND,
            f"No API found with path '{args.path}'",
            suggestions,
            indent=indent,
        )
    if len(apis) > 1:
        matches = ", ".join(f"{api.id} ({_method_name(api) or 'any'})" for api in apis)
        return emit_error(
            CliErrorCode.AMBIGUOUS_API_MATCH,
            f"Multiple APIs match path '{args.path}': {matches}",
            ["Add --method flag to disambiguate"],
            indent=indent,
        )

    api = apis[0]
    tag = ComponentType(args.to_type).id_tag
    target = str(ComponentId.create(args.to_domain, args.to_module, tag, args.to_name))
    link = builder.link(api.id, target, args.link_type)
    store_builder(builder, graph_path)
    return emit_success(
        {
            "link": link.to_dict(),
            "matchedApi": {"id": api.id, "path": api.path, "method": _method_name(api)},
        },
        indent=indent,
    )


def _enrich(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    state_changes = None
    if args.state_change:
        state_changes = [_parse_state_change(value) for value in args.state_change]
    component = builder.enrich_component(
        args.id,
        entity=args.entity,
        state_changes=state_changes,
        business_rules=args.business_rule or None,
    )
    store_builder(builder, graph_path)
    return emit_success(component.to_dict(), indent=indent)


def _validate(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    result = builder.validate()
    emit(format_success(result.to_dict()), indent=indent)
    return 0 if result.valid else 1


def _check_consistency(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    warnings = builder.warnings()
    return emit_success(
        {"consistent": not warnings, "warnings": [w.to_dict() for w in warnings]},
        warnings=[w.message for w in warnings],
        indent=indent,
    )


def _component_checklist(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    components = builder.graph.components
    if args.type:
        components = [c for c in components if c.type is ComponentType(args.type)]
    return emit_success(
        {
            "total": len(components),
            "components": [
                {"id": c.id, "type": c.type.value, "name": c.name, "domain": c.domain}
                for c in components
            ],
        },
        indent=indent,
    )


def _component_summary(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    return emit_success(builder.stats().to_dict(), indent=indent)


def _finalize(args, builder: GraphBuilder, graph_path: Path, indent: int) -> int:
    output = Path(args.output) if args.output else graph_path
    try:
        builder.save(output)
    except FileNotFoundError as e:
        return emit_error(CliErrorCode.VALIDATION_ERROR, str(e), indent=indent)
    warnings = [w.message for w in builder.warnings()]
    return emit_success({"path": str(output)}, warnings=warnings, indent=indent)


_HANDLERS = {
    "add-source": _add_source,
    "add-domain": _add_domain,
    "add-component": _add_component,
    "define-custom-type": _define_custom_type,
    "link": _link,
    "link-external": _link_external,
    "link-http": _link_http,
    "enrich": _enrich,
    "validate": _validate,
    "check-consistency": _check_consistency,
    "component-checklist": _component_checklist,
    "component-summary": _component_summary,
    "finalize": _finalize,
}


# ─────────────────────────────────────────────────────────────────────────────
# Option parsing
# ─────────────────────────────────────────────────────────────────────────────


def _parse_domains(values: List[str]) -> Dict[str, Dict[str, Any]]:
    """Parse repeated --domain JSON objects into a domain mapping."""
    domains: Dict[str, Dict[str, Any]] = {}
    for value in values:
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            raise ValueError(f"Invalid domain JSON: {value}") from None
        if not isinstance(parsed, dict) or not all(
            isinstance(parsed.get(key), str) for key in ("name", "description", "systemType")
        ):
            raise ValueError(f"Invalid domain JSON: {value}")
        if parsed["name"] in domains:
            raise ValueError(f"Duplicate domain: {parsed['name']}")
        domains[parsed["name"]] = {
            "description": parsed["description"],
            "systemType": parsed["systemType"],
        }
    return domains


def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _method_name(api: APIComponent) -> Optional[str]:
    return api.http_method.value if api.http_method is not None else None


def _parse_state_change(value: str) -> Dict[str, str]:
    """Parse FROM:TO into a state transition mapping."""
    from_state, sep, to_state = value.partition(":")
    if not sep or not from_state or not to_state:
        raise ValueError(f"Invalid state change '{value}'. Expected FROM:TO")
    return {"from": from_state, "to": to_state}


def _parse_properties(values: Optional[List[str]]) -> Dict[str, Any]:
    """Parse KEY=VALUE custom property values; JSON values are decoded."""
    properties: Dict[str, Any] = {}
    for value in values or []:
        key, sep, raw = value.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid property '{value}'. Expected KEY=VALUE")
        try:
            properties[key] = json.loads(raw)
        except json.JSONDecodeError:
            properties[key] = raw
    return properties


def _parse_property_definitions(values: Optional[List[str]]) -> Optional[Dict[str, Dict[str, str]]]:
    """Parse NAME:TYPE[:DESCRIPTION] custom property definitions."""
    if not values:
        return None
    definitions: Dict[str, Dict[str, str]] = {}
    for value in values:
        parts: Tuple[str, ...] = tuple(value.split(":", 2))
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise ValueError(
                f"Invalid property definition '{value}'. Expected NAME:TYPE[:DESCRIPTION]"
            )
        definition = {"type": parts[1]}
        if len(parts) == 3 and parts[2]:
            definition["description"] = parts[2]
        definitions[parts[0]] = definition
    return definitions
