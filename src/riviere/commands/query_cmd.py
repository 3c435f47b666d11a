"""
riviere.commands.query_cmd - Read-only queries over a finished graph.
"""

import argparse
import json
from pathlib import Path
from typing import Any, Dict

from riviere.commands.output import CliErrorCode, emit_error, emit_exception, emit_success
from riviere.config import get_config
from riviere.errors import ConfigError, RiviereError
from riviere.graph.component import ComponentType
from riviere.graph.factory import load_graph, resolve_graph_path
from riviere.query import GraphQuery
from riviere.suggest import NearMatchQuery, find_near_matches


def run(args: argparse.Namespace) -> int:
    """
    Run a query subcommand against the configured graph file.

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

    try:
        query = GraphQuery(load_graph(graph_path))
    except FileNotFoundError:
        return emit_error(
            CliErrorCode.GRAPH_NOT_FOUND,
            f"Graph not found at {graph_path}",
            ["Run riviere builder finalize first, or pass --graph"],
            indent=indent,
        )
    except json.JSONDecodeError as e:
        return emit_error(
            CliErrorCode.GRAPH_CORRUPTED, f"Cannot read graph at {graph_path}: {e}", indent=indent
        )
    except RiviereError as e:
        return emit_exception(e, indent=indent)

    try:
        data = _dispatch(args, query, config)
    except FileNotFoundError as e:
        return emit_error(
            CliErrorCode.GRAPH_NOT_FOUND, f"Graph not found at {e.filename}", indent=indent
        )
    except json.JSONDecodeError as e:
        return emit_error(CliErrorCode.GRAPH_CORRUPTED, f"Cannot read graph: {e}", indent=indent)
    except RiviereError as e:
        return emit_exception(e, indent=indent)
    except ValueError as e:
        return emit_error(CliErrorCode.VALIDATION_ERROR, str(e), indent=indent)

    return emit_success(data, indent=indent)


def _dispatch(args: argparse.Namespace, query: GraphQuery, config: Dict[str, Any]) -> Any:
    command = args.query_command

    if command == "entry-points":
        return {"entryPoints": [c.to_dict() for c in query.entry_points()]}
    elif command == "domains":
        return {"domains": [d.to_dict() for d in query.domains()]}
    elif command == "trace":
        return query.trace_flow(args.id).to_dict()
    elif command == "orphans":
        return {"orphans": query.detect_orphans()}
    elif command == "components":
        components = query.components()
        if args.domain:
            components = [c for c in components if c.domain == args.domain]
        if args.type:
            component_type = ComponentType(args.type)
            components = [c for c in components if c.type is component_type]
        return {"components": [c.to_dict() for c in components]}
    elif command == "search":
        return query.search_with_flow(args.term).to_dict()
    elif command == "flows":
        return {"flows": [f.to_dict() for f in query.flows()]}
    elif command == "depths":
        return {"depths": query.node_depths()}
    elif command == "stats":
        return query.stats().to_dict()
    elif command == "external-domains":
        return {"externalDomains": [d.to_dict() for d in query.external_domains()]}
    elif command == "entities":
        return {"entities": [e.to_dict() for e in query.entities(args.domain)]}
    elif command == "events":
        return {
            "events": [e.to_dict() for e in query.published_events(args.domain)],
            "handlers": [h.to_dict() for h in query.event_handlers()],
        }
    elif command == "cross-domain":
        return {
            "domain": args.domain,
            "links": [link.to_dict() for link in query.cross_domain_links(args.domain)],
            "connections": [c.to_dict() for c in query.domain_connections(args.domain)],
        }
    elif command == "diff":
        other = load_graph(Path(args.other))
        return query.diff(other).to_dict()
    elif command == "near-matches":
        suggestions = config["suggestions"]
        near = NearMatchQuery(
            name=args.name,
            type=ComponentType(args.type) if args.type else None,
            domain=args.domain,
        )
        matches = find_near_matches(
            query.components(),
            near,
            threshold=suggestions["threshold"],
            limit=suggestions["limit"],
        )
        return {"matches": [m.to_dict() for m in matches]}
    raise ValueError(f"Unknown query command: {command}")
