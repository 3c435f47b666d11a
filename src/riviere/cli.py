"""
riviere.cli - Command-line interface.

Main entry point for the riviere CLI tool. Every command prints a JSON
envelope on stdout; see ``riviere.commands.output``.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from riviere import __version__
from riviere.commands import builder_cmd, query_cmd
from riviere.graph.component import ApiType, ComponentType, HttpMethod
from riviere.graph.model import SystemType
from riviere.graph.relations import LinkType

COMPONENT_TYPES = [t.value for t in ComponentType]
SYSTEM_TYPES = [t.value for t in SystemType]
LINK_TYPES = [t.value for t in LinkType]


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="riviere",
        description="Build and query architecture graphs of flow-based systems",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  riviere builder init --source https://github.com/org/repo \\
      --domain '{"name":"orders","description":"Orders","systemType":"domain"}'
  riviere builder add-component --type UseCase --name "Place Order" \\
      --domain orders --module checkout --repository repo --file-path src/place.py
  riviere builder link --from orders:checkout:api:place-order \\
      --to orders:checkout:usecase:place-order --link-type sync
  riviere builder finalize --output graph.json
  riviere query entry-points --graph graph.json
  riviere query trace orders:checkout:api:place-order --graph graph.json

Configuration:
  .riviere.toml in the current directory or any parent, e.g.
    [graph]
    path = ".riviere/graph.json"
    [suggestions]
    threshold = 0.6
    limit = 10

For detailed command help: riviere <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"riviere {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "--graph",
        type=Path,
        help="Override graph file location",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    _add_builder_parser(subparsers)
    _add_query_parser(subparsers)
    return parser


def _add_builder_parser(subparsers) -> None:
    builder_parser = subparsers.add_parser("builder", help="Build a graph step by step")
    builder_sub = builder_parser.add_subparsers(dest="builder_command", help="Builder commands")

    init_parser = builder_sub.add_parser("init", help="Start a new graph")
    init_parser.add_argument(
        "--source", action="append", metavar="URL", help="Source repository (repeatable)"
    )
    init_parser.add_argument(
        "--domain",
        action="append",
        metavar="JSON",
        help='Domain as {"name", "description", "systemType"} (repeatable)',
    )
    init_parser.add_argument("--name", help="Graph name")
    init_parser.add_argument("--description", help="Graph description")

    source_parser = builder_sub.add_parser("add-source", help="Add a source repository")
    source_parser.add_argument("--repository", required=True, help="Repository URL")
    source_parser.add_argument("--commit", help="Commit the graph was extracted at")

    domain_parser = builder_sub.add_parser("add-domain", help="Declare a domain")
    domain_parser.add_argument("--name", required=True, help="Domain name")
    domain_parser.add_argument("--description", required=True, help="Domain description")
    domain_parser.add_argument(
        "--system-type", required=True, choices=SYSTEM_TYPES, help="Kind of system"
    )

    component_parser = builder_sub.add_parser("add-component", help="Add a component")
    component_parser.add_argument("--type", required=True, choices=COMPONENT_TYPES)
    component_parser.add_argument("--name", required=True)
    component_parser.add_argument("--domain", required=True)
    component_parser.add_argument("--module", required=True)
    component_parser.add_argument("--repository", required=True, help="Source repository")
    component_parser.add_argument("--file-path", required=True, help="Implementing file")
    component_parser.add_argument("--line-number", type=int)
    component_parser.add_argument("--description")
    component_parser.add_argument("--route", help="UI route")
    component_parser.add_argument("--api-type", choices=[t.value for t in ApiType])
    component_parser.add_argument("--http-method", choices=[m.value for m in HttpMethod])
    component_parser.add_argument("--http-path", help="API path")
    component_parser.add_argument("--operation-name", help="API or DomainOp operation")
    component_parser.add_argument("--entity", help="DomainOp entity")
    component_parser.add_argument("--event-name")
    component_parser.add_argument("--event-schema")
    component_parser.add_argument("--subscribed-events", help="Comma-separated event names")
    component_parser.add_argument("--custom-type", help="Custom type name")
    component_parser.add_argument(
        "--custom-property",
        action="append",
        metavar="KEY=VALUE",
        help="Custom property (repeatable)",
    )

    custom_parser = builder_sub.add_parser("define-custom-type", help="Register a custom type")
    custom_parser.add_argument("--name", required=True)
    custom_parser.add_argument("--description")
    custom_parser.add_argument(
        "--required-property", action="append", metavar="NAME:TYPE[:DESCRIPTION]"
    )
    custom_parser.add_argument(
        "--optional-property", action="append", metavar="NAME:TYPE[:DESCRIPTION]"
    )

    link_parser = builder_sub.add_parser("link", help="Link two components")
    link_parser.add_argument("--from", dest="source", required=True, metavar="ID")
    link_parser.add_argument("--to", metavar="ID", help="Target component id")
    link_parser.add_argument("--to-domain")
    link_parser.add_argument("--to-module")
    link_parser.add_argument("--to-type", choices=COMPONENT_TYPES)
    link_parser.add_argument("--to-name")
    link_parser.add_argument("--link-type", choices=LINK_TYPES)

    external_parser = builder_sub.add_parser("link-external", help="Link to an external system")
    external_parser.add_argument("--from", dest="source", required=True, metavar="ID")
    external_parser.add_argument("--target-name", required=True)
    external_parser.add_argument("--target-domain")
    external_parser.add_argument("--target-url")
    external_parser.add_argument("--link-type", choices=LINK_TYPES)
    external_parser.add_argument("--description")

    http_parser = builder_sub.add_parser("link-http", help="Link the API serving an HTTP path")
    http_parser.add_argument("--path", required=True, help="API path to match")
    http_parser.add_argument(
        "--method", choices=[m.value for m in HttpMethod], help="HTTP method to match"
    )
    http_parser.add_argument("--to-domain", required=True)
    http_parser.add_argument("--to-module", required=True)
    http_parser.add_argument("--to-type", required=True, choices=COMPONENT_TYPES)
    http_parser.add_argument("--to-name", required=True)
    http_parser.add_argument("--link-type", choices=LINK_TYPES)

    enrich_parser = builder_sub.add_parser("enrich", help="Add detail to a DomainOp")
    enrich_parser.add_argument("--id", required=True, help="DomainOp component id")
    enrich_parser.add_argument("--entity")
    enrich_parser.add_argument("--state-change", action="append", metavar="FROM:TO")
    enrich_parser.add_argument("--business-rule", action="append", metavar="RULE")

    builder_sub.add_parser("validate", help="Check the graph for structural errors")
    builder_sub.add_parser("check-consistency", help="Report non-fatal warnings")
    checklist_parser = builder_sub.add_parser(
        "component-checklist", help="List components added so far"
    )
    checklist_parser.add_argument("--type", choices=COMPONENT_TYPES)
    builder_sub.add_parser("component-summary", help="Count components and links so far")

    finalize_parser = builder_sub.add_parser("finalize", help="Validate and write the graph")
    finalize_parser.add_argument(
        "--output", metavar="PATH", help="Output file (default: graph path)"
    )


def _add_query_parser(subparsers) -> None:
    query_parser = subparsers.add_parser("query", help="Query a finished graph")
    query_sub = query_parser.add_subparsers(dest="query_command", help="Query commands")

    query_sub.add_parser("entry-points", help="List components no link points to")
    query_sub.add_parser("domains", help="Summarize domains")
    trace_parser = query_sub.add_parser("trace", help="Trace the flow through a component")
    trace_parser.add_argument("id", help="Component id")
    query_sub.add_parser("orphans", help="List components with no links")

    components_parser = query_sub.add_parser("components", help="List components")
    components_parser.add_argument("--domain")
    components_parser.add_argument("--type", choices=COMPONENT_TYPES)

    search_parser = query_sub.add_parser("search", help="Search components and their flows")
    search_parser.add_argument("term")

    query_sub.add_parser("flows", help="List flows from each entry point")
    query_sub.add_parser("depths", help="Distance of each component from an entry point")
    query_sub.add_parser("stats", help="Graph statistics")
    query_sub.add_parser("external-domains", help="Group external links by target")

    entities_parser = query_sub.add_parser("entities", help="List domain entities")
    entities_parser.add_argument("--domain")

    events_parser = query_sub.add_parser("events", help="List events and handlers")
    events_parser.add_argument("--domain")

    cross_parser = query_sub.add_parser("cross-domain", help="Links leaving a domain")
    cross_parser.add_argument("domain")

    diff_parser = query_sub.add_parser("diff", help="Compare with another graph file")
    diff_parser.add_argument("other", metavar="PATH")

    near_parser = query_sub.add_parser("near-matches", help="Find components with similar names")
    near_parser.add_argument("name")
    near_parser.add_argument("--type", choices=COMPONENT_TYPES)
    near_parser.add_argument("--domain")


def _configure_logging(args: argparse.Namespace) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle no command
    if not args.command:
        parser.print_help()
        return 0

    _configure_logging(args)

    try:
        if args.command == "builder":
            if not args.builder_command:
                parser.parse_args([args.command, "--help"])
            return builder_cmd.run(args)
        elif args.command == "query":
            if not args.query_command:
                parser.parse_args([args.command, "--help"])
            return query_cmd.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1
