"""
riviere - Architecture graphs for flow-based systems

riviere models a software system as components (UI, API, use case,
domain operation, event, event handler and custom types) grouped into
domains, joined by sync and async links. Graphs are built incrementally,
validated against a JSON schema, and queried for flows, entities,
events and cross-domain dependencies.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("riviere")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed

from riviere.builder import GraphBuilder
from riviere.errors import RiviereError
from riviere.graph import Graph, check_graph, is_graph, parse_graph
from riviere.query import GraphQuery

__all__ = [
    "__version__",
    "Graph",
    "GraphBuilder",
    "GraphQuery",
    "RiviereError",
    "check_graph",
    "is_graph",
    "parse_graph",
]
