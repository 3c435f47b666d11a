"""Graph Factory - shared file handling for commands.

Commands load and store graphs through these helpers rather than reading
files themselves. The core library never touches the filesystem apart
from ``GraphBuilder.save``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from riviere.builder.builder import GraphBuilder
from riviere.graph.model import Graph
from riviere.graph.schema import parse_graph

logger = logging.getLogger(__name__)


def resolve_graph_path(override: Path | None, config: dict[str, Any]) -> Path:
    """Pick the graph file: an explicit override, else ``graph.path`` from config."""
    if override is not None:
        return Path(override)
    return Path(config["graph"]["path"])


def read_graph_data(path: Path) -> Any:
    """Read and decode a graph JSON file without validating it.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not JSON.
    """
    text = Path(path).read_text(encoding="utf-8")
    return json.loads(text)


def load_graph(path: Path) -> Graph:
    """Read, decode and schema-validate a graph file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not JSON.
        SchemaValidationError: If the JSON is not a valid graph.
    """
    graph = parse_graph(read_graph_data(path))
    logger.debug("Loaded %s (%d components)", path, len(graph.components))
    return graph


def load_builder(path: Path) -> GraphBuilder:
    """Resume a builder from a graph file."""
    return GraphBuilder.resume(read_graph_data(path))


def store_builder(builder: GraphBuilder, path: Path) -> None:
    """Write the builder's full state, creating parent directories as needed."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(builder.serialize(), encoding="utf-8")
    logger.debug("Stored builder state in %s", target)


__all__ = [
    "resolve_graph_path",
    "read_graph_data",
    "load_graph",
    "load_builder",
    "store_builder",
]
