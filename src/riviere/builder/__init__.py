"""riviere.builder - Incremental construction of architecture graphs."""

from riviere.builder.builder import GraphBuilder
from riviere.builder.inspection import BuilderStats, BuilderWarning, WarningCode

__all__ = ["GraphBuilder", "BuilderStats", "BuilderWarning", "WarningCode"]
