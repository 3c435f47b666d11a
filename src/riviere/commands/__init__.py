"""
riviere.commands - CLI command implementations
"""

__all__ = [
    "builder_cmd",
    "output",
    "query_cmd",
]
