"""
riviere.config.defaults - Default configuration values.
"""

CONFIG_FILENAME = ".riviere.toml"
ENV_PREFIX = "RIVIERE_"

DEFAULT_CONFIG = {
    "graph": {
        # Where builder commands keep the graph under construction
        "path": ".riviere/graph.json",
    },
    "suggestions": {
        "threshold": 0.6,
        "limit": 10,
    },
    "output": {
        "indent": 2,
    },
}
