"""
Graph module - projects a built code model into a queryable usage graph.
"""

from .relationships import (
    RelationType,
    Relationship,
    USAGE_TYPES
)

from .usage_graph import (
    UsageGraph,
    build_usage_graph
)

__all__ = [
    # Relationships
    "RelationType",
    "Relationship",
    "USAGE_TYPES",
    # Graph
    "UsageGraph",
    "build_usage_graph",
]
