"""
Code model builder and usage-graph extractor for code quality metrics.

Typical use::

    from codequality import build_module, build_usage_graph

    module = build_module(raw_module)
    graph = build_usage_graph(module)
"""

__version__ = "0.1.0"

from .config import BuilderConfig, get_config
from .errors import CodeQualityError, ConfigurationError, ModelBuildError
from .core import (
    Module,
    Namespace,
    Type,
    Field,
    Event,
    Method,
    MetricsReader,
    build_module
)
from .graph import UsageGraph, build_usage_graph

__all__ = [
    "BuilderConfig",
    "get_config",
    "CodeQualityError",
    "ConfigurationError",
    "ModelBuildError",
    "Module",
    "Namespace",
    "Type",
    "Field",
    "Event",
    "Method",
    "MetricsReader",
    "build_module",
    "UsageGraph",
    "build_usage_graph",
]
