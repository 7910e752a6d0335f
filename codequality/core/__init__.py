"""
Core module: rebuilds a navigable code model from raw binary metadata.
"""

from .entities import (
    Module,
    Namespace,
    Type,
    Field,
    Event,
    Method
)

from .naming import (
    NO_NAMESPACE,
    MODULE_TYPE_NAME,
    strip_generic_arity,
    format_type_name,
    format_method_name,
    get_namespace_name,
    is_module_type
)

from .registry import TypeRegistry

from .builder import ModelBuilder

from .populator import MemberPopulator

from .resolver import (
    UsageResolver,
    UsageSummary,
    chase_operand
)

from .reader import (
    MetricsReader,
    build_module
)

__all__ = [
    # Entities
    "Module",
    "Namespace",
    "Type",
    "Field",
    "Event",
    "Method",
    # Naming
    "NO_NAMESPACE",
    "MODULE_TYPE_NAME",
    "strip_generic_arity",
    "format_type_name",
    "format_method_name",
    "get_namespace_name",
    "is_module_type",
    # Stages
    "TypeRegistry",
    "ModelBuilder",
    "MemberPopulator",
    "UsageResolver",
    "UsageSummary",
    "chase_operand",
    # Facade
    "MetricsReader",
    "build_module",
]
