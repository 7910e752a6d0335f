"""
Skeleton pass: Module -> Namespace -> Type, without members.

Every raw type definition (nested ones included, the module pseudo-type
excluded) yields exactly one Type. Nested types are attached to their
parent and filed under the namespace of the outermost enclosing type.
"""

import logging
from typing import List, Optional, Tuple

from ..metadata.raw import RawType
from .entities import Type
from .naming import MODULE_TYPE_NAME, is_module_type
from .registry import TypeRegistry


logger = logging.getLogger(__name__)


class ModelBuilder:
    """Creates the namespace/type tree of a module."""

    def __init__(self, registry: TypeRegistry, module_type_name: str = MODULE_TYPE_NAME):
        self.registry = registry
        self.module_type_name = module_type_name

    def build(self, raw_types: List[RawType]) -> int:
        """
        Create a Type for every raw type definition.

        Nested definitions are processed right after their parent
        (depth-first, declaration order) using an explicit stack.

        Args:
            raw_types: Top-level raw type definitions of the module

        Returns:
            Number of types created
        """
        created = 0
        stack: List[Tuple[RawType, Optional[Type]]] = [
            (raw, None) for raw in reversed(raw_types)
        ]

        while stack:
            raw_type, parent = stack.pop()
            if is_module_type(raw_type, self.module_type_name):
                continue

            type_ = self.create_type(raw_type)
            if parent is not None:
                parent.nested_types.append(type_)
                type_.owner = parent
            created += 1

            for nested in reversed(raw_type.nested_types):
                stack.append((nested, type_))

        logger.info("Skeleton pass created %d types in %d namespaces",
                    created, len(self.registry.module.namespaces))
        return created

    def create_type(self, raw_type: RawType) -> Type:
        """
        Create a type and file it under its namespace.

        The namespace is created on first use.
        """
        ns_name, type_name = self.registry.key_for(raw_type)
        ns = self.registry.get_or_create_namespace(ns_name)

        type_ = Type(name=type_name, namespace=ns)
        ns.types.append(type_)
        self.registry.register(type_)
        return type_
