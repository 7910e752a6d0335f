"""
Canonical-name index over the rebuilt model.

Raw metadata carries no identifier that survives into the model, so every
cross-reference (declaring type, call target, event type) is re-resolved
by canonical name. The registry keeps those lookups off linear scans of
the namespace tree; its observable behaviour is the same as searching
``module.namespaces`` for a type with a matching name.
"""

import logging
from typing import Dict, List, Optional, Tuple

from ..errors import ModelBuildError
from ..metadata.raw import RawType
from .entities import Module, Namespace, Type
from .naming import NO_NAMESPACE, format_type_name, get_namespace_name


logger = logging.getLogger(__name__)

TypeKey = Tuple[str, str]


class TypeRegistry:
    """
    Registry of every namespace and type of one module build.

    A fresh registry is created per build; nothing is shared between runs.
    """

    def __init__(self, module: Module, no_namespace: str = NO_NAMESPACE):
        self.module = module
        self.no_namespace = no_namespace

        # Namespace name -> Namespace
        self._namespaces: Dict[str, Namespace] = {
            ns.name: ns for ns in module.namespaces
        }

        # (namespace name, canonical type name) -> Type
        self._types_by_key: Dict[TypeKey, Type] = {}

        # Canonical type name -> Types with that name, in creation order
        self._types_by_name: Dict[str, List[Type]] = {}

    def key_for(self, raw_type: RawType) -> TypeKey:
        """Lookup key of a raw type: its namespace and canonical name."""
        return (get_namespace_name(raw_type, self.no_namespace), format_type_name(raw_type))

    def get_or_create_namespace(self, name: str) -> Namespace:
        """Find a namespace by name, creating and attaching it on first use."""
        ns = self._namespaces.get(name)
        if ns is None:
            ns = Namespace(name=name, module=self.module)
            self.module.namespaces.append(ns)
            self._namespaces[name] = ns
            logger.debug("Created namespace %s", name)
        return ns

    def register(self, type_: Type) -> None:
        """
        Index a newly created type.

        Raises:
            ModelBuildError: If another type already owns the same key
        """
        key = (type_.namespace.name, type_.name)
        if key in self._types_by_key:
            raise ModelBuildError(
                f"Duplicate type definition '{type_.name}' in namespace '{key[0]}'"
            )
        self._types_by_key[key] = type_
        self._types_by_name.setdefault(type_.name, []).append(type_)

    def find_type(self, raw_type: Optional[RawType]) -> Optional[Type]:
        """
        Resolve a raw type definition or reference to its built Type.

        Returns:
            The Type, or None when the raw type is not part of the module
        """
        if raw_type is None:
            return None
        return self._types_by_key.get(self.key_for(raw_type))

    def find_by_name(self, name: str) -> List[Type]:
        """Find all types with the given canonical name, in any namespace."""
        return list(self._types_by_name.get(name, []))

    def __len__(self) -> int:
        return len(self._types_by_key)

    def __contains__(self, raw_type: RawType) -> bool:
        return self.find_type(raw_type) is not None
