"""
Canonical names for types and methods.

The canonical name is the only identity shared between the raw metadata
and the rebuilt model, so every lookup in the builder goes through these
functions. They are pure and keep no state.
"""

from typing import Optional

from ..metadata.raw import RawMethod, RawType


NO_NAMESPACE = "-"
MODULE_TYPE_NAME = "<Module>"
GENERIC_ARITY_MARKER = "`"


def strip_generic_arity(name: str) -> str:
    """Remove the generic arity marker, e.g. ``Dictionary`2`` -> ``Dictionary``."""
    index = name.find(GENERIC_ARITY_MARKER)
    return name[:index] if index != -1 else name


def format_type_name(raw_type: RawType) -> str:
    """
    Format a type's display name.

    Nested types render as ``Outer+Inner`` (the outer part canonicalized
    recursively), generic types as ``Base<P1,P2>`` with the arity marker
    stripped, anything else as the bare name.

    Args:
        raw_type: Type definition or reference

    Returns:
        Canonical type name
    """
    parts = []
    current: Optional[RawType] = raw_type
    while current is not None and current.is_nested:
        parts.append(current.name)
        current = current.declaring_type

    # A nested type renders its own segment verbatim; only the outermost
    # type gets the generic treatment.
    if current is not None:
        if current.has_generic_parameters:
            params = ",".join(current.generic_parameters)
            parts.append(f"{strip_generic_arity(current.name)}<{params}>")
        else:
            parts.append(current.name)

    return "+".join(reversed(parts))


def format_method_name(raw_method: RawMethod) -> str:
    """
    Format a method signature name: ``Name(T1, T2)`` or ``Name()``.

    Only parameter types take part, so overloads that differ by return
    type or generic constraints produce the same signature.
    """
    return f"{raw_method.name}({', '.join(raw_method.parameter_types)})"


def get_namespace_name(raw_type: RawType, no_namespace: str = NO_NAMESPACE) -> str:
    """
    Resolve the namespace a type is filed under.

    Nested types inherit the namespace of their outermost enclosing type.
    Types without a namespace fall back to the ``no_namespace`` sentinel.
    """
    current = raw_type
    while current.is_nested:
        current = current.declaring_type
    return current.namespace or no_namespace


def is_module_type(raw_type: RawType, module_type_name: str = MODULE_TYPE_NAME) -> bool:
    """True for the compiler-generated module pseudo-type."""
    return raw_type.name == module_type_name
