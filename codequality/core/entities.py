"""
Code model entities rebuilt from raw binary metadata.

Ownership is tree-shaped: Module -> Namespace -> Type -> (Field, Event,
Method, nested Type). Usage edges (type_uses, method_uses, field_uses)
are non-owning references across the tree and may form cycles, so every
entity compares and hashes by identity and ``to_dict`` renders
cross-references by name only.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set


@dataclass(eq=False)
class Field:
    """
    A field owned by a type.

    Attributes:
        name: Field name
        owner: Type that owns the field
        declaring_type: Resolved declaring type (None if outside the module)
        is_event: True when the field is the backing storage of an event
    """
    name: str
    owner: Optional["Type"] = None
    declaring_type: Optional["Type"] = None
    is_event: bool = False

    @property
    def unique_id(self) -> str:
        return f"{self.owner.unique_id}.{self.name}" if self.owner else self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "field",
            "name": self.name,
            "unique_id": self.unique_id,
            "owner": self.owner.name if self.owner else None,
            "declaring_type": self.declaring_type.name if self.declaring_type else None,
            "is_event": self.is_event
        }


@dataclass(eq=False)
class Event:
    """
    An event owned by a type.

    ``event_type`` is a best-effort lookup and is frequently None.
    """
    name: str
    owner: Optional["Type"] = None
    event_type: Optional["Type"] = None

    @property
    def unique_id(self) -> str:
        return f"{self.owner.unique_id}.{self.name}" if self.owner else self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "event",
            "name": self.name,
            "unique_id": self.unique_id,
            "owner": self.owner.name if self.owner else None,
            "event_type": self.event_type.name if self.event_type else None
        }


@dataclass(eq=False)
class Method:
    """
    A method owned by a type, with the usage edges of its body.

    Attributes:
        name: Canonical signature, e.g. ``Add(System.Int32, System.String)``
        owner: Type that owns the method
        is_constructor: True for constructors
        declaring_type: Resolved declaring type (None if outside the module)
        type_uses: Types referenced by the body
        method_uses: Same-type methods called by the body
        field_uses: Own-type fields accessed by the body
    """
    name: str
    owner: Optional["Type"] = None
    is_constructor: bool = False
    declaring_type: Optional["Type"] = None

    # Usage edges, filled in by the usage resolver
    type_uses: Set["Type"] = field(default_factory=set)
    method_uses: Set["Method"] = field(default_factory=set)
    field_uses: Set[Field] = field(default_factory=set)

    @property
    def unique_id(self) -> str:
        return f"{self.owner.unique_id}.{self.name}" if self.owner else self.name

    @property
    def edge_count(self) -> int:
        return len(self.type_uses) + len(self.method_uses) + len(self.field_uses)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "method",
            "name": self.name,
            "unique_id": self.unique_id,
            "owner": self.owner.name if self.owner else None,
            "is_constructor": self.is_constructor,
            "declaring_type": self.declaring_type.name if self.declaring_type else None,
            "type_uses": sorted(t.name for t in self.type_uses),
            "method_uses": sorted(m.name for m in self.method_uses),
            "field_uses": sorted(f.name for f in self.field_uses)
        }


@dataclass(eq=False)
class Type:
    """
    A declared type (class, struct, interface, enum).

    A nested type is listed in the namespace of its outermost enclosing
    type and keeps a back-reference to its direct parent in ``owner``.
    """
    name: str
    namespace: Optional["Namespace"] = None
    owner: Optional["Type"] = None

    nested_types: List["Type"] = field(default_factory=list)
    fields: List[Field] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    methods: List[Method] = field(default_factory=list)

    @property
    def is_nested(self) -> bool:
        return self.owner is not None

    @property
    def unique_id(self) -> str:
        if self.namespace:
            return f"{self.namespace.name}:{self.name}"
        return self.name

    def find_method(self, signature: str) -> Optional[Method]:
        """Find an owned method by canonical signature (first match wins)."""
        for method in self.methods:
            if method.name == signature:
                return method
        return None

    def find_field(self, name: str) -> Optional[Field]:
        """Find an owned field by name."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "type",
            "name": self.name,
            "unique_id": self.unique_id,
            "namespace": self.namespace.name if self.namespace else None,
            "owner": self.owner.name if self.owner else None,
            "nested_types": [t.name for t in self.nested_types],
            "fields": [f.to_dict() for f in self.fields],
            "events": [e.to_dict() for e in self.events],
            "methods": [m.to_dict() for m in self.methods]
        }


@dataclass(eq=False)
class Namespace:
    """A namespace and the types filed under it (nested types included)."""
    name: str
    module: Optional["Module"] = None
    types: List[Type] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "types": [t.to_dict() for t in self.types]
        }


@dataclass(eq=False)
class Module:
    """
    Root of the rebuilt model for one analyzed binary module.
    """
    name: str
    namespaces: List[Namespace] = field(default_factory=list)

    def get_namespace(self, name: str) -> Optional[Namespace]:
        for ns in self.namespaces:
            if ns.name == name:
                return ns
        return None

    def all_types(self) -> Iterator[Type]:
        """Every type in the module, nested types included, in creation order."""
        for ns in self.namespaces:
            yield from ns.types

    def all_methods(self) -> Iterator[Method]:
        for t in self.all_types():
            yield from t.methods

    def statistics(self) -> Dict[str, int]:
        """Entity and edge counts, used for build summaries."""
        types = list(self.all_types())
        methods = [m for t in types for m in t.methods]
        return {
            "namespaces": len(self.namespaces),
            "types": len(types),
            "nested_types": sum(1 for t in types if t.is_nested),
            "fields": sum(len(t.fields) for t in types),
            "events": sum(len(t.events) for t in types),
            "methods": len(methods),
            "type_uses": sum(len(m.type_uses) for m in methods),
            "method_uses": sum(len(m.method_uses) for m in methods),
            "field_uses": sum(len(m.field_uses) for m in methods)
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "namespaces": [ns.to_dict() for ns in self.namespaces]
        }
