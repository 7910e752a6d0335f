"""
Raw metadata decoded from a compiled binary module.

These dataclasses are the hand-off format of the external binary reader.
The model builder only reads them; nothing in this package mutates a raw
definition after ``__post_init__`` has linked children to their parents.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(eq=False)
class RawInstruction:
    """
    One low-level instruction.

    The operand is either another RawInstruction (a branch target or an
    aliasing reference), a RawMethod / RawField / RawType reference, a
    primitive value, or None.
    """
    opcode: str = "nop"
    operand: Any = None
    offset: int = 0


@dataclass(eq=False)
class RawField:
    """A field definition as decoded from the binary."""
    name: str
    field_type: Optional[str] = None
    declaring_type: Optional["RawType"] = None


@dataclass(eq=False)
class RawEvent:
    """An event definition as decoded from the binary."""
    name: str
    event_type: Optional[str] = None
    declaring_type: Optional["RawType"] = None


@dataclass(eq=False)
class RawMethod:
    """
    A method definition or a reference to one.

    Attributes:
        name: Bare method name (".ctor" for constructors)
        parameter_types: Full type name of every parameter, in order
        is_constructor: True for instance and static constructors
        body: Instruction stream, or None for abstract/extern methods
        declaring_type: Raw type that declares the method
        return_type: Full name of the return type
    """
    name: str
    parameter_types: List[str] = field(default_factory=list)
    is_constructor: bool = False
    body: Optional[List[RawInstruction]] = None
    declaring_type: Optional["RawType"] = None
    return_type: str = "System.Void"

    @property
    def has_body(self) -> bool:
        return bool(self.body)


@dataclass(eq=False)
class RawType:
    """
    A type definition (class, struct, interface, enum, delegate).

    A raw type that is not part of the analyzed module's type list is
    still a valid RawType; it simply never resolves during lookups.

    Attributes:
        name: Metadata name, including any generic arity marker (``Foo`2``)
        namespace: Declared namespace, empty for nested or global types
        generic_parameters: Declared generic parameter names
        declaring_type: Enclosing type when nested
        fields: Field definitions
        events: Event definitions
        methods: Method definitions
        nested_types: Directly nested type definitions
    """
    name: str
    namespace: str = ""
    generic_parameters: List[str] = field(default_factory=list)
    declaring_type: Optional["RawType"] = None
    fields: List[RawField] = field(default_factory=list)
    events: List[RawEvent] = field(default_factory=list)
    methods: List[RawMethod] = field(default_factory=list)
    nested_types: List["RawType"] = field(default_factory=list)

    def __post_init__(self):
        # Link members and nested types back to this type when the reader
        # left the back-reference unset.
        for member in (*self.fields, *self.events, *self.methods, *self.nested_types):
            if member.declaring_type is None:
                member.declaring_type = self

    @property
    def is_nested(self) -> bool:
        return self.declaring_type is not None

    @property
    def has_generic_parameters(self) -> bool:
        return bool(self.generic_parameters)


@dataclass(eq=False)
class RawModule:
    """A decoded module: its name and top-level type definitions."""
    name: str
    types: List[RawType] = field(default_factory=list)
