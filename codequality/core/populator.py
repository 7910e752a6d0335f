"""
Member pass: fields, events and methods for every built type.

Types are re-located through the registry by canonical name (the same
lookup the usage resolver relies on) instead of carrying references over
from the skeleton pass.
"""

import logging
from typing import Callable, List, Optional

from ..errors import ModelBuildError
from ..metadata.raw import RawEvent, RawField, RawInstruction, RawMethod, RawType
from .entities import Event, Field, Method, Type
from .naming import MODULE_TYPE_NAME, format_method_name, format_type_name, is_module_type
from .registry import TypeRegistry


logger = logging.getLogger(__name__)

# Receives each method that has a body, once all methods of its type exist
BodyHandler = Callable[[Method, List[RawInstruction]], object]


class MemberPopulator:
    """
    Instantiates members of already-built types.

    Method bodies are passed to ``on_body`` after every method of the
    owning type has been created, so calls to methods declared later in
    the same type still resolve.
    """

    def __init__(self, registry: TypeRegistry, on_body: Optional[BodyHandler] = None,
                 module_type_name: str = MODULE_TYPE_NAME):
        self.registry = registry
        self.on_body = on_body
        self.module_type_name = module_type_name

    def populate(self, raw_types: List[RawType]) -> None:
        """Populate members of every type, nested types after their parent."""
        stack = list(reversed(raw_types))

        while stack:
            raw_type = stack.pop()
            if is_module_type(raw_type, self.module_type_name):
                continue

            type_ = self.registry.find_type(raw_type)
            if type_ is None:
                raise ModelBuildError(
                    f"Type '{format_type_name(raw_type)}' missing from the skeleton"
                )

            self.read_fields(type_, raw_type.fields)
            self.read_events(type_, raw_type.events)
            self.read_methods(type_, raw_type.methods)

            stack.extend(reversed(raw_type.nested_types))

    def read_fields(self, type_: Type, raw_fields: List[RawField]) -> None:
        for raw_field in raw_fields:
            f = Field(name=raw_field.name, owner=type_)
            type_.fields.append(f)
            # None when the declaring type lives outside the module
            f.declaring_type = self.registry.find_type(raw_field.declaring_type)

    def read_events(self, type_: Type, raw_events: List[RawEvent]) -> None:
        """
        Create events and flag their backing fields.

        The binary format exposes an event's storage as a field with the
        event's name; that field is marked ``is_event`` rather than
        duplicated. The event type is looked up by the event's own name.
        """
        for raw_event in raw_events:
            event = Event(name=raw_event.name, owner=type_)
            type_.events.append(event)

            candidates = self.registry.find_by_name(event.name)
            event.event_type = candidates[0] if candidates else None

            backing_field = type_.find_field(event.name)
            if backing_field is not None:
                backing_field.is_event = True

    def read_methods(self, type_: Type, raw_methods: List[RawMethod]) -> None:
        created = []
        for raw_method in raw_methods:
            method = Method(
                name=format_method_name(raw_method),
                owner=type_,
                is_constructor=raw_method.is_constructor
            )
            method.declaring_type = self.registry.find_type(raw_method.declaring_type)
            if type_.find_method(method.name) is not None:
                logger.debug("Signature collision in %s: %s", type_.name, method.name)
            type_.methods.append(method)
            created.append(method)

        if self.on_body is None:
            return

        for raw_method, method in zip(raw_methods, created):
            if raw_method.has_body:
                self.on_body(method, raw_method.body)
