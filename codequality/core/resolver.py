"""
Usage edge extraction from method instruction streams.

For each instruction the operand chain is chased to its terminal value:
- a method reference records a type use for the callee's declaring type,
  and a method use only when the callee belongs to the caller's own type;
- a field reference records a field use only for fields of the caller's
  own type.

Anything that does not resolve inside the module (external types,
primitives, type tokens) contributes no edge and raises nothing.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..metadata.raw import RawField, RawInstruction, RawMethod
from .entities import Method
from .naming import format_method_name, format_type_name
from .registry import TypeRegistry


logger = logging.getLogger(__name__)


def chase_operand(instruction: RawInstruction) -> Any:
    """
    Follow an instruction's operand chain to its terminal value.

    Args:
        instruction: Instruction whose operand may point at another instruction

    Returns:
        The first operand that is not an instruction, or None if the
        chain ends in an instruction without operand
    """
    operand = instruction.operand
    while isinstance(operand, RawInstruction):
        operand = operand.operand
    return operand


@dataclass
class UsageSummary:
    """Counts of what a single method body resolved to."""
    method: str
    instructions: int = 0
    type_refs: int = 0
    method_refs: int = 0
    field_refs: int = 0
    unresolved: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "instructions": self.instructions,
            "type_refs": self.type_refs,
            "method_refs": self.method_refs,
            "field_refs": self.field_refs,
            "unresolved": self.unresolved
        }


class UsageResolver:
    """
    Populates TypeUses, MethodUses and FieldUses of methods.

    Requires a complete skeleton (for declaring types anywhere in the
    module) and the caller's own type fully populated with fields and
    methods.
    """

    def __init__(self, registry: TypeRegistry):
        self.registry = registry

    def resolve(self, method: Method, instructions: List[RawInstruction]) -> UsageSummary:
        """
        Walk a method body and record its usage edges on ``method``.

        Args:
            method: Method whose edge sets are filled
            instructions: Raw instruction stream of the method body

        Returns:
            UsageSummary for the walked body
        """
        summary = UsageSummary(method=method.unique_id)

        for instruction in instructions:
            summary.instructions += 1
            target = chase_operand(instruction)

            if isinstance(target, RawMethod):
                self._resolve_method_ref(method, target, summary)
            elif isinstance(target, RawField):
                self._resolve_field_ref(method, target, summary)

        return summary

    def _resolve_method_ref(self, method: Method, target: RawMethod,
                            summary: UsageSummary) -> None:
        declaring = self.registry.find_type(target.declaring_type)
        if declaring is None:
            summary.unresolved += 1
            logger.debug("Unresolved call %s -> %s", method.unique_id,
                         _describe_method(target))
            return

        method.type_uses.add(declaring)
        summary.type_refs += 1

        callee = declaring.find_method(format_method_name(target))
        # Only calls into the caller's own type become method uses.
        if callee is not None and declaring is method.owner:
            method.method_uses.add(callee)
            summary.method_refs += 1

    def _resolve_field_ref(self, method: Method, target: RawField,
                           summary: UsageSummary) -> None:
        f = method.owner.find_field(target.name) if method.owner else None
        if f is None:
            summary.unresolved += 1
            return

        method.field_uses.add(f)
        summary.field_refs += 1


def _describe_method(raw_method: RawMethod) -> str:
    owner: Optional[str] = None
    if raw_method.declaring_type is not None:
        owner = format_type_name(raw_method.declaring_type)
    signature = format_method_name(raw_method)
    return f"{owner}::{signature}" if owner else signature
