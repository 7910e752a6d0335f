"""
Raw metadata structures handed over by the binary reader.
"""

from .raw import (
    RawInstruction,
    RawField,
    RawEvent,
    RawMethod,
    RawType,
    RawModule
)

__all__ = [
    "RawInstruction",
    "RawField",
    "RawEvent",
    "RawMethod",
    "RawType",
    "RawModule",
]
