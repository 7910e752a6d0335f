"""
Relationship types and models for the usage graph.

This module defines the edges that can exist between entities of a
built code model once it is projected into a graph.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from enum import Enum


class RelationType(Enum):
    """
    Types of relationships between model entities.

    Structural edges mirror ownership in the model; usage edges mirror
    the TypeUses / MethodUses / FieldUses sets of methods.
    """

    # === Structural Relationships ===
    CONTAINS = "CONTAINS"           # Type owns a field or method
    NESTS = "NESTS"                 # Type encloses a nested type

    # === Usage Relationships ===
    USES_TYPE = "USES_TYPE"         # Method references a type
    CALLS = "CALLS"                 # Method calls a method of its own type
    USES_FIELD = "USES_FIELD"       # Method reads or writes a field of its own type


USAGE_TYPES = frozenset({RelationType.USES_TYPE, RelationType.CALLS, RelationType.USES_FIELD})


@dataclass
class Relationship:
    """
    Represents a relationship (edge) between two model entities.

    Attributes:
        source: Unique identifier of the source entity
        target: Unique identifier of the target entity
        rel_type: Type of relationship
        weight: Edge weight
        context: Additional context about the relationship
        metadata: Any extra metadata
    """
    source: str
    target: str
    rel_type: RelationType

    # Optional metadata
    weight: float = 1.0
    context: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize relationship to dictionary."""
        return {
            "source": self.source,
            "target": self.target,
            "type": self.rel_type.value,
            "weight": self.weight,
            "context": self.context,
            "metadata": self.metadata
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relationship":
        """Deserialize relationship from dictionary."""
        return cls(
            source=data["source"],
            target=data["target"],
            rel_type=RelationType(data["type"]),
            weight=data.get("weight", 1.0),
            context=data.get("context"),
            metadata=data.get("metadata", {})
        )
