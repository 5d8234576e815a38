"""Result types for schema discovery. Recomputed per call; hold no state."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

FieldType = Literal["string", "date", "number", "array", "object"]


@dataclass
class EntityTypeInfo:
    """An entity type present in a collection."""

    type: str
    label: str
    count: int
    sample_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class FieldInfo:
    """A field observed on a population, keyed by its canonical name."""

    name: str
    label: str
    type: FieldType
    frequency: float
    total_count: int
    entity_count: int
    sample_values: list[Any] = field(default_factory=list)
    is_common: bool = False
    spellings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RelationshipInfo:
    """An outgoing relationship observed on a population."""

    name: str
    label: str
    source_type: str
    target_types: list[str] = field(default_factory=list)
    frequency: float = 0.0
    total_count: int = 0
    edge_count: int = 0
    is_reverse: bool = False
    spellings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class RelationshipPath:
    """A chain ``[type, relation, type, relation, type, ...]`` reachable from a type."""

    path: list[str]
    label: str
    viable: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
