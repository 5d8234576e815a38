"""Normalized entity graph built from expanded JSON-LD nodes.

An ``EntityCollection`` owns every ``NormalizedEntity`` produced by one
normalization pass. It is read-only once built; rebuild it when the source
documents change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from ldquery.names import canonical_name, compact_type


@dataclass
class NormalizedEntity:
    """A single entity flattened out of the source graph."""

    id: str
    type: str
    properties: dict[str, Any] = field(default_factory=dict)
    relationships: dict[str, list[str]] = field(default_factory=dict)
    source_data: Any = None
    extra_types: list[str] = field(default_factory=list)

    def get_value(self, field_name: str) -> Any:
        """Property value by exact key, else by canonical spelling."""
        if field_name in self.properties:
            return self.properties[field_name]
        wanted = canonical_name(field_name)
        for key, value in self.properties.items():
            if canonical_name(key) == wanted:
                return value
        return None

    def related_ids(self, relation: str) -> list[str]:
        """Target ids for a relation; first non-empty spelling match wins."""
        targets = self.relationships.get(relation)
        if targets:
            return list(targets)
        wanted = canonical_name(relation)
        for key, ids in self.relationships.items():
            if ids and canonical_name(key) == wanted:
                return list(ids)
        return []

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "properties": self.properties,
            "relationships": self.relationships,
            "extra_types": self.extra_types,
        }


@dataclass(frozen=True)
class RelationshipEdge:
    """A directed edge in the global relationship index."""

    source: str
    target: str


@dataclass(frozen=True)
class EntityCollection:
    """Flat entity map plus the type and relationship indexes derived from it."""

    entities: dict[str, NormalizedEntity] = field(default_factory=dict)
    types: dict[str, list[str]] = field(default_factory=dict)
    relationships: dict[str, list[RelationshipEdge]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self) -> Iterator[NormalizedEntity]:
        return iter(self.entities.values())

    def get(self, entity_id: str) -> NormalizedEntity | None:
        return self.entities.get(entity_id)

    def resolve_type(self, entity_type: str) -> str | None:
        """Map any spelling of a type onto the indexed compact form."""
        if entity_type in self.types:
            return entity_type
        compact = compact_type(entity_type)
        if compact in self.types:
            return compact
        # A bare local name matches a single namespaced type
        local = canonical_name(entity_type)
        matches = [t for t in self.types if canonical_name(t) == local]
        return matches[0] if len(matches) == 1 else None

    def entities_of_type(self, entity_type: str) -> list[NormalizedEntity]:
        resolved = self.resolve_type(entity_type)
        if resolved is None:
            return []
        return [self.entities[i] for i in self.types[resolved] if i in self.entities]

    def type_counts(self) -> dict[str, int]:
        return {t: len(ids) for t, ids in self.types.items()}

    def edge_count(self) -> int:
        return sum(len(edges) for edges in self.relationships.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "entities": {i: e.to_dict() for i, e in self.entities.items()},
            "types": self.types,
            "relationships": {
                name: [{"source": e.source, "target": e.target} for e in edges]
                for name, edges in self.relationships.items()
            },
        }
