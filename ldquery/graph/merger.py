"""Merge several normalized collections into one.

Entities sharing an id are merged property by property: list values are
concatenated, scalar values are overwritten by the later collection, and
relationship target lists are unioned in first-seen order. Reverse aliases
are rebuilt over the merged entities, since an edge target may only be
defined in another collection.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Sequence

from ldquery.graph.models import EntityCollection, NormalizedEntity, RelationshipEdge
from ldquery.graph.normalizer import synthesize_reverse_aliases
from ldquery.names import is_reverse
from ldquery.settings import LDQuerySettings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class MergeStatistics:
    """Overlap between the collections of a merge."""

    total_entities: int = 0
    shared_entities: int = 0
    unique_by_collection: dict[int, int] = field(default_factory=dict)


def _merge_value(existing: Any, incoming: Any) -> Any:
    if isinstance(existing, list) and isinstance(incoming, list):
        return existing + incoming
    if isinstance(existing, dict) and isinstance(incoming, dict):
        return {**existing, **incoming}
    return incoming


def _merge_entity(existing: NormalizedEntity, incoming: NormalizedEntity) -> NormalizedEntity:
    properties = dict(existing.properties)
    for key, value in incoming.properties.items():
        properties[key] = _merge_value(properties[key], value) if key in properties else value

    relationships = _forward_relationships(existing)
    for key, targets in _forward_relationships(incoming).items():
        merged = relationships.setdefault(key, [])
        for target in targets:
            if target not in merged:
                merged.append(target)

    extra_types = list(existing.extra_types)
    extra_types.extend(t for t in incoming.extra_types if t not in extra_types)

    return NormalizedEntity(
        id=existing.id,
        type=existing.type,
        properties=properties,
        relationships=relationships,
        source_data=existing.source_data,
        extra_types=extra_types,
    )


def _forward_relationships(entity: NormalizedEntity) -> dict[str, list[str]]:
    return {k: list(v) for k, v in entity.relationships.items() if not is_reverse(k)}


def _copy_entity(entity: NormalizedEntity) -> NormalizedEntity:
    return NormalizedEntity(
        id=entity.id,
        type=entity.type,
        properties=dict(entity.properties),
        relationships=_forward_relationships(entity),
        source_data=entity.source_data,
        extra_types=list(entity.extra_types),
    )


def merge_collections(
    collections: Sequence[EntityCollection],
    settings: LDQuerySettings | None = None,
) -> EntityCollection:
    """Merge collections by entity id into a new collection.

    The inputs are left untouched. An entity keeps the type it had in the
    first collection that contained it. ``settings.namespace_prefixes``
    drives the spelling of the rebuilt reverse aliases.
    """
    cfg = settings or get_settings()
    if not collections:
        return EntityCollection()
    if len(collections) == 1:
        return collections[0]

    entities: dict[str, NormalizedEntity] = {}
    edges: dict[str, list[RelationshipEdge]] = {}
    seen_edges: set[tuple[str, RelationshipEdge]] = set()

    for collection in collections:
        for entity in collection.entities.values():
            if entity.id in entities:
                entities[entity.id] = _merge_entity(entities[entity.id], entity)
            else:
                entities[entity.id] = _copy_entity(entity)

        for relation, relation_edges in collection.relationships.items():
            for edge in relation_edges:
                if (relation, edge) in seen_edges:
                    continue
                seen_edges.add((relation, edge))
                edges.setdefault(relation, []).append(edge)

    synthesize_reverse_aliases(entities, cfg.namespace_prefixes)

    types: dict[str, list[str]] = {}
    for entity in entities.values():
        types.setdefault(entity.type, []).append(entity.id)

    logger.info(
        "Merged %d collections into %d entities across %d types",
        len(collections),
        len(entities),
        len(types),
    )
    return EntityCollection(entities=entities, types=types, relationships=edges)


def merge_statistics(collections: Sequence[EntityCollection]) -> MergeStatistics:
    """Count entities shared between collections and unique to each."""
    frequency: Counter[str] = Counter()
    for collection in collections:
        frequency.update(set(collection.entities))

    unique_by_collection = {
        index: sum(1 for entity_id in collection.entities if frequency[entity_id] == 1)
        for index, collection in enumerate(collections)
    }
    return MergeStatistics(
        total_entities=len(frequency),
        shared_entities=sum(1 for count in frequency.values() if count > 1),
        unique_by_collection=unique_by_collection,
    )
