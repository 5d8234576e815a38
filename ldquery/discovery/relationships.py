"""Relationship discovery, dimension compatibility, and relationship paths.

Relation names are canonicalized like field names, so the three reverse
alias spellings written by the normalizer collapse to one
``_reverse_<relation>`` entry.
"""

from __future__ import annotations

import logging

from ldquery.discovery.models import RelationshipInfo, RelationshipPath
from ldquery.graph.models import EntityCollection
from ldquery.labels import format_entity_type_label, format_relationship_label
from ldquery.names import REVERSE_PREFIX, canonical_name, compact_type, is_reverse, is_structural_key
from ldquery.settings import LDQuerySettings, get_settings

logger = logging.getLogger(__name__)


def discover_relationships(
    collection: EntityCollection, entity_type: str
) -> list[RelationshipInfo]:
    """Report outgoing relationships observed on entities of ``entity_type``.

    Frequency is the share of entities exhibiting the relation. Target
    types only include targets that resolved to a materialized entity.
    """
    entities = collection.entities_of_type(entity_type)
    if not entities:
        return []

    source_type = entities[0].type
    stats: dict[str, RelationshipInfo] = {}

    for entity in entities:
        per_entity: dict[str, list[str]] = {}
        for key, targets in entity.relationships.items():
            if not targets or is_structural_key(key):
                continue
            name = canonical_name(key)

            info = stats.get(name)
            if info is None:
                info = RelationshipInfo(
                    name=name,
                    label=format_relationship_label(name),
                    source_type=source_type,
                    is_reverse=is_reverse(name),
                )
                stats[name] = info
            if key not in info.spellings:
                info.spellings.append(key)

            merged = per_entity.setdefault(name, [])
            merged.extend(t for t in targets if t not in merged)

        for name, target_ids in per_entity.items():
            info = stats[name]
            info.total_count += 1
            info.edge_count += len(target_ids)
            for target_id in target_ids:
                target = collection.get(target_id)
                if target is not None and target.type not in info.target_types:
                    info.target_types.append(target.type)

    relationships = list(stats.values())
    for info in relationships:
        info.frequency = info.total_count / len(entities)

    relationships.sort(key=lambda r: (-r.frequency, r.label))
    logger.debug("Discovered %d relationships on %s", len(relationships), entity_type)
    return relationships


def compatible_dimension_types(
    collection: EntityCollection,
    measure_type: str,
    relation: str | None = None,
) -> set[str]:
    """Entity types a dimension may have when grouping ``measure_type``.

    Without a relation the dimension is a field on the measure entity
    itself, so the answer is the measure type.
    """
    if not relation or relation == "none":
        return {collection.resolve_type(measure_type) or compact_type(measure_type) or measure_type}

    wanted = canonical_name(relation)
    for info in discover_relationships(collection, measure_type):
        if info.name == wanted:
            return set(info.target_types)
    return set()


def infer_dimension_type(
    collection: EntityCollection, measure_type: str, relation: str
) -> str | None:
    """First target type reached from ``measure_type`` through ``relation``.

    Falls back to the reverse alias when the forward name is not observed on
    the measure type, matching how the query engine resolves relations.
    """
    wanted = canonical_name(relation)
    candidates = [wanted] if is_reverse(wanted) else [wanted, REVERSE_PREFIX + wanted]
    relationships = {info.name: info for info in discover_relationships(collection, measure_type)}
    for name in candidates:
        info = relationships.get(name)
        if info is not None and info.target_types:
            return info.target_types[0]
    return None


def _path_label(path: list[str]) -> str:
    parts = [format_entity_type_label(path[0])]
    for i in range(2, len(path), 2):
        parts.append(f"{format_relationship_label(path[i - 1])} {format_entity_type_label(path[i])}")
    return " → ".join(parts)


def discover_relationship_paths(
    collection: EntityCollection,
    source_type: str,
    max_depth: int | None = None,
    settings: LDQuerySettings | None = None,
) -> list[RelationshipPath]:
    """Relationship chains reachable from ``source_type`` up to ``max_depth`` hops.

    Only viable paths (first hop frequency above the configured threshold at
    each step) are returned, sorted by label.
    """
    cfg = settings or get_settings()
    depth_limit = max_depth if max_depth is not None else cfg.max_path_depth
    resolved = collection.resolve_type(source_type)
    if resolved is None:
        return []

    paths: list[RelationshipPath] = []
    visited: set[tuple[str, ...]] = set()

    def explore(current_type: str, path: list[str], depth: int) -> None:
        if depth >= depth_limit:
            return
        for info in discover_relationships(collection, current_type):
            for target_type in info.target_types:
                new_path = path + [info.name, target_type]
                key = tuple(new_path)
                if key in visited:
                    continue
                visited.add(key)
                paths.append(RelationshipPath(
                    path=new_path,
                    label=_path_label(new_path),
                    viable=info.frequency > cfg.path_viability_threshold,
                ))
                explore(target_type, new_path, depth + 1)

    explore(resolved, [resolved], 0)
    return sorted((p for p in paths if p.viable), key=lambda p: p.label)
