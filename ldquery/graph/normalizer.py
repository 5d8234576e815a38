"""Flatten expanded JSON-LD node graphs into an EntityCollection.

Walks every top-level node depth-first with an explicit stack, materializes
each identified node once, and records every reference as an edge (so an
entity referenced from two parents is stored once but has two incoming
edges). A second pass synthesizes reverse-relationship aliases on targets.

Data-shape anomalies never raise: malformed entries are skipped and logged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ldquery.graph.models import EntityCollection, NormalizedEntity, RelationshipEdge
from ldquery.names import compact_type, is_reverse, is_structural_key, reverse_aliases
from ldquery.settings import LDQuerySettings, get_settings

logger = logging.getLogger(__name__)


def normalize(nodes: Any, settings: LDQuerySettings | None = None) -> EntityCollection:
    """Normalize a sequence of expanded JSON-LD nodes.

    Args:
        nodes: A list of nodes, a single node, or a document with ``@graph``.
        settings: Optional settings; ``namespace_prefixes`` drives type
            compaction and reverse alias spelling.

    Returns:
        A new EntityCollection owned by the caller.
    """
    cfg = settings or get_settings()
    prefixes = cfg.namespace_prefixes

    entities: dict[str, NormalizedEntity] = {}
    types: dict[str, list[str]] = {}
    edges: dict[str, list[RelationshipEdge]] = {}
    visited: set[str] = set()
    skipped = 0

    stack: list[Any] = list(reversed(_root_nodes(nodes)))
    while stack:
        data = stack.pop()
        if not isinstance(data, Mapping):
            logger.debug("Skipping non-object node: %r", data)
            skipped += 1
            continue

        node_id = data.get("@id")
        if not isinstance(node_id, str) or not node_id:
            graph = data.get("@graph")
            if isinstance(graph, list):
                stack.extend(reversed(graph))
            else:
                logger.debug("Skipping node without @id: keys=%s", list(data.keys()))
                skipped += 1
            continue

        if node_id in visited:
            continue

        entity_type = compact_type(data.get("@type"), prefixes)
        if entity_type is None:
            # Bare reference; a full definition elsewhere may still materialize it
            continue

        visited.add(node_id)
        entity, children = _materialize(data, node_id, entity_type, prefixes, edges)
        entities[node_id] = entity
        types.setdefault(entity_type, []).append(node_id)
        stack.extend(reversed(children))

    synthesize_reverse_aliases(entities, prefixes)

    collection = EntityCollection(entities=entities, types=types, relationships=edges)
    logger.info(
        "Normalized %d entities across %d types (%d relationship edges, %d skipped nodes)",
        len(entities),
        len(types),
        collection.edge_count(),
        skipped,
    )
    return collection


def _root_nodes(nodes: Any) -> list[Any]:
    if nodes is None:
        return []
    if isinstance(nodes, Mapping):
        graph = nodes.get("@graph")
        if "@id" not in nodes and isinstance(graph, list):
            return list(graph)
        return [nodes]
    if isinstance(nodes, (list, tuple)):
        return list(nodes)
    logger.warning("Expected a list of JSON-LD nodes, got %s", type(nodes).__name__)
    return []


def _is_reference(value: Any) -> bool:
    """True for objects carrying their own identifier."""
    return isinstance(value, Mapping) and isinstance(value.get("@id"), str) and bool(value["@id"])


def _literal(value: Any) -> Any:
    """Unwrap a JSON-LD value object; None means nothing to record."""
    if isinstance(value, Mapping):
        if "@value" in value:
            return value["@value"]
        if "@list" in value:
            items = [_literal(v) for v in value["@list"] if not _is_reference(v)]
            return [v for v in items if v is not None]
        return dict(value)
    return value


def _materialize(
    data: Mapping[str, Any],
    node_id: str,
    entity_type: str,
    prefixes: Mapping[str, str],
    edges: dict[str, list[RelationshipEdge]],
) -> tuple[NormalizedEntity, list[Mapping[str, Any]]]:
    """Split a node's keys into properties and relationships.

    Returns the entity and the referenced child nodes still to be walked.
    """
    properties: dict[str, Any] = {}
    relationships: dict[str, list[str]] = {}
    children: list[Mapping[str, Any]] = []

    def add_target(key: str, target: Mapping[str, Any]) -> None:
        target_id = target["@id"]
        relationships.setdefault(key, []).append(target_id)
        edges.setdefault(key, []).append(RelationshipEdge(node_id, target_id))
        children.append(target)

    for key, value in data.items():
        if not isinstance(key, str) or is_structural_key(key):
            continue

        if isinstance(value, Mapping) and "@list" in value:
            value = value["@list"]

        if isinstance(value, (list, tuple)):
            literals = []
            for item in value:
                if _is_reference(item):
                    add_target(key, item)
                    continue
                literal = _literal(item)
                if literal is not None:
                    literals.append(literal)
            if literals:
                properties[key] = literals
        elif _is_reference(value):
            add_target(key, value)
        else:
            literal = _literal(value)
            if literal is not None:
                properties[key] = literal

    raw_type = data.get("@type")
    extra_types: list[str] = []
    if isinstance(raw_type, (list, tuple)):
        extra_types = [t for t in (compact_type(v, prefixes) for v in raw_type[1:]) if t]

    entity = NormalizedEntity(
        id=node_id,
        type=entity_type,
        properties=properties,
        relationships=relationships,
        source_data=data,
        extra_types=extra_types,
    )
    return entity, children


def synthesize_reverse_aliases(
    entities: dict[str, NormalizedEntity], prefixes: Mapping[str, str]
) -> None:
    """Add ``_reverse_<relation>`` aliases on every resolvable edge target."""
    for entity in entities.values():
        for relation, targets in list(entity.relationships.items()):
            if is_reverse(relation):
                continue
            aliases = reverse_aliases(relation, entity.type, prefixes)
            for target_id in targets:
                target = entities.get(target_id)
                if target is None:
                    continue
                for alias in aliases:
                    sources = target.relationships.setdefault(alias, [])
                    if entity.id not in sources:
                        sources.append(entity.id)
