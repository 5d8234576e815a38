"""Field discovery over a dynamically typed entity population.

Every property key is reduced to its canonical name before counting, so
``date``, ``aiid:date`` and ``https://example.org/aiid#date`` all feed one
FieldInfo. Frequencies count entities, not keys: an entity carrying two
spellings of the same field counts once.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from ldquery.discovery.models import FieldInfo, FieldType
from ldquery.graph.models import EntityCollection
from ldquery.labels import format_field_label
from ldquery.names import canonical_name
from ldquery.settings import LDQuerySettings, get_settings

logger = logging.getLogger(__name__)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def infer_field_type(field_name: str, samples: list[Any]) -> FieldType:
    """Infer a field type from its name first, then from the first sample.

    Single-element lists (the shape expanded JSON-LD gives every literal)
    are looked through to their element.
    """
    if not samples:
        return "string"

    lowered = field_name.lower()
    if "date" in lowered or "time" in lowered:
        return "date"
    if "id" in lowered or "count" in lowered:
        # Identifiers and counters group better as strings
        return "string"

    first = samples[0]
    if isinstance(first, list) and len(first) == 1:
        first = first[0]

    if isinstance(first, list):
        return "array"
    if isinstance(first, dict):
        return "object"
    if isinstance(first, bool):
        return "string"
    if isinstance(first, (int, float)):
        return "number"
    if isinstance(first, str) and _ISO_DATE.match(first):
        return "date"
    return "string"


def discover_fields(
    collection: EntityCollection,
    entity_type: str,
    settings: LDQuerySettings | None = None,
) -> list[FieldInfo]:
    """Report the fields observed on every entity of ``entity_type``.

    Returns an empty list for a type with no entities. Sorted by frequency
    (descending), then label.
    """
    cfg = settings or get_settings()
    entities = collection.entities_of_type(entity_type)
    if not entities:
        return []

    counts: dict[str, int] = {}
    samples: dict[str, list[Any]] = {}
    spellings: dict[str, list[str]] = {}

    for entity in entities:
        seen: set[str] = set()
        for key, value in entity.properties.items():
            name = canonical_name(key)

            raw = spellings.setdefault(name, [])
            if key not in raw:
                raw.append(key)

            field_samples = samples.setdefault(name, [])
            if len(field_samples) < cfg.sample_limit and value not in field_samples:
                field_samples.append(value)

            if name not in seen:
                seen.add(name)
                counts[name] = counts.get(name, 0) + 1

    fields: list[FieldInfo] = []
    for name, count in counts.items():
        frequency = count / len(entities)
        fields.append(
            FieldInfo(
                name=name,
                label=format_field_label(name),
                type=infer_field_type(name, samples[name]),
                frequency=frequency,
                total_count=count,
                entity_count=len(entities),
                sample_values=samples[name],
                is_common=frequency > cfg.common_field_threshold,
                spellings=spellings[name],
            )
        )

    fields.sort(key=lambda f: (-f.frequency, f.label))
    logger.debug("Discovered %d fields on %s", len(fields), entity_type)
    return fields


def numeric_fields(
    collection: EntityCollection,
    entity_type: str,
    settings: LDQuerySettings | None = None,
) -> list[FieldInfo]:
    """Fields suitable as an aggregation measure."""
    return [f for f in discover_fields(collection, entity_type, settings) if f.type == "number"]


def field_type(
    collection: EntityCollection,
    entity_type: str,
    field_name: str,
    settings: LDQuerySettings | None = None,
) -> FieldType | None:
    """Inferred type of one field on a population, or None when absent."""
    wanted = canonical_name(field_name)
    for info in discover_fields(collection, entity_type, settings):
        if info.name == wanted:
            return info.type
    return None


def displayable_fields(
    collection: EntityCollection,
    target_types: Iterable[str],
    settings: LDQuerySettings | None = None,
) -> list[FieldInfo]:
    """String fields common enough to label groups of the given types.

    When several types share a field name the most frequent one is kept.
    """
    cfg = settings or get_settings()
    best: dict[str, FieldInfo] = {}

    for target_type in target_types:
        for info in discover_fields(collection, target_type, cfg):
            if info.type != "string" or info.frequency <= cfg.display_field_min_frequency:
                continue
            current = best.get(info.name)
            if current is None or info.frequency > current.frequency:
                best[info.name] = info

    return sorted(best.values(), key=lambda f: -f.frequency)


def select_default_display_field(
    fields: list[FieldInfo],
    settings: LDQuerySettings | None = None,
) -> str | None:
    """Pick a label field: a preferred name if present, else the most frequent."""
    if not fields:
        return None
    cfg = settings or get_settings()

    names = [f.name for f in fields]
    for preferred in cfg.preferred_display_fields:
        if preferred in names:
            return preferred
    return names[0]
