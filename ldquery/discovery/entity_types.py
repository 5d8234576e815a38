"""List the entity types present in a collection."""

from ldquery.discovery.models import EntityTypeInfo
from ldquery.graph.models import EntityCollection
from ldquery.labels import format_entity_type_label


def discover_entity_types(collection: EntityCollection) -> list[EntityTypeInfo]:
    """Entity types with counts, most common first (ties keep discovery order)."""
    infos = [
        EntityTypeInfo(
            type=entity_type,
            label=format_entity_type_label(entity_type),
            count=len(ids),
            sample_id=ids[0] if ids else None,
        )
        for entity_type, ids in collection.types.items()
    ]
    return sorted(infos, key=lambda info: -info.count)
