"""ldquery schema discovery - runtime field and relationship analysis.

Works over any EntityCollection without a predefined schema:
    discover_entity_types       - Types present, with counts
    discover_fields             - Canonical fields with inferred type and prevalence
    discover_relationships      - Outgoing relations with target types and prevalence
    compatible_dimension_types  - Valid dimension types for a measure/relation pair
    infer_dimension_type        - Dimension type implied by a relation
    discover_relationship_paths - Multi-hop relation chains
    displayable_fields          - Label candidates for grouping
"""

from ldquery.discovery.models import EntityTypeInfo, FieldInfo, RelationshipInfo, RelationshipPath
from ldquery.discovery.entity_types import discover_entity_types
from ldquery.discovery.fields import (
    discover_fields,
    displayable_fields,
    field_type,
    infer_field_type,
    numeric_fields,
    select_default_display_field,
)
from ldquery.discovery.relationships import (
    compatible_dimension_types,
    discover_relationship_paths,
    discover_relationships,
    infer_dimension_type,
)

__all__ = [
    "EntityTypeInfo",
    "FieldInfo",
    "RelationshipInfo",
    "RelationshipPath",
    "discover_entity_types",
    "discover_fields",
    "displayable_fields",
    "field_type",
    "infer_field_type",
    "numeric_fields",
    "select_default_display_field",
    "compatible_dimension_types",
    "discover_relationship_paths",
    "discover_relationships",
    "infer_dimension_type",
]
