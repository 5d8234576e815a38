"""
ldquery - schema-less analytics over JSON-LD entity graphs

Normalizes expanded JSON-LD into an entity collection, discovers its
fields and relationships at runtime, and answers group-and-aggregate queries.
"""

__version__ = "0.1.0"

from ldquery.settings import LDQuerySettings, get_settings, load_settings
from ldquery.graph import EntityCollection, NormalizedEntity, merge_collections, normalize
from ldquery.discovery import (
    compatible_dimension_types,
    discover_entity_types,
    discover_fields,
    discover_relationships,
)
from ldquery.query import QueryEngine, QueryResult, QuerySpec, run_query, validate_query
from ldquery.utils import DataLoadError, LDQueryError, QueryConfigError

__all__ = [
    "LDQuerySettings",
    "get_settings",
    "load_settings",
    "EntityCollection",
    "NormalizedEntity",
    "merge_collections",
    "normalize",
    "compatible_dimension_types",
    "discover_entity_types",
    "discover_fields",
    "discover_relationships",
    "QueryEngine",
    "QueryResult",
    "QuerySpec",
    "run_query",
    "validate_query",
    "DataLoadError",
    "LDQueryError",
    "QueryConfigError",
]
