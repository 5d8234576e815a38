"""ldquery graph module - entity model, JSON-LD normalization, and collection merging."""

from ldquery.graph.models import EntityCollection, NormalizedEntity, RelationshipEdge
from ldquery.graph.normalizer import normalize
from ldquery.graph.merger import MergeStatistics, merge_collections, merge_statistics

__all__ = [
    "EntityCollection",
    "NormalizedEntity",
    "RelationshipEdge",
    "normalize",
    "MergeStatistics",
    "merge_collections",
    "merge_statistics",
]
