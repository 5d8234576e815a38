"""Check a QuerySpec against the collection it will run on.

Returns human-readable issues rather than raising, so a caller can show
every problem at once. Running a query with issues is still allowed; it
degrades to sentinel groups.
"""

import logging
from collections.abc import Mapping
from typing import Any

from ldquery.discovery.fields import discover_fields
from ldquery.discovery.relationships import (
    compatible_dimension_types,
    discover_relationships,
    infer_dimension_type,
)
from ldquery.graph.models import EntityCollection
from ldquery.names import REVERSE_PREFIX, canonical_name, is_reverse
from ldquery.query.engine import coerce_spec
from ldquery.query.models import QuerySpec

logger = logging.getLogger(__name__)


def validate_query(collection: EntityCollection, spec: QuerySpec | Mapping[str, Any]) -> list[str]:
    """List the problems that would make ``spec`` produce degenerate results."""
    spec = coerce_spec(spec)
    issues: list[str] = []

    measure_type = collection.resolve_type(spec.measure_type)
    if measure_type is None:
        issues.append(f"Measure type '{spec.measure_type}' not found in data")
        return issues

    dimension_type = measure_type
    if spec.dimension_type:
        dimension_type = collection.resolve_type(spec.dimension_type)
        if dimension_type is None:
            issues.append(f"Dimension type '{spec.dimension_type}' not found in data")
    elif spec.dimension_via:
        dimension_type = infer_dimension_type(collection, measure_type, spec.dimension_via) or measure_type

    if spec.dimension_via:
        known = {info.name: info for info in discover_relationships(collection, measure_type)}
        wanted = canonical_name(spec.dimension_via)
        fallback = None if is_reverse(wanted) else REVERSE_PREFIX + wanted
        if wanted not in known and fallback not in known:
            issues.append(f"Relationship '{spec.dimension_via}' not found for type '{measure_type}'")
        elif dimension_type is not None:
            compatible = compatible_dimension_types(collection, measure_type, wanted if wanted in known else fallback)
            if dimension_type not in compatible:
                issues.append(
                    f"Relationship '{spec.dimension_via}' does not reach '{dimension_type}' "
                    f"(reaches: {', '.join(sorted(compatible)) or 'nothing'})"
                )

    if spec.measure_field:
        fields = {f.name: f for f in discover_fields(collection, measure_type)}
        info = fields.get(canonical_name(spec.measure_field))
        if info is None:
            issues.append(f"Measure field '{spec.measure_field}' not found on '{measure_type}'")
        elif info.type != "number" and spec.measure_aggregation != "count":
            issues.append(f"Measure field '{spec.measure_field}' is not numeric (inferred {info.type})")

    if spec.dimension_field and dimension_type is not None:
        names = {f.name for f in discover_fields(collection, dimension_type)}
        if canonical_name(spec.dimension_field) not in names:
            issues.append(f"Dimension field '{spec.dimension_field}' not found on '{dimension_type}'")

    if issues:
        logger.debug("Query validation found %d issues", len(issues))
    return issues
