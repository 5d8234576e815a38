"""Aggregation query engine over a normalized EntityCollection.

Answers "group population P by dimension D, aggregate with F, sort, limit".
Each measure entity is mapped to one or more group labels:

- same-type dimension without a relation: the entity's own field value
- otherwise: the field value of every related entity of the dimension type,
  reached through one relationship hop in either direction

Entities with no resolvable label land in a visible sentinel group
("Unknown" / "No <relation>") so group support always accounts for the
whole population.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from datetime import date
from typing import Any

from pydantic import ValidationError

from ldquery.discovery.fields import displayable_fields, field_type, select_default_display_field
from ldquery.discovery.relationships import discover_relationships, infer_dimension_type
from ldquery.graph.models import EntityCollection, NormalizedEntity
from ldquery.labels import chart_title, format_axis_label, format_field_label, format_relationship_label
from ldquery.names import REVERSE_PREFIX, canonical_name, compact_type, is_reverse, local_name, value_label
from ldquery.query.models import GroupResult, QueryFilter, QueryResult, QuerySpec
from ldquery.settings import LDQuerySettings, get_settings
from ldquery.utils import QueryConfigError

logger = logging.getLogger(__name__)

_YEAR_PREFIX = re.compile(r"^(\d{4})(?:-|$)")
_ISO_DAY = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_ISO_MONTH = re.compile(r"^(\d{4})-(\d{2})$")


def coerce_spec(spec: QuerySpec | Mapping[str, Any]) -> QuerySpec:
    """Accept a QuerySpec or a plain mapping; raise QueryConfigError when invalid."""
    if isinstance(spec, QuerySpec):
        if spec.measure_aggregation != "count" and not spec.measure_field:
            raise QueryConfigError(
                f"Aggregation '{spec.measure_aggregation}' requires measure_field"
            )
        return spec
    if isinstance(spec, Mapping):
        try:
            return QuerySpec.model_validate(dict(spec))
        except ValidationError as e:
            raise QueryConfigError(f"Invalid query: {e}") from e
    raise QueryConfigError(f"Unsupported query type: {type(spec).__name__}")


def to_number(value: Any) -> float | None:
    """Finite numeric reading of a property value; None otherwise.

    NaN and infinities are rejected so they cannot poison sums or averages.
    """
    if isinstance(value, list):
        value = value[0] if len(value) == 1 else None
    if isinstance(value, bool) or value is None:
        return None
    number = None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    if number is None or not math.isfinite(number):
        return None
    return number


def _year_of(value: Any) -> str | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        match = _YEAR_PREFIX.match(value.strip())
        if match:
            return match.group(1)
    return None


def parse_label_date(label: str) -> date | None:
    """Calendar date for a group label (year, year-month or ISO date)."""
    text = label.strip()
    try:
        match = _ISO_DAY.match(text)
        if match:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        match = _ISO_MONTH.match(text)
        if match:
            return date(int(match.group(1)), int(match.group(2)), 1)
        if re.fullmatch(r"\d{4}", text):
            return date(int(text), 1, 1)
    except ValueError:
        return None
    return None


def _matches_filter(entity: NormalizedEntity, query_filter: QueryFilter) -> bool:
    value = entity.get_value(query_filter.field)
    expected = query_filter.value

    if query_filter.operator == "contains":
        if value is None:
            return False
        haystack = " ".join(map(str, value)) if isinstance(value, list) else str(value)
        return str(expected).lower() in haystack.lower()

    if isinstance(value, list) and len(value) == 1:
        value = value[0]

    if query_filter.operator == "equals":
        if isinstance(value, list):
            return expected in value
        return value == expected
    if query_filter.operator == "in":
        return isinstance(expected, list) and value in expected

    number, threshold = to_number(value), to_number(expected)
    if number is None or threshold is None:
        return False
    if query_filter.operator == "greater_than":
        return number > threshold
    return number < threshold


class QueryEngine:
    """Runs QuerySpecs against one collection.

    Holds no state between queries; a single engine can serve any number
    of concurrent read-only queries on the same collection.
    """

    def __init__(self, collection: EntityCollection, settings: LDQuerySettings | None = None) -> None:
        self.collection = collection
        self.settings = settings or get_settings()

    def run(self, spec: QuerySpec | Mapping[str, Any]) -> QueryResult:
        spec = coerce_spec(spec)
        collection = self.collection

        measure_type = (
            collection.resolve_type(spec.measure_type)
            or compact_type(spec.measure_type)
            or spec.measure_type
        )
        if spec.dimension_type:
            dimension_type = (
                collection.resolve_type(spec.dimension_type)
                or compact_type(spec.dimension_type)
                or spec.dimension_type
            )
        elif spec.dimension_via:
            dimension_type = self._infer_dimension_type(measure_type, spec.dimension_via)
        else:
            dimension_type = measure_type

        via = spec.dimension_via
        if via is None and dimension_type != measure_type:
            via = self._auto_select_via(measure_type, dimension_type)

        dimension_field = spec.dimension_field or self._default_dimension_field(dimension_type)
        bucket_years = (
            dimension_field is not None
            and field_type(collection, dimension_type, dimension_field, self.settings) == "date"
        )

        population = [
            entity for entity in collection.entities_of_type(measure_type)
            if all(_matches_filter(entity, f) for f in spec.filters)
        ]

        measure_label = format_axis_label(spec.measure_aggregation, measure_type, spec.measure_field)
        dimension_label = self._dimension_label(dimension_field, via)
        if via:
            title = chart_title(measure_type, via, [dimension_type])
        else:
            title = f"{measure_label} by {dimension_label}"
        result = QueryResult(
            spec=spec,
            total_entities=len(population),
            measure_label=measure_label,
            dimension_label=dimension_label,
            title=title,
            resolved_via=via,
            resolved_field=dimension_field,
        )
        if not population:
            logger.info("Query on %s: empty measure population", measure_type)
            return result

        groups: dict[str, list[NormalizedEntity]] = {}
        for entity in population:
            if via is None and dimension_type == measure_type:
                labels = [self._own_label(entity, dimension_field, bucket_years)]
            elif via is None:
                labels = [self.settings.no_relation_label(local_name(dimension_type))]
            else:
                labels = self._related_labels(entity, via, dimension_type, dimension_field, bucket_years)
            for label in labels:
                groups.setdefault(label, []).append(entity)

        rows = [
            GroupResult(
                label=label,
                value=self._aggregate(members, spec),
                support_count=len(members),
                entity_ids=[m.id for m in members],
            )
            for label, members in groups.items()
        ]
        rows = self._sort(rows, spec.sort)

        if spec.measure_aggregation == "cumulative":
            running = 0.0
            for row in rows:
                running += row.value
                row.value = running

        result.unique_groups = len(rows)
        result.groups = rows[: spec.limit] if spec.limit else rows

        logger.info(
            "Query %s(%s) by %s.%s via %s: %d groups from %d entities",
            spec.measure_aggregation,
            measure_type,
            dimension_type,
            dimension_field,
            via,
            len(rows),
            len(population),
        )
        return result

    # ---- dimension resolution ----

    def _infer_dimension_type(self, measure_type: str, via: str) -> str:
        """Target type of ``via``; the measure type itself when nothing is reached."""
        inferred = infer_dimension_type(self.collection, measure_type, via)
        if inferred is None:
            logger.warning("Relation %s reaches no typed entity from %s", via, measure_type)
            return measure_type
        logger.debug("Inferred dimension type %s from relation %s", inferred, via)
        return inferred

    def _auto_select_via(self, measure_type: str, dimension_type: str) -> str | None:
        """Most frequent relation from the measure type reaching the dimension type."""
        for info in discover_relationships(self.collection, measure_type):
            if dimension_type in info.target_types:
                logger.debug("Auto-selected relation %s for %s -> %s", info.name, measure_type, dimension_type)
                return info.name
        logger.warning("No relation links %s to %s", measure_type, dimension_type)
        return None

    def _default_dimension_field(self, dimension_type: str) -> str | None:
        fields = displayable_fields(self.collection, [dimension_type], self.settings)
        return select_default_display_field(fields, self.settings)

    def _label(self, value: Any, bucket_years: bool) -> str | None:
        if isinstance(value, list):
            value = value[0] if value else None
        if value is None or value == "":
            return None
        if bucket_years:
            year = _year_of(value)
            if year:
                return year
        return value_label(value)

    def _own_label(self, entity: NormalizedEntity, dimension_field: str | None, bucket_years: bool) -> str:
        if dimension_field is None:
            return value_label(entity.id)
        label = self._label(entity.get_value(dimension_field), bucket_years)
        return label if label is not None else self.settings.unknown_label

    def _resolve_targets(self, entity: NormalizedEntity, via: str) -> list[str]:
        """Target ids for ``via``: literal or canonical spelling, then reverse alias."""
        target_ids = entity.related_ids(via)
        if target_ids or is_reverse(via):
            return target_ids
        return entity.related_ids(REVERSE_PREFIX + canonical_name(via))

    def _related_labels(
        self,
        entity: NormalizedEntity,
        via: str,
        dimension_type: str,
        dimension_field: str | None,
        bucket_years: bool,
    ) -> list[str]:
        labels: list[str] = []
        for target_id in self._resolve_targets(entity, via):
            target = self.collection.get(target_id)
            if target is None or target.type != dimension_type:
                continue
            if dimension_field is None:
                label = value_label(target.id)
            else:
                label = self._label(target.get_value(dimension_field), bucket_years)
            label = label if label is not None else self.settings.unknown_label
            if label not in labels:
                labels.append(label)
        return labels or [self.settings.no_relation_label(canonical_name(via))]

    def _dimension_label(self, dimension_field: str | None, via: str | None) -> str:
        label = format_field_label(dimension_field) if dimension_field else "Identifier"
        if via:
            return f"{label} (via {format_relationship_label(via)})"
        return label

    # ---- aggregation and ordering ----

    def _aggregate(self, members: list[NormalizedEntity], spec: QuerySpec) -> float:
        aggregation = spec.measure_aggregation
        if aggregation == "count":
            return float(len(members))

        numbers = [to_number(m.get_value(spec.measure_field)) for m in members]
        if aggregation in ("sum", "cumulative"):
            return sum(n or 0.0 for n in numbers)
        if aggregation == "average":
            return sum(n or 0.0 for n in numbers) / len(members)

        present = [n for n in numbers if n is not None]
        if not present:
            return 0.0
        return min(present) if aggregation == "min" else max(present)

    def _sort(self, rows: list[GroupResult], rule: str) -> list[GroupResult]:
        """Stable sort; ties keep group discovery order."""
        kind, direction = rule.rsplit("-", 1)
        descending = direction == "desc"

        if kind == "value":
            return sorted(rows, key=lambda r: r.value, reverse=descending)
        if kind == "label":
            return sorted(rows, key=lambda r: r.label.casefold(), reverse=descending)

        dated = [(parse_label_date(r.label), r) for r in rows]
        ordered = sorted(
            ((d, r) for d, r in dated if d is not None),
            key=lambda pair: pair[0],
            reverse=descending,
        )
        undated = [r for d, r in dated if d is None]
        return [r for _, r in ordered] + undated


def run_query(
    collection: EntityCollection,
    spec: QuerySpec | Mapping[str, Any],
    settings: LDQuerySettings | None = None,
) -> QueryResult:
    """Run one aggregation query. Raises QueryConfigError for invalid specs."""
    return QueryEngine(collection, settings).run(spec)
