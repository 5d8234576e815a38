"""Pydantic v2 models for aggregation query requests and results.

Importable without any collection; validation here only covers the shape of
a request. Checks against a concrete collection live in
``ldquery.query.validators``.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from ldquery.settings import SortRule

Aggregation = Literal["count", "sum", "average", "min", "max", "cumulative"]
FilterOperator = Literal["equals", "contains", "greater_than", "less_than", "in"]

# Spellings accepted from older saved configurations
_AGGREGATION_ALIASES = {"avg": "average", "mean": "average", "total": "sum"}
_SORT_ALIASES = {
    "count-desc": "value-desc",
    "count-asc": "value-asc",
    "alpha-asc": "label-asc",
    "alpha-desc": "label-desc",
}


class QueryFilter(BaseModel):
    """Restricts the measure population before grouping."""

    field: str
    operator: FilterOperator = "equals"
    value: Any = None


class QuerySpec(BaseModel):
    """Group ``measure_type`` by a dimension and aggregate each group."""

    measure_type: str
    measure_aggregation: Aggregation = "count"
    measure_field: str | None = None
    dimension_type: str | None = None  # defaults to measure_type
    dimension_field: str | None = None  # auto-selected when omitted
    dimension_via: str | None = None
    sort: SortRule = "value-desc"
    limit: int | None = Field(default=None, ge=1)  # None = unbounded
    filters: list[QueryFilter] = Field(default_factory=list)

    @field_validator("measure_aggregation", mode="before")
    @classmethod
    def _aggregation_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _AGGREGATION_ALIASES.get(value.lower(), value.lower())
        return value

    @field_validator("sort", mode="before")
    @classmethod
    def _sort_alias(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _SORT_ALIASES.get(value, value)
        return value

    @field_validator("limit", mode="before")
    @classmethod
    def _unbounded_limit(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and value.lower() == "all"):
            return None
        return value

    @field_validator("dimension_via", "dimension_field", "measure_field", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip().lower() in ("", "none"):
            return None
        return value

    @model_validator(mode="after")
    def _measure_field_required(self) -> "QuerySpec":
        if self.measure_aggregation != "count" and not self.measure_field:
            raise ValueError(
                f"Aggregation '{self.measure_aggregation}' requires measure_field"
            )
        return self


class GroupResult(BaseModel):
    """One group of the measure population."""

    label: str
    value: float
    support_count: int
    entity_ids: list[str] = Field(default_factory=list)


class QueryResult(BaseModel):
    spec: QuerySpec
    groups: list[GroupResult] = Field(default_factory=list)
    total_entities: int = 0
    unique_groups: int = 0
    measure_label: str = ""
    dimension_label: str = ""
    resolved_via: str | None = None
    resolved_field: str | None = None
    title: str = ""

    def as_tuples(self) -> list[tuple[str, float, int]]:
        """``(label, value, support_count)`` per group, in result order."""
        return [(g.label, g.value, g.support_count) for g in self.groups]
