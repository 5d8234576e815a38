"""Preset queries for common incident-database questions."""

from typing import Literal

from pydantic import BaseModel

from ldquery.query.models import QuerySpec

TemplateCategory = Literal["organizations", "trends", "impact", "content"]


class QueryTemplate(BaseModel):
    id: str
    title: str
    description: str
    category: TemplateCategory
    spec: QuerySpec


QUERY_TEMPLATES: list[QueryTemplate] = [
    QueryTemplate(
        id="incidents-by-organization",
        title="Incidents by Organization",
        description="Which organizations have the most incidents?",
        category="organizations",
        spec=QuerySpec(
            measure_type="aiid:Incident",
            dimension_type="core:Organization",
            dimension_field="name",
            dimension_via="deployedBy",
            sort="value-desc",
            limit=15,
        ),
    ),
    QueryTemplate(
        id="incidents-distribution-by-org",
        title="Incident Distribution by Organization",
        description="How are incidents distributed across organizations?",
        category="organizations",
        spec=QuerySpec(
            measure_type="aiid:Incident",
            dimension_type="core:Organization",
            dimension_field="name",
            dimension_via="deployedBy",
            sort="value-desc",
            limit=10,
        ),
    ),
    QueryTemplate(
        id="incidents-over-time",
        title="Incidents Over Time",
        description="How have incidents changed over time?",
        category="trends",
        spec=QuerySpec(
            measure_type="aiid:Incident",
            dimension_type="aiid:Incident",
            dimension_field="date",
            sort="chrono-asc",
        ),
    ),
    QueryTemplate(
        id="affected-parties",
        title="Most Affected Parties",
        description="Which groups are most affected by incidents?",
        category="impact",
        spec=QuerySpec(
            measure_type="aiid:Incident",
            dimension_type="core:Organization",
            dimension_field="name",
            dimension_via="affectedParties",
            sort="value-desc",
            limit=20,
        ),
    ),
    QueryTemplate(
        id="affected-parties-distribution",
        title="Affected Groups Distribution",
        description="Distribution of impact across different groups",
        category="impact",
        spec=QuerySpec(
            measure_type="aiid:Incident",
            dimension_type="core:Organization",
            dimension_field="name",
            dimension_via="affectedParties",
            sort="value-desc",
            limit=10,
        ),
    ),
    QueryTemplate(
        id="reports-per-incident",
        title="Reports per Incident",
        description="How many reports does each incident have?",
        category="content",
        spec=QuerySpec(
            measure_type="aiid:Report",
            dimension_type="aiid:Incident",
            dimension_field="title",
            dimension_via="_reverse_reports",
            sort="value-desc",
            limit=15,
        ),
    ),
]


def list_templates() -> list[QueryTemplate]:
    return list(QUERY_TEMPLATES)


def get_template(template_id: str) -> QueryTemplate | None:
    for template in QUERY_TEMPLATES:
        if template.id == template_id:
            return template
    return None


def templates_by_category(category: str) -> list[QueryTemplate]:
    return [t for t in QUERY_TEMPLATES if t.category == category]
