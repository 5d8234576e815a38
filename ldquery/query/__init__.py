"""ldquery query module - query models, aggregation engine, validation, templates, export."""

from ldquery.query.models import GroupResult, QueryFilter, QueryResult, QuerySpec
from ldquery.query.engine import QueryEngine, run_query
from ldquery.query.validators import validate_query
from ldquery.query.templates import QueryTemplate, get_template, list_templates, templates_by_category
from ldquery.query.export import ExportedQuery, export_query, export_query_json, import_query

__all__ = [
    "GroupResult",
    "QueryFilter",
    "QueryResult",
    "QuerySpec",
    "QueryEngine",
    "run_query",
    "validate_query",
    "QueryTemplate",
    "get_template",
    "list_templates",
    "templates_by_category",
    "ExportedQuery",
    "export_query",
    "export_query_json",
    "import_query",
]
