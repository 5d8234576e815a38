"""Human-readable labels for entity types, fields, relations and query axes.

Examples:
    "deployedBy"           -> "Deployed by"
    "_reverse_reports"     -> "Reports (reverse)"
    "aiid:Incident"        -> "Incidents"
"""

import re

from ldquery.names import canonical_name, forward_name, is_reverse, local_name

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def _words(name: str) -> str:
    text = _CAMEL_BOUNDARY.sub(r"\1 \2", name).replace("_", " ")
    return " ".join(text.split()).lower()


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _pluralize(text: str) -> str:
    if text.endswith("s"):
        return text
    if len(text) > 1 and text.endswith("y") and text[-2] not in "aeiou":
        return text[:-1] + "ies"
    return text + "s"


def format_field_label(field_name: str) -> str:
    """Convert a field name (any spelling) to a display label."""
    if is_reverse(field_name):
        return f"{format_field_label(forward_name(field_name))} (reverse)"
    return _capitalize(_words(local_name(field_name)))


def format_relationship_label(relation: str) -> str:
    return format_field_label(canonical_name(relation))


def entity_type_noun(entity_type: str) -> str:
    """Singular lower-case noun for a type: ``core:Organization`` -> ``organization``."""
    return _words(local_name(entity_type))


def format_entity_type_label(entity_type: str) -> str:
    """Plural display label for a type: ``aiid:Report`` -> ``Reports``."""
    return _capitalize(_pluralize(entity_type_noun(entity_type)))


def format_axis_label(aggregation: str, entity_type: str, field_name: str | None = None) -> str:
    """Label for the value axis of a query result."""
    entity_label = format_entity_type_label(entity_type)
    field_label = format_field_label(field_name) if field_name else None

    if aggregation == "count":
        return f"Number of {entity_label}"
    if aggregation == "cumulative":
        return f"Cumulative {field_label or entity_label}"

    prefix = {
        "sum": "Total",
        "average": "Average",
        "min": "Minimum",
        "max": "Maximum",
    }.get(aggregation)
    if prefix is None:
        return "Value"
    return f"{prefix} {field_label}" if field_label else prefix


def grouping_label(relation: str, target_types: list[str] | None = None) -> str:
    """Describe a grouping, e.g. ``by deployedBy (organization)``."""
    nouns = [entity_type_noun(t) for t in target_types or []]
    bare = canonical_name(relation)

    if is_reverse(bare):
        entity = nouns[0] if nouns else "entity"
        return f"by {entity} that reference them via {forward_name(bare)}"
    if nouns:
        return f"by {bare} ({', '.join(nouns)})"
    return f"by {bare}"


def chart_title(source_type: str, relation: str, target_types: list[str] | None = None) -> str:
    description = f"{format_entity_type_label(source_type)} {grouping_label(relation, target_types)}"
    return " ".join(_capitalize(word) for word in description.split(" "))
