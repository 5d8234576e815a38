"""Tests for display label generation in ldquery.labels."""

from ldquery.labels import (
    chart_title,
    entity_type_noun,
    format_axis_label,
    format_entity_type_label,
    format_field_label,
    format_relationship_label,
    grouping_label,
)


class TestFieldLabels:
    def test_camel_case(self):
        assert format_field_label("deployedBy") == "Deployed by"

    def test_snake_case(self):
        assert format_field_label("report_count") == "Report count"

    def test_iri_spelling(self):
        assert format_field_label("https://example.org/aiid#deployedBy") == "Deployed by"

    def test_reverse(self):
        assert format_field_label("_reverse_reports") == "Reports (reverse)"
        assert format_relationship_label("_reverse_aiid:reports") == "Reports (reverse)"


class TestEntityTypeLabels:
    def test_plural(self):
        assert format_entity_type_label("aiid:Incident") == "Incidents"

    def test_consonant_y(self):
        assert format_entity_type_label("aiid:Category") == "Categories"

    def test_vowel_y(self):
        assert format_entity_type_label("x:Key") == "Keys"

    def test_already_plural(self):
        assert format_entity_type_label("x:News") == "News"

    def test_noun(self):
        assert entity_type_noun("core:Organization") == "organization"


class TestAxisLabels:
    def test_count(self):
        assert format_axis_label("count", "aiid:Incident") == "Number of Incidents"

    def test_sum(self):
        assert format_axis_label("sum", "aiid:Incident", "severity") == "Total Severity"

    def test_average(self):
        assert format_axis_label("average", "aiid:Report", "wordCount") == "Average Word count"

    def test_cumulative(self):
        assert format_axis_label("cumulative", "aiid:Incident", "severity") == "Cumulative Severity"

    def test_min_max(self):
        assert format_axis_label("min", "x:T", "cost") == "Minimum Cost"
        assert format_axis_label("max", "x:T", "cost") == "Maximum Cost"


class TestGroupingLabels:
    def test_forward(self):
        assert grouping_label("deployedBy", ["core:Organization"]) == "by deployedBy (organization)"

    def test_reverse(self):
        assert grouping_label("_reverse_reports", ["aiid:Incident"]) == "by incident that reference them via reports"

    def test_no_targets(self):
        assert grouping_label("aiid:deployedBy") == "by deployedBy"

    def test_chart_title(self):
        assert chart_title("aiid:Incident", "deployedBy") == "Incidents By DeployedBy"
