"""Tests for query validation against a collection in ldquery.query.validators."""

import pytest

from ldquery.query import QuerySpec, validate_query
from ldquery.utils import QueryConfigError


def _spec(**overrides):
    spec = {
        "measure_type": "aiid:Incident",
        "dimension_type": "core:Organization",
        "dimension_field": "name",
        "dimension_via": "deployedBy",
    }
    spec.update(overrides)
    return QuerySpec(**spec)


class TestValidateQuery:
    def test_valid_query_no_issues(self, incident_collection):
        assert validate_query(incident_collection, _spec()) == []

    def test_same_type_query_no_issues(self, incident_collection):
        spec = QuerySpec(measure_type="Incident", dimension_field="date")
        assert validate_query(incident_collection, spec) == []

    def test_unknown_measure_type(self, incident_collection):
        issues = validate_query(incident_collection, _spec(measure_type="aiid:Nothing"))
        assert len(issues) == 1
        assert "aiid:Nothing" in issues[0]

    def test_unknown_dimension_type(self, incident_collection):
        issues = validate_query(incident_collection, _spec(dimension_type="core:Nothing"))
        assert any("Dimension type" in i for i in issues)

    def test_unknown_relationship(self, incident_collection):
        issues = validate_query(incident_collection, _spec(dimension_via="ownedBy"))
        assert any("ownedBy" in i and "not found" in i for i in issues)

    def test_relationship_does_not_reach_dimension(self, incident_collection):
        issues = validate_query(
            incident_collection, _spec(dimension_type="aiid:Report", dimension_field="title")
        )
        assert any("does not reach" in i for i in issues)

    def test_reverse_alias_accepted_by_forward_name(self, incident_collection):
        spec = QuerySpec(
            measure_type="aiid:Report",
            dimension_type="aiid:Incident",
            dimension_field="title",
            dimension_via="reports",
        )
        assert validate_query(incident_collection, spec) == []

    def test_dimension_type_inferred_from_via(self, incident_collection):
        spec = QuerySpec(measure_type="aiid:Incident", dimension_field="name", dimension_via="deployedBy")
        assert validate_query(incident_collection, spec) == []

    def test_non_numeric_measure_field(self, incident_collection):
        issues = validate_query(incident_collection, _spec(measure_aggregation="sum", measure_field="title"))
        assert any("not numeric" in i for i in issues)

    def test_missing_measure_field(self, incident_collection):
        issues = validate_query(incident_collection, _spec(measure_aggregation="max", measure_field="cost"))
        assert any("cost" in i for i in issues)

    def test_missing_dimension_field(self, incident_collection):
        issues = validate_query(incident_collection, _spec(dimension_field="headcount"))
        assert any("headcount" in i for i in issues)

    def test_several_issues_reported_together(self, incident_collection):
        issues = validate_query(
            incident_collection,
            _spec(dimension_via="ownedBy", measure_aggregation="sum", measure_field="title"),
        )
        assert len(issues) == 2

    def test_invalid_mapping_raises(self, incident_collection):
        with pytest.raises(QueryConfigError):
            validate_query(incident_collection, {"measure_type": "aiid:Incident", "sort": "random"})
