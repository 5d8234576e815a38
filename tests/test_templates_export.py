"""Tests for preset query templates and query export/import."""

import json

import pytest

from ldquery.query import (
    QuerySpec,
    export_query,
    export_query_json,
    get_template,
    import_query,
    list_templates,
    run_query,
    templates_by_category,
    validate_query,
)
from ldquery.utils import QueryConfigError


# ---- Templates ----

class TestTemplates:
    def test_catalogue(self):
        ids = [t.id for t in list_templates()]
        assert len(ids) == 6
        assert len(set(ids)) == 6

    def test_lookup(self):
        assert get_template("incidents-over-time").spec.sort == "chrono-asc"
        assert get_template("does-not-exist") is None

    def test_by_category(self):
        assert {t.id for t in templates_by_category("organizations")} == {
            "incidents-by-organization",
            "incidents-distribution-by-org",
        }
        assert templates_by_category("unknown") == []

    def test_templates_valid_on_incident_data(self, incident_collection):
        for template in list_templates():
            assert validate_query(incident_collection, template.spec) == [], template.id

    def test_reports_per_incident(self, incident_collection, settings):
        result = run_query(incident_collection, get_template("reports-per-incident").spec, settings)
        assert result.as_tuples() == [("Face mismatch", 2, 2), ("Chatbot leak", 1, 1)]

    def test_affected_parties(self, incident_collection, settings):
        result = run_query(incident_collection, get_template("affected-parties").spec, settings)
        assert result.as_tuples() == [("No affectedParties", 3, 3), ("General public", 1, 1)]

    def test_list_is_a_copy(self):
        templates = list_templates()
        templates.clear()
        assert len(list_templates()) == 6


# ---- Export / import ----

class TestExportImport:
    def _spec(self):
        return QuerySpec(
            measure_type="aiid:Incident",
            dimension_type="core:Organization",
            dimension_field="name",
            dimension_via="deployedBy",
            limit=10,
        )

    def test_export_document(self):
        document = export_query(self._spec(), "Incidents by org")
        assert document["version"] == "1.0"
        assert document["title"] == "Incidents by org"
        assert document["spec"]["dimension_via"] == "deployedBy"
        assert "exported_at" in document

    def test_import_exported_json(self):
        imported = import_query(export_query_json(self._spec(), "Incidents by org"))
        assert imported.spec == self._spec()
        assert imported.title == "Incidents by org"

    def test_import_mapping(self):
        imported = import_query(export_query(self._spec(), "t"))
        assert imported.spec.limit == 10

    def test_unsupported_version(self):
        document = export_query(self._spec(), "t")
        document["version"] = "2.0"
        with pytest.raises(QueryConfigError, match="version"):
            import_query(document)

    def test_invalid_json(self):
        with pytest.raises(QueryConfigError, match="Invalid JSON"):
            import_query("{not json")

    def test_non_object_payload(self):
        with pytest.raises(QueryConfigError):
            import_query(json.dumps([1, 2, 3]))

    def test_empty_title_rejected(self):
        document = export_query(self._spec(), "t")
        document["title"] = ""
        with pytest.raises(QueryConfigError):
            import_query(document)

    def test_invalid_spec_rejected(self):
        document = export_query(self._spec(), "t")
        document["spec"] = {"measure_aggregation": "sum"}
        with pytest.raises(QueryConfigError):
            import_query(document)
