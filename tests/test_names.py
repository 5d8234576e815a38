"""Tests for key, type and value canonicalization in ldquery.names."""

from ldquery.names import (
    canonical_name,
    compact_type,
    expanded_iri,
    is_structural_key,
    local_name,
    reverse_aliases,
    split_iri,
    value_label,
)


class TestLocalName:
    def test_bare_name_unchanged(self):
        assert local_name("date") == "date"

    def test_compact_iri(self):
        assert local_name("aiid:date") == "date"

    def test_fragment_iri(self):
        assert local_name("https://example.org/aiid#date") == "date"

    def test_path_iri(self):
        assert local_name("https://schema.org/name") == "name"

    def test_canonical_keeps_reverse_prefix(self):
        assert canonical_name("_reverse_aiid:reports") == "_reverse_reports"
        assert canonical_name("_reverse_https://example.org/aiid#reports") == "_reverse_reports"


class TestStructuralKeys:
    def test_jsonld_keywords(self):
        assert is_structural_key("@id")
        assert is_structural_key("@type")

    def test_ui_annotations(self):
        assert is_structural_key("ui:widget")

    def test_plain_field(self):
        assert not is_structural_key("title")


class TestTypeCompaction:
    def test_compact_type_passthrough(self):
        assert compact_type("aiid:Incident") == "aiid:Incident"

    def test_fragment_iri_uses_last_path_segment(self):
        assert compact_type("https://example.org/aiid#Incident") == "aiid:Incident"

    def test_host_only_iri_uses_host_label(self):
        assert compact_type("https://schema.org/Person") == "schema:Person"

    def test_prefix_map_wins(self):
        prefixes = {"https://example.org/vocab/": "core"}
        assert compact_type("https://example.org/vocab/Organization", prefixes) == "core:Organization"

    def test_list_uses_first(self):
        assert compact_type(["aiid:Incident", "core:Event"]) == "aiid:Incident"

    def test_missing_type(self):
        assert compact_type(None) is None
        assert compact_type([]) is None

    def test_split_bare(self):
        assert split_iri("Incident") == (None, "Incident")


class TestReverseAliases:
    def test_bare_relation_borrows_source_namespace(self):
        assert reverse_aliases("reports", "aiid:Incident") == ("_reverse_reports", "_reverse_aiid:reports")

    def test_iri_relation_gets_three_aliases(self):
        aliases = reverse_aliases("https://example.org/aiid#reports", "aiid:Incident")
        assert aliases == (
            "_reverse_reports",
            "_reverse_aiid:reports",
            "_reverse_https://example.org/aiid#reports",
        )

    def test_compact_relation_expands_with_prefixes(self):
        prefixes = {"https://example.org/aiid#": "aiid"}
        aliases = reverse_aliases("aiid:reports", "aiid:Incident", prefixes)
        assert "_reverse_https://example.org/aiid#reports" in aliases
        assert len(aliases) == 3

    def test_no_namespace_available(self):
        assert reverse_aliases("knows", "Person") == ("_reverse_knows",)

    def test_expanded_iri_unknown_prefix(self):
        assert expanded_iri("zzz:thing") is None


class TestValueLabel:
    def test_integral_float(self):
        assert value_label(3.0) == "3"

    def test_booleans(self):
        assert value_label(True) == "true"
        assert value_label(False) == "false"

    def test_iri_collapses(self):
        assert value_label("https://example.org/org/Acme") == "Acme"

    def test_plain_string(self):
        assert value_label("Acme") == "Acme"
