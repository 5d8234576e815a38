"""Tests for merging normalized collections in ldquery.graph.merger."""

from ldquery.graph import merge_collections, merge_statistics, normalize
from ldquery.query import QuerySpec, run_query


def _first():
    return normalize([
        {
            "@id": "org:acme",
            "@type": "core:Organization",
            "name": "Acme",
            "aliases": ["ACME"],
        },
        {
            "@id": "inc:1",
            "@type": "aiid:Incident",
            "deployedBy": {"@id": "org:acme"},
        },
    ])


def _second():
    return normalize([
        {
            "@id": "org:acme",
            "@type": "core:Organization",
            "name": "Acme Corp",
            "aliases": ["Acme Inc"],
        },
        {
            "@id": "inc:1",
            "@type": "aiid:Incident",
            "deployedBy": {"@id": "org:acme"},
        },
        {
            "@id": "inc:2",
            "@type": "aiid:Incident",
            "deployedBy": {"@id": "org:acme"},
        },
    ])


class TestMergeCollections:
    def test_shared_entity_stored_once(self):
        merged = merge_collections([_first(), _second()])
        assert merged.type_counts() == {"core:Organization": 1, "aiid:Incident": 2}

    def test_scalar_overwritten_by_later_collection(self):
        merged = merge_collections([_first(), _second()])
        assert merged.get("org:acme").get_value("name") == "Acme Corp"

    def test_lists_concatenated(self):
        merged = merge_collections([_first(), _second()])
        assert merged.get("org:acme").get_value("aliases") == ["ACME", "Acme Inc"]

    def test_relationship_targets_unioned(self):
        merged = merge_collections([_first(), _second()])
        assert merged.get("org:acme").relationships["_reverse_deployedBy"] == ["inc:1", "inc:2"]

    def test_duplicate_edges_dropped(self):
        merged = merge_collections([_first(), _second()])
        assert len(merged.relationships["deployedBy"]) == 2

    def test_inputs_untouched(self):
        first, second = _first(), _second()
        merge_collections([first, second])
        assert first.get("org:acme").get_value("name") == "Acme"
        assert first.get("org:acme").relationships["_reverse_deployedBy"] == ["inc:1"]

    def test_empty_input(self):
        assert len(merge_collections([])) == 0


# ---- Relations across collections ----

class TestCrossCollectionRelations:
    def _split(self):
        incidents = normalize([
            {"@id": "inc:1", "@type": "aiid:Incident", "title": "Leak", "deployedBy": {"@id": "org:acme"}},
        ])
        organizations = normalize([
            {"@id": "org:acme", "@type": "core:Organization", "name": "Acme"},
        ])
        return incidents, organizations

    def test_reverse_alias_added_on_target(self):
        merged = merge_collections(list(self._split()))
        assert merged.get("org:acme").relationships["_reverse_deployedBy"] == ["inc:1"]

    def test_reverse_alias_added_when_target_comes_first(self):
        incidents, organizations = self._split()
        merged = merge_collections([organizations, incidents])
        assert merged.get("org:acme").relationships["_reverse_deployedBy"] == ["inc:1"]

    def test_reverse_query_over_merged_data(self):
        merged = merge_collections(list(self._split()))
        result = run_query(
            merged,
            QuerySpec(
                measure_type="core:Organization",
                dimension_type="aiid:Incident",
                dimension_field="title",
                dimension_via="_reverse_deployedBy",
            ),
        )
        assert result.as_tuples() == [("Leak", 1, 1)]

    def test_forward_query_over_merged_data(self):
        merged = merge_collections(list(self._split()))
        result = run_query(
            merged,
            QuerySpec(measure_type="aiid:Incident", dimension_field="name", dimension_via="deployedBy"),
        )
        assert result.as_tuples() == [("Acme", 1, 1)]


class TestMergeStatistics:
    def test_overlap_counts(self):
        stats = merge_statistics([_first(), _second()])
        assert stats.total_entities == 3
        assert stats.shared_entities == 2
        assert stats.unique_by_collection == {0: 0, 1: 1}
