"""
Tests: Corpus deduplication.

Run with:
    pytest compliance_rag/tests/test_deduplicator.py -v
"""

from compliance_rag.models.schemas import StandardRecord
from compliance_rag.services.deduplicator import deduplicate


def _rec(id_, title="T", scope=None) -> StandardRecord:
    return StandardRecord(id=id_, standard_number=id_.replace("-", " "), title=title, scope=scope)


class TestDeduplicate:
    def test_unique_ids_pass_through(self):
        out = deduplicate([_rec("A"), _rec("B"), _rec("C")])
        assert list(out) == ["A", "B", "C"]

    def test_first_seen_wins_without_scope(self):
        out = deduplicate([_rec("A", title="first"), _rec("A", title="second")])
        assert out["A"].title == "first"

    def test_first_seen_wins_when_both_have_scope(self):
        out = deduplicate([_rec("A", title="first", scope="s1"), _rec("A", title="second", scope="s2")])
        assert out["A"].title == "first"

    def test_later_scope_replaces_scopeless(self):
        out = deduplicate([_rec("A", title="bare"), _rec("A", title="scoped", scope="text")])
        assert out["A"].title == "scoped"

    def test_scope_preference_independent_of_order(self):
        bare, scoped = _rec("A", title="bare"), _rec("A", title="scoped", scope="text")
        assert deduplicate([bare, scoped])["A"].title == "scoped"
        assert deduplicate([scoped, bare])["A"].title == "scoped"

    def test_replacement_keeps_first_position(self):
        out = deduplicate([_rec("A"), _rec("B"), _rec("A", scope="text")])
        assert list(out) == ["A", "B"]

    def test_idempotent(self):
        records = [_rec("A"), _rec("B", scope="x"), _rec("A", scope="y"), _rec("B"), _rec("C")]
        once = deduplicate(records)
        twice = deduplicate(list(once.values()))
        assert twice == once

    def test_output_not_larger_than_input(self):
        records = [_rec("A"), _rec("A"), _rec("B")]
        assert len(deduplicate(records)) <= len(records)

    def test_empty_input(self):
        assert deduplicate([]) == {}
