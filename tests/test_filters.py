"""Tests for entity filter construction and parsing."""

import pytest

from graphrag_orchestrator.query.filters import (
    FILTER_FIELD,
    build_entity_filter,
    parse_entity_filter,
)


class TestBuildEntityFilter:
    """Test filter expression construction."""

    def test_empty_ids_means_no_filter(self):
        assert build_entity_filter([]) is None
        assert build_entity_filter(set()) is None

    def test_single_id(self):
        assert build_entity_filter({"svc-billing"}) == "entityIds/any(e: e eq 'svc-billing')"

    def test_multiple_ids_sorted(self):
        expected = "entityIds/any(e: e eq 'A' or e eq 'B' or e eq 'C')"
        assert build_entity_filter(["C", "A", "B"]) == expected

    def test_order_independent(self):
        assert build_entity_filter(["x", "y", "z"]) == build_entity_filter({"z", "x", "y"})

    def test_duplicates_collapsed(self):
        assert build_entity_filter(["A", "A", "B"]) == build_entity_filter(["B", "A"])

    def test_single_quotes_escaped(self):
        assert build_entity_filter(["O'Brien"]) == "entityIds/any(e: e eq 'O''Brien')"

    def test_accepts_generator(self):
        assert build_entity_filter(i for i in ["B", "A"]) == build_entity_filter(["A", "B"])

    def test_field_name(self):
        assert build_entity_filter(["A"]).startswith(f"{FILTER_FIELD}/any(")


class TestParseEntityFilter:
    """Test parsing filter expressions back into id sets."""

    def test_none_and_empty(self):
        assert parse_entity_filter(None) is None
        assert parse_entity_filter("") is None

    def test_inverse_of_build(self):
        ids = {"svc-billing", "team-payments", "O'Brien"}
        assert parse_entity_filter(build_entity_filter(ids)) == ids

    def test_surrounding_whitespace_ignored(self):
        assert parse_entity_filter("  entityIds/any(e: e eq 'A')  ") == {"A"}

    def test_unsupported_expression(self):
        with pytest.raises(ValueError, match="Unsupported filter expression"):
            parse_entity_filter("category eq 'runbook'")
