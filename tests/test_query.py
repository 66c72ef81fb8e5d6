"""Tests for exact and regex package name queries."""

import pytest

from analysis.query import (
    ExactQuery,
    InvalidPatternError,
    PatternQuery,
    build_queries,
    match_queries,
)


class TestExactQuery:
    """Exact name matching."""

    def test_matches_identical_name(self):
        assert ExactQuery("python-3.13").match("python-3.13") is True

    def test_rejects_prefix_and_superstring(self):
        q = ExactQuery("python-3.13")
        assert q.match("python-3.13-base") is False
        assert q.match("python-3.1") is False

    def test_regex_characters_are_literal(self):
        q = ExactQuery("python-3.1.*")
        assert q.match("python-3.13") is False
        assert q.match("python-3.1.*") is True


class TestPatternQuery:
    """Regular expression matching."""

    def test_unanchored_search(self):
        q = PatternQuery.compile("3.12")
        assert q.match("python-3.12-dev") is True
        assert q.match("py3.12-pip") is True

    def test_anchors_are_respected(self):
        q = PatternQuery.compile("^python-3.12$")
        assert q.match("python-3.12") is True
        assert q.match("python-3.12-dev") is False

    def test_invalid_pattern_fails_at_construction(self):
        with pytest.raises(InvalidPatternError) as exc_info:
            PatternQuery.compile("python-[3")
        assert exc_info.value.pattern == "python-[3"
        assert "python-[3" in str(exc_info.value)

    def test_invalid_pattern_is_value_error(self):
        with pytest.raises(ValueError):
            PatternQuery.compile("(unclosed")


class TestQuerySet:
    """Building and evaluating query sets."""

    def test_build_exact_mode(self):
        queries = build_queries(["a", "b.*"])
        assert queries == [ExactQuery("a"), ExactQuery("b.*")]

    def test_build_regex_mode(self):
        queries = build_queries(["^a", "b.*"], regex=True)
        assert all(isinstance(q, PatternQuery) for q in queries)
        assert [str(q) for q in queries] == ["^a", "b.*"]

    def test_build_regex_mode_fails_fast(self):
        with pytest.raises(InvalidPatternError):
            build_queries(["ok", "bad[", "never-reached"], regex=True)

    def test_match_is_logical_or(self):
        queries = build_queries(["ruby-3.2", "python-3.13"])
        assert match_queries(queries, "python-3.13") is True
        assert match_queries(queries, "ruby-3.2") is True
        assert match_queries(queries, "perl") is False

    def test_match_independent_of_order(self):
        names = ["python-3.13", "ruby-3.2", "python-3.13-dev", "perl"]
        forward = build_queries(["^python", "ruby"], regex=True)
        backward = list(reversed(forward))
        for name in names:
            assert match_queries(forward, name) == match_queries(backward, name)

    def test_empty_set_matches_nothing(self):
        assert match_queries([], "anything") is False
