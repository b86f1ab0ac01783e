"""Tests for sync/aggregator.py -- multi-location change aggregation."""

from __future__ import annotations

from einstellung.sync.aggregator import aggregate
from einstellung.sync.models import ChangeKind, LineSequence


def _seq(*lines: str) -> LineSequence:
    return LineSequence.from_lines(lines)


def _summary(candidates) -> list[tuple[str, str, int]]:
    return [(c.kind.prefix, c.line, c.position) for c in candidates]


class TestAggregate:
    """Tests for aggregate()."""

    def test_no_locations(self):
        assert aggregate(_seq("a"), []) == []

    def test_all_locations_identical(self):
        canonical = _seq("a", "b")
        assert aggregate(canonical, [("l1", canonical), ("l2", canonical)]) == []

    def test_duplicate_change_emitted_once(self):
        canonical = _seq("a", "b")
        other = _seq("a", "b", "c")
        result = aggregate(canonical, [("l1", other), ("l2", other)])

        assert len(result) == 1
        assert result[0].kind is ChangeKind.ADDITION
        assert result[0].line == "c"
        assert result[0].sources == ("l1", "l2")

    def test_same_line_different_kind_not_merged(self):
        canonical = _seq("a", "b")
        result = aggregate(
            canonical,
            [("l1", _seq("b", "a")), ("l2", _seq("a", "b", "a"))],
        )
        kinds = {(c.kind, c.line) for c in result}
        assert (ChangeKind.REMOVAL, "a") in kinds
        assert (ChangeKind.ADDITION, "a") in kinds
        assert len(result) == len(kinds)

    def test_ordered_by_position(self):
        canonical = _seq("a", "b", "c")
        result = aggregate(
            canonical,
            [
                ("l1", _seq("a", "c", "z")),
                ("l2", _seq("x", "a", "b", "c")),
            ],
        )
        assert _summary(result) == [
            ("+", "x", 0),
            ("-", "b", 1),
            ("+", "z", 3),
        ]

    def test_removal_before_addition_at_same_position(self):
        canonical = _seq("a", "b")
        result = aggregate(
            canonical,
            [("l1", _seq("a", "x", "b")), ("l2", _seq("a"))],
        )
        assert _summary(result) == [("-", "b", 1), ("+", "x", 1)]

    def test_location_order_breaks_ties(self):
        canonical = _seq("a")
        p = ("lp", _seq("a", "p"))
        q = ("lq", _seq("a", "q"))

        assert [c.line for c in aggregate(canonical, [p, q])] == ["p", "q"]
        assert [c.line for c in aggregate(canonical, [q, p])] == ["q", "p"]

    def test_diff_order_kept_within_location(self):
        canonical = _seq("a")
        result = aggregate(canonical, [("l1", _seq("a", "z", "y", "x"))])
        assert [c.line for c in result] == ["z", "y", "x"]

    def test_positions_merged(self):
        canonical = _seq("x", "a", "x")
        result = aggregate(
            canonical,
            [("l1", _seq("a", "x")), ("l2", _seq("x", "a"))],
        )
        assert len(result) == 1
        assert result[0].kind is ChangeKind.REMOVAL
        assert result[0].positions == (0, 2)
        assert result[0].sources == ("l1", "l2")

    def test_empty_location_proposes_removals(self):
        result = aggregate(_seq("a"), [("missing", LineSequence.empty())])
        assert _summary(result) == [("-", "a", 0)]

    def test_empty_canonical_bootstrap(self):
        result = aggregate(
            LineSequence.empty(),
            [("l1", _seq("x", "y")), ("l2", _seq("y", "z"))],
        )
        assert [c.line for c in result] == ["x", "y", "z"]
        assert all(c.kind is ChangeKind.ADDITION for c in result)
        assert result[1].sources == ("l1", "l2")
