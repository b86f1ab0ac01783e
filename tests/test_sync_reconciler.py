"""Tests for sync/reconciler.py -- read-mode review and write-mode propagation."""

from __future__ import annotations

import pytest

from einstellung.exceptions import SyncAborted
from einstellung.sync.aggregator import aggregate
from einstellung.sync.differ import diff
from einstellung.sync.models import (
    ChangeCandidate,
    ChangeKind,
    Choice,
    LineSequence,
)
from einstellung.sync.reconciler import Reconciler, propagate


def _seq(*lines: str) -> LineSequence:
    return LineSequence.from_lines(lines)


def _add(line: str, position: int) -> ChangeCandidate:
    return ChangeCandidate(
        kind=ChangeKind.ADDITION, line=line, positions=(position,)
    )


def _rem(line: str, position: int) -> ChangeCandidate:
    return ChangeCandidate(
        kind=ChangeKind.REMOVAL, line=line, positions=(position,)
    )


# ---------------------------------------------------------------------------
# Reconciler.reconcile
# ---------------------------------------------------------------------------


class TestReconcile:
    """Tests for Reconciler.reconcile()."""

    def test_accept_addition(self, scripted_prompter):
        canonical = _seq("a", "b")
        candidates = diff(canonical, _seq("a", "b", "c"))
        prompter = scripted_prompter([Choice.ACCEPT])

        result = Reconciler(prompter).reconcile(canonical, candidates)

        assert result.lines == ("a", "b", "c")

    def test_accept_removal(self, scripted_prompter):
        canonical = _seq("a", "b", "c")
        candidates = diff(canonical, _seq("a", "c"))
        prompter = scripted_prompter([Choice.ACCEPT])

        result = Reconciler(prompter).reconcile(canonical, candidates)

        assert result.lines == ("a", "c")

    def test_reject_returns_canonical(self, scripted_prompter):
        canonical = _seq("a", "b")
        candidates = diff(canonical, _seq("a", "x"))
        prompter = scripted_prompter([Choice.REJECT, Choice.REJECT])

        result = Reconciler(prompter).reconcile(canonical, candidates)

        assert result is canonical

    def test_no_choice_is_rejection(self, scripted_prompter):
        canonical = _seq("a")
        candidates = diff(canonical, _seq("a", "b"))
        prompter = scripted_prompter([None])

        result = Reconciler(prompter).reconcile(canonical, candidates)

        assert result == canonical

    def test_every_candidate_asked_once(self, scripted_prompter):
        candidates = [_rem("b", 1), _add("x", 2), _add("y", 4)]
        prompter = scripted_prompter(
            [Choice.REJECT, Choice.ACCEPT, Choice.ACCEPT]
        )

        Reconciler(prompter).reconcile(_seq("a", "b", "c", "d"), candidates)

        assert prompter.asked == candidates

    def test_soundness_mixed_decisions(self, scripted_prompter):
        """Accepted additions appear; the rejected removal leaves its line."""
        canonical = _seq("a", "b", "c", "d")
        candidates = aggregate(
            canonical, [("loc", _seq("a", "x", "c", "d", "y"))]
        )
        assert [(c.kind, c.line) for c in candidates] == [
            (ChangeKind.REMOVAL, "b"),
            (ChangeKind.ADDITION, "x"),
            (ChangeKind.ADDITION, "y"),
        ]
        prompter = scripted_prompter(
            [Choice.REJECT, Choice.ACCEPT, Choice.ACCEPT]
        )

        result = Reconciler(prompter).reconcile(canonical, candidates)

        assert result.lines == ("a", "b", "x", "c", "d", "y")

    def test_changes_from_several_locations(self, scripted_prompter):
        canonical = _seq("a", "b", "c")
        candidates = aggregate(
            canonical,
            [
                ("l1", _seq("a", "c", "z")),
                ("l2", _seq("x", "a", "b", "c")),
            ],
        )
        prompter = scripted_prompter([Choice.ACCEPT] * 3)

        result = Reconciler(prompter).reconcile(canonical, candidates)

        assert result.lines == ("x", "a", "c", "z")

    def test_quit_raises(self, scripted_prompter):
        prompter = scripted_prompter([Choice.ACCEPT, Choice.QUIT])

        with pytest.raises(SyncAborted):
            Reconciler(prompter).reconcile(
                _seq("a"), [_add("x", 1), _add("y", 1)]
            )


# ---------------------------------------------------------------------------
# Reconciler.collect_decisions -- block choices
# ---------------------------------------------------------------------------


class TestBlockChoices:
    """Block choices answer the rest of a same-kind run."""

    def test_accept_block_until_kind_changes(self, scripted_prompter):
        candidates = [_add("p", 0), _add("q", 0), _rem("r", 0), _add("s", 1)]
        prompter = scripted_prompter(
            [Choice.ACCEPT_BLOCK, Choice.REJECT, Choice.ACCEPT]
        )

        decisions = Reconciler(prompter).collect_decisions(candidates)

        assert decisions == [True, True, False, True]
        assert [c.line for c in prompter.asked] == ["p", "r", "s"]

    def test_reject_block(self, scripted_prompter):
        candidates = [_rem("a", 0), _rem("b", 1), _rem("c", 2)]
        prompter = scripted_prompter([Choice.REJECT_BLOCK])

        decisions = Reconciler(prompter).collect_decisions(candidates)

        assert decisions == [False, False, False]
        assert len(prompter.asked) == 1

    def test_block_ends_at_other_kind(self, scripted_prompter):
        candidates = [_rem("a", 0), _add("b", 1), _rem("c", 1)]
        prompter = scripted_prompter(
            [Choice.ACCEPT_BLOCK, Choice.REJECT, Choice.REJECT]
        )

        decisions = Reconciler(prompter).collect_decisions(candidates)

        assert decisions == [True, False, False]
        assert len(prompter.asked) == 3

    def test_empty(self, scripted_prompter):
        assert Reconciler(scripted_prompter()).collect_decisions([]) == []


# ---------------------------------------------------------------------------
# propagate
# ---------------------------------------------------------------------------


class TestPropagate:
    """Tests for propagate()."""

    def test_identical_location_not_proposed(self, scripted_prompter):
        canonical = _seq("a", "b")
        prompter = scripted_prompter()

        approved = propagate(canonical, [("same", _seq("a", "b"))], prompter)

        assert approved == set()
        assert prompter.questions == []

    def test_differing_locations_asked_in_order(self, scripted_prompter):
        canonical = _seq("a")
        prompter = scripted_prompter(confirms=[True, False])

        approved = propagate(
            canonical,
            [
                ("l1", _seq("b")),
                ("same", _seq("a")),
                ("l2", LineSequence.empty()),
            ],
            prompter,
        )

        assert approved == {"l1"}
        assert [q for q, _ in prompter.questions] == [
            "Overwrite l1?",
            "Overwrite l2?",
        ]

    def test_preview_is_unified_diff(self, scripted_prompter):
        prompter = scripted_prompter(confirms=[False])

        propagate(_seq("new"), [("loc", _seq("old"))], prompter)

        _, preview = prompter.questions[0]
        assert "-old" in preview
        assert "+new" in preview
