"""Interactive reconciliation for read and write mode.

- ``Prompter``: protocol of the interactive surface (``ask`` / ``confirm``).
- ``Reconciler``: read mode; collects one decision per change candidate and
  rebuilds the canonical sequence from the accepted ones.
- ``propagate``: write mode; asks which differing locations to overwrite.

Nothing in this module touches the filesystem.  Writes are left to the
engine so that an aborted session never leaves a partial result on disk.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from einstellung.exceptions import SyncAborted
from einstellung.sync.differ import apply_changes
from einstellung.sync.models import (
    ChangeCandidate,
    ChangeKind,
    Choice,
    LineSequence,
)
from einstellung.sync.reporter import format_overwrite_preview

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


class Prompter(Protocol):
    """Synchronous oracle that answers reconciliation questions."""

    def ask(
        self, candidate: ChangeCandidate, index: int, total: int
    ) -> Choice | None:
        """Ask whether to apply *candidate*.

        Args:
            candidate: The change under review.
            index: Zero-based position of the candidate in the review.
            total: Number of candidates in the review.

        Returns:
            The user's choice, or ``None`` when no choice was made.
        """
        ...  # pragma: no cover

    def confirm(self, question: str, preview: str) -> bool:
        """Ask a yes/no question after showing *preview*."""
        ...  # pragma: no cover


# ---------------------------------------------------------------------------
# Read mode
# ---------------------------------------------------------------------------


class Reconciler:
    """Drive the user through change candidates and apply the accepted ones.

    Block choices (``ACCEPT_BLOCK`` / ``REJECT_BLOCK``) answer the current
    candidate and every following candidate of the same kind without
    asking, until a candidate of the other kind comes up.
    """

    def __init__(self, prompter: Prompter) -> None:
        self.prompter = prompter

    def collect_decisions(
        self, candidates: Sequence[ChangeCandidate]
    ) -> list[bool]:
        """Return one accept/reject decision per candidate, in order.

        Raises:
            SyncAborted: If the user chose to quit.
        """
        decisions: list[bool] = []
        block: tuple[ChangeKind, bool] | None = None
        total = len(candidates)

        for index, candidate in enumerate(candidates):
            if block is not None and block[0] is candidate.kind:
                decisions.append(block[1])
                continue
            block = None

            choice = self.prompter.ask(candidate, index, total)
            if choice is None:
                logger.debug(
                    "No choice for %s %r, treating as rejected",
                    candidate.kind.value,
                    candidate.line,
                )
                decisions.append(False)
            elif choice is Choice.QUIT:
                raise SyncAborted("Review aborted by user")
            elif choice is Choice.ACCEPT:
                decisions.append(True)
            elif choice is Choice.REJECT:
                decisions.append(False)
            else:
                accepted = choice is Choice.ACCEPT_BLOCK
                block = (candidate.kind, accepted)
                decisions.append(accepted)

        return decisions

    def reconcile(
        self,
        canonical: LineSequence,
        candidates: Sequence[ChangeCandidate],
    ) -> LineSequence:
        """Review *candidates* and build the reconciled sequence.

        Returns:
            A new sequence; *canonical* itself when nothing was accepted.
        """
        decisions = self.collect_decisions(candidates)
        accepted = [
            c for c, ok in zip(candidates, decisions, strict=True) if ok
        ]
        logger.info(
            "Accepted %d of %d change(s)", len(accepted), len(candidates)
        )
        if not accepted:
            return canonical
        return apply_changes(canonical, accepted)


# ---------------------------------------------------------------------------
# Write mode
# ---------------------------------------------------------------------------


def propagate(
    canonical: LineSequence,
    locations: Sequence[tuple[str, LineSequence]],
    prompter: Prompter,
    context: int = 3,
) -> set[str]:
    """Ask which locations should be overwritten with *canonical*.

    Locations whose content already equals *canonical* are skipped without
    a prompt.

    Args:
        canonical: The canonical sequence.
        locations: ``(location, content)`` pairs in manifest order.
        prompter: Interactive surface.
        context: Context lines in the preview diff.

    Returns:
        The locations the user approved.
    """
    approved: set[str] = set()
    for location, content in locations:
        if content == canonical:
            logger.debug("%s already matches canonical", location)
            continue
        preview = format_overwrite_preview(
            content, canonical, location, context=context
        )
        if prompter.confirm(f"Overwrite {location}?", preview):
            approved.add(location)
    return approved
