"""Synchronization engine that runs read or write mode over manifest entries.

For every entry the ``SyncEngine``:

1. Loads the canonical file and each search location (missing files read
   as empty content).
2. Read mode: aggregates the per-location diffs, lets the user review
   them, and saves the reconciled content once the user confirms.
3. Write mode: asks which differing locations to overwrite and writes the
   canonical content to each approved one.
4. Records a ``SyncResult`` per canonical file (read) or location (write).

Entries are processed one after another.  Errors are per-entry (reads)
or per-location (writes): a single failure does not abort the run.  A
``SyncAborted`` from the prompt surface does abort it, before anything of
the current entry has been written.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from einstellung.exceptions import SyncAborted
from einstellung.file_handler import read_text_or_none, write_file_atomic
from einstellung.sync.aggregator import aggregate
from einstellung.sync.models import (
    Entry,
    LineSequence,
    SyncAction,
    SyncMode,
    SyncReport,
    SyncResult,
)
from einstellung.sync.reconciler import Prompter, Reconciler, propagate
from einstellung.sync.reporter import format_overwrite_preview

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Loaded:
    """Content of one file as read from disk."""

    path: str
    content: LineSequence
    encoding: str
    missing: bool


class SyncEngine:
    """Run a synchronization pass over manifest entries.

    Args:
        entries: Entries in manifest order.
        prompter: Interactive surface used for every question.
        skip_missing: Ignore search locations that do not exist instead of
            treating them as empty files.
        diff_context: Context lines in overwrite and save previews.
    """

    def __init__(
        self,
        entries: Sequence[Entry],
        prompter: Prompter,
        skip_missing: bool = False,
        diff_context: int = 3,
    ) -> None:
        self.entries = list(entries)
        self.prompter = prompter
        self.skip_missing = skip_missing
        self.diff_context = diff_context
        self.reconciler = Reconciler(prompter)

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    def run(self, mode: SyncMode, dry_run: bool = False) -> SyncReport:
        """Process every entry in *mode*.

        Args:
            mode: ``SyncMode.READ`` or ``SyncMode.WRITE``.
            dry_run: If ``True``, compute what would be reviewed but do not
                prompt or write.

        Returns:
            A ``SyncReport`` summarising what was (or would be) done.

        Raises:
            SyncAborted: If the user quits during a review.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        results: list[SyncResult] = []

        for entry in self.entries:
            logger.info("Sync for %s", entry.canonical)
            try:
                if mode is SyncMode.READ:
                    results.append(self._read_entry(entry, dry_run))
                else:
                    results.extend(self._write_entry(entry, dry_run))
            except SyncAborted:
                raise
            except Exception as exc:
                logger.error(
                    "Error syncing %s: %s", entry.canonical, exc
                )
                results.append(
                    SyncResult(
                        canonical=entry.canonical,
                        action=SyncAction.SKIP,
                        success=False,
                        error=str(exc),
                    )
                )

        return SyncReport(
            mode=mode,
            dry_run=dry_run,
            results=results,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )

    # ------------------------------------------------------------------
    # Read mode
    # ------------------------------------------------------------------

    def _read_entry(self, entry: Entry, dry_run: bool) -> SyncResult:
        """Pull accepted changes from the locations into the canonical file."""
        canonical = self._load(entry.canonical)
        if canonical.missing:
            logger.info(
                "Canonical file %s not found, starting empty",
                entry.canonical,
            )
        locations = self._load_locations(entry)

        candidates = aggregate(
            canonical.content,
            [(loaded.path, loaded.content) for loaded in locations],
        )
        if not candidates:
            return SyncResult(
                canonical=entry.canonical,
                action=SyncAction.SKIP,
                success=True,
            )

        if dry_run:
            return SyncResult(
                canonical=entry.canonical,
                action=SyncAction.UPDATE,
                success=True,
                changes=len(candidates),
            )

        reconciled = self.reconciler.reconcile(canonical.content, candidates)
        if reconciled == canonical.content:
            return SyncResult(
                canonical=entry.canonical,
                action=SyncAction.DECLINED,
                success=True,
                changes=len(candidates),
            )

        preview = format_overwrite_preview(
            canonical.content,
            reconciled,
            entry.canonical,
            context=self.diff_context,
            labels=("current", "reconciled"),
        )
        if not self.prompter.confirm(f"Save {entry.canonical}?", preview):
            logger.info("Discarded reconciled %s", entry.canonical)
            return SyncResult(
                canonical=entry.canonical,
                action=SyncAction.DECLINED,
                success=True,
                changes=len(candidates),
            )

        error = self._save(entry.canonical, reconciled, canonical.encoding)
        return SyncResult(
            canonical=entry.canonical,
            action=SyncAction.UPDATE,
            success=error is None,
            changes=len(candidates),
            error=error,
        )

    # ------------------------------------------------------------------
    # Write mode
    # ------------------------------------------------------------------

    def _write_entry(self, entry: Entry, dry_run: bool) -> list[SyncResult]:
        """Push the canonical content out to approved locations."""
        canonical = self._load(entry.canonical)
        if canonical.missing:
            logger.warning(
                "Canonical file %s not found, treating it as empty",
                entry.canonical,
            )
        locations = self._load_locations(entry)
        pairs = [(loaded.path, loaded.content) for loaded in locations]

        if dry_run:
            return [
                SyncResult(
                    canonical=entry.canonical,
                    location=loaded.path,
                    action=(
                        SyncAction.SKIP
                        if loaded.content == canonical.content
                        else SyncAction.OVERWRITE
                    ),
                    success=True,
                )
                for loaded in locations
            ]

        approved = propagate(
            canonical.content,
            pairs,
            self.prompter,
            context=self.diff_context,
        )

        results: list[SyncResult] = []
        for loaded in locations:
            if loaded.content == canonical.content:
                action = SyncAction.SKIP
                error = None
            elif loaded.path in approved:
                action = SyncAction.OVERWRITE
                encoding = (
                    canonical.encoding if loaded.missing else loaded.encoding
                )
                error = self._save(loaded.path, canonical.content, encoding)
            else:
                action = SyncAction.DECLINED
                error = None
            results.append(
                SyncResult(
                    canonical=entry.canonical,
                    location=loaded.path,
                    action=action,
                    success=error is None,
                    changes=1 if action is SyncAction.OVERWRITE else 0,
                    error=error,
                )
            )
        return results

    # ------------------------------------------------------------------
    # I/O helpers
    # ------------------------------------------------------------------

    def _load(self, path: str) -> _Loaded:
        read = read_text_or_none(Path(path))
        if read is None:
            return _Loaded(path, LineSequence.empty(), "utf-8", True)
        text, encoding = read
        return _Loaded(path, LineSequence.from_text(text), encoding, False)

    def _load_locations(self, entry: Entry) -> list[_Loaded]:
        loaded: list[_Loaded] = []
        for location in entry.locations:
            item = self._load(location)
            if item.missing:
                if self.skip_missing:
                    logger.info("Not found %s, skipping", location)
                    continue
                logger.info("Not found %s, treating it as empty", location)
            else:
                logger.info("Compare with %s", location)
            loaded.append(item)
        return loaded

    def _save(
        self, path: str, content: LineSequence, encoding: str
    ) -> str | None:
        """Write *content* to *path*; return an error message on failure."""
        try:
            write_file_atomic(Path(path), content.to_text(), encoding)
        except (OSError, UnicodeEncodeError) as exc:
            logger.error("Could not save %s: %s", path, exc)
            return str(exc)
        logger.info("Saved %s", path)
        return None
