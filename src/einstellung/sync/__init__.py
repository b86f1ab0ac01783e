"""Multi-way line-level synchronization engine.

Compares one canonical file against every copy of it listed in the
manifest and reconciles them interactively.

Modules:

- ``models``     -- ``LineSequence``, ``Entry``, ``ChangeCandidate``,
  ``Choice``, ``SyncResult``, ``SyncReport``: core data contracts.
- ``differ``     -- LCS line diff and functional change application.
- ``aggregator`` -- merges per-location diffs into unique candidates.
- ``reconciler`` -- ``Prompter`` protocol, read-mode ``Reconciler`` and
  write-mode ``propagate``.
- ``engine``     -- ``SyncEngine``: runs a mode over all entries.
- ``reporter``   -- human-readable and JSON report formatting.

Usage example
-------------
::

    from pathlib import Path
    from einstellung.manifest import load_manifest
    from einstellung.prompt import TerminalPrompter
    from einstellung.sync import SyncEngine, SyncMode, format_sync_report

    engine = SyncEngine(
        load_manifest(Path(".einstellung")),
        TerminalPrompter(),
    )

    report = engine.run(SyncMode.READ)
    print(format_sync_report(report))
"""

from .aggregator import aggregate
from .differ import apply_changes, diff
from .engine import SyncEngine
from .models import (
    ChangeCandidate,
    ChangeKind,
    Choice,
    Entry,
    LineSequence,
    SyncAction,
    SyncMode,
    SyncReport,
    SyncResult,
)
from .reconciler import Prompter, Reconciler, propagate
from .reporter import (
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)

__all__ = [
    "ChangeCandidate",
    "ChangeKind",
    "Choice",
    "Entry",
    "LineSequence",
    "Prompter",
    "Reconciler",
    "SyncAction",
    "SyncEngine",
    "SyncMode",
    "SyncReport",
    "SyncResult",
    "aggregate",
    "apply_changes",
    "diff",
    "format_dry_run_preview",
    "format_sync_report",
    "propagate",
    "report_to_json",
]
