"""Data contracts for the synchronization engine.

- ``LineSequence``: immutable file content split into lines.
- ``Entry``: one canonical file and its search locations.
- ``ChangeKind`` / ``ChangeCandidate``: a proposed line-level change.
- ``Choice``: an answer returned by the interactive prompt surface.
- ``SyncAction`` / ``SyncResult`` / ``SyncReport``: run outcome.

Pydantic models are frozen (immutable).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class LineSequence:
    """Ordered, immutable sequence of text lines.

    Lines are stored without their terminators.  Two sequences are equal
    iff they hold the same lines in the same order; ``newline`` and
    ``final_newline`` only affect rendering.

    Attributes:
        lines: The line contents.
        newline: Terminator used by ``to_text()``.
        final_newline: Whether ``to_text()`` ends with a terminator.
    """

    lines: tuple[str, ...] = ()
    newline: str = field(default="\n", compare=False)
    final_newline: bool = field(default=True, compare=False)

    @classmethod
    def from_text(cls, text: str) -> LineSequence:
        """Split *text* on line-terminator boundaries.

        The first terminator found becomes the rendering terminator.
        """
        if not text:
            return cls()
        match = _LINE_BREAK.search(text)
        newline = match.group(0) if match else "\n"
        final_newline = text.endswith(("\n", "\r"))
        lines = _LINE_BREAK.split(text)
        if final_newline:
            lines.pop()
        return cls(tuple(lines), newline, final_newline)

    @classmethod
    def from_lines(cls, lines) -> LineSequence:
        return cls(tuple(lines))

    @classmethod
    def empty(cls) -> LineSequence:
        """Content of a file that does not exist."""
        return cls()

    def with_lines(self, lines) -> LineSequence:
        """Return a new sequence with *lines* and this sequence's line style."""
        return LineSequence(tuple(lines), self.newline, self.final_newline)

    def to_text(self) -> str:
        if not self.lines:
            return ""
        text = self.newline.join(self.lines)
        if self.final_newline:
            text += self.newline
        return text

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index):
        return self.lines[index]

    def __iter__(self):
        return iter(self.lines)


class Entry(BaseModel):
    """One synchronization unit from the manifest.

    Attributes:
        canonical: Path of the canonical file.
        locations: Search-location paths in manifest order.
    """

    canonical: str
    locations: tuple[str, ...] = ()

    model_config = {"frozen": True}


class ChangeKind(str, Enum):
    """Kind of a line-level change."""

    REMOVAL = "removal"
    ADDITION = "addition"

    @property
    def prefix(self) -> str:
        return "-" if self is ChangeKind.REMOVAL else "+"


class ChangeCandidate(BaseModel):
    """A proposed line-level change relative to the canonical sequence.

    ``(kind, line)`` identifies the candidate; positions are hints.  For a
    removal a position is the index of the removed canonical line.  For an
    addition it is the canonical index the line is inserted before, where
    ``len(canonical)`` means the end of the file.

    Attributes:
        kind: Addition or removal.
        line: Line content without terminator.
        positions: Position hints, ascending; the first is the primary one.
        sources: Locations that proposed this change, in manifest order.
    """

    kind: ChangeKind
    line: str
    positions: tuple[int, ...]
    sources: tuple[str, ...] = ()

    model_config = {"frozen": True}

    @property
    def position(self) -> int:
        """Primary position hint, used for ordering and insertion."""
        return self.positions[0]

    @property
    def identity(self) -> tuple[ChangeKind, str]:
        return (self.kind, self.line)


class Choice(str, Enum):
    """Answer given for a change candidate."""

    ACCEPT = "accept"
    REJECT = "reject"
    ACCEPT_BLOCK = "accept_block"
    REJECT_BLOCK = "reject_block"
    QUIT = "quit"


class SyncMode(str, Enum):
    """Direction of a synchronization run."""

    READ = "read"
    WRITE = "write"


class SyncAction(str, Enum):
    """Outcome of processing one canonical file or location."""

    SKIP = "skip"
    UPDATE = "update"
    OVERWRITE = "overwrite"
    DECLINED = "declined"


class SyncResult(BaseModel):
    """Result for one canonical file (read mode) or location (write mode).

    Attributes:
        canonical: Canonical file path of the entry.
        location: Location path in write mode, ``None`` in read mode.
        action: What was (or would be) done.
        success: Whether the operation succeeded.
        changes: Number of candidates reviewed (read) or 1 per overwrite.
        error: Error message if the operation failed.
    """

    canonical: str
    location: str | None = None
    action: SyncAction
    success: bool
    changes: int = 0
    error: str | None = None

    model_config = {"frozen": True}

    @property
    def target(self) -> str:
        """Path written (or considered) by this result."""
        return self.location or self.canonical


class SyncReport(BaseModel):
    """Aggregate report for a synchronization run.

    Attributes:
        mode: Read or write.
        dry_run: Whether this was a dry-run (no prompts, no writes).
        results: Individual results in processing order.
        started_at: ISO 8601 timestamp when the run started.
        completed_at: ISO 8601 timestamp when the run completed.
    """

    mode: SyncMode
    dry_run: bool = False
    results: list[SyncResult] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def updated(self) -> list[SyncResult]:
        """Successful canonical updates and location overwrites."""
        return [
            r
            for r in self.results
            if r.success
            and r.action in (SyncAction.UPDATE, SyncAction.OVERWRITE)
        ]

    @property
    def declined(self) -> list[SyncResult]:
        return [
            r for r in self.results if r.action == SyncAction.DECLINED
        ]

    @property
    def skipped(self) -> list[SyncResult]:
        return [
            r
            for r in self.results
            if r.success and r.action == SyncAction.SKIP
        ]

    @property
    def errors(self) -> list[SyncResult]:
        return [r for r in self.results if not r.success]
