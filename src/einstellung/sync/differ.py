"""Line-level diff between two line sequences.

Lines shared at the start and at the end are matched first; only the
window between them goes through a longest-common-subsequence alignment,
so a small edit in a large file stays cheap.  The LCS table is filled from
the end so that a single forward walk can pick the earliest available
match at every step:

* equal lines are always matched (an LCS through them always exists);
* otherwise the walk removes from *base* when that keeps the alignment
  optimal, and adds from *other* only when it must.

The result is deterministic for identical inputs, which the aggregator
relies on for deduplication.
"""

from __future__ import annotations

from collections.abc import Sequence

from einstellung.sync.models import (
    ChangeCandidate,
    ChangeKind,
    LineSequence,
)


def _lcs_table(base: Sequence[str], other: Sequence[str]) -> list[list[int]]:
    """Return ``table[i][j]`` = LCS length of ``base[i:]`` and ``other[j:]``."""
    n, m = len(base), len(other)
    table = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(n - 1, -1, -1):
        row, below = table[i], table[i + 1]
        for j in range(m - 1, -1, -1):
            if base[i] == other[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = max(below[j], row[j + 1])
    return table


def diff(
    base: LineSequence,
    other: LineSequence,
    source: str | None = None,
) -> list[ChangeCandidate]:
    """Compute the changes that turn *base* into *other*.

    Args:
        base: The canonical sequence.
        other: The sequence found at a search location.
        source: Optional location name recorded on every candidate.

    Returns:
        Removals and additions in walk order.  Removals carry the index of
        the removed base line; additions carry the base index they are
        inserted before.  Empty when the sequences are equal.
    """
    if base == other:
        return []

    sources = (source,) if source is not None else ()

    # Common prefix and suffix need no table.
    start = 0
    limit = min(len(base), len(other))
    while start < limit and base[start] == other[start]:
        start += 1

    tail = 0
    limit -= start
    while tail < limit and base[-1 - tail] == other[-1 - tail]:
        tail += 1

    base_rest = base.lines[start : len(base) - tail]
    other_rest = other.lines[start : len(other) - tail]
    table = _lcs_table(base_rest, other_rest)

    changes: list[ChangeCandidate] = []
    i = j = 0
    n, m = len(base_rest), len(other_rest)
    while i < n or j < m:
        if i < n and j < m and base_rest[i] == other_rest[j]:
            i += 1
            j += 1
        elif j >= m or (i < n and table[i + 1][j] >= table[i][j + 1]):
            changes.append(
                ChangeCandidate(
                    kind=ChangeKind.REMOVAL,
                    line=base_rest[i],
                    positions=(start + i,),
                    sources=sources,
                )
            )
            i += 1
        else:
            changes.append(
                ChangeCandidate(
                    kind=ChangeKind.ADDITION,
                    line=other_rest[j],
                    positions=(start + i,),
                    sources=sources,
                )
            )
            j += 1
    return changes


def apply_changes(
    base: LineSequence, changes: Sequence[ChangeCandidate]
) -> LineSequence:
    """Apply *changes* to *base* by a single walk over its lines.

    Additions positioned at index ``k`` are emitted, in the given order,
    before base line ``k``; base line ``k`` is dropped when a removal
    targets it.  Additions at ``len(base)`` land at the end.  Only the
    primary position of an addition is used; removals drop every position
    they carry.

    Returns:
        A new sequence using *base*'s line style.
    """
    removed: set[int] = set()
    inserts: dict[int, list[str]] = {}
    for change in changes:
        if change.kind is ChangeKind.REMOVAL:
            removed.update(change.positions)
        else:
            inserts.setdefault(change.position, []).append(change.line)

    lines: list[str] = []
    for index, line in enumerate(base):
        lines.extend(inserts.pop(index, ()))
        if index not in removed:
            lines.append(line)
    # Anything left is anchored at or past the end.
    for index in sorted(inserts):
        lines.extend(inserts[index])
    return base.with_lines(lines)
