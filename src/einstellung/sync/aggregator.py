"""Merge per-location diffs into one ordered list of distinct changes.

A change proposed by several locations is reviewed once.  Identity is
``(kind, line)``; the surviving candidate collects every proposing
location and every position hint.

Ordering is stable and deterministic:

1. primary position relative to the canonical sequence;
2. removals before additions at the same position;
3. manifest order of the first proposing location;
4. diff order within that location.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from einstellung.sync.differ import diff
from einstellung.sync.models import (
    ChangeCandidate,
    ChangeKind,
    LineSequence,
)

logger = logging.getLogger(__name__)

_KIND_RANK = {ChangeKind.REMOVAL: 0, ChangeKind.ADDITION: 1}


def aggregate(
    canonical: LineSequence,
    candidates_per_location: Sequence[tuple[str, LineSequence]],
) -> list[ChangeCandidate]:
    """Diff every location against *canonical* and deduplicate the result.

    Args:
        canonical: The canonical sequence.
        candidates_per_location: ``(location, content)`` pairs in manifest
            order.

    Returns:
        Unique change candidates, ordered for top-to-bottom review.
    """
    merged: dict[tuple[ChangeKind, str], ChangeCandidate] = {}

    for location, content in candidates_per_location:
        changes = diff(canonical, content, source=location)
        logger.debug("%d change(s) from %s", len(changes), location)
        for change in changes:
            existing = merged.get(change.identity)
            if existing is None:
                merged[change.identity] = change
                continue
            sources = existing.sources
            if location not in sources:
                sources = sources + (location,)
            merged[change.identity] = ChangeCandidate(
                kind=existing.kind,
                line=existing.line,
                positions=tuple(
                    sorted(set(existing.positions + change.positions))
                ),
                sources=sources,
            )

    # dict order is first-seen order (location, then diff order); the sort
    # is stable so it survives as the tie-breaker.
    return sorted(
        merged.values(),
        key=lambda c: (c.position, _KIND_RANK[c.kind]),
    )
