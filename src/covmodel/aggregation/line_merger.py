"""Fold a file's statement records into per-line coverage arrays."""

from __future__ import annotations

from typing import TYPE_CHECKING

from covmodel.models.coverage import NO_DATA, LineVisitStatus

if TYPE_CHECKING:
    from collections.abc import Iterable

    from covmodel.adapters.coverage.records import RawRecord, Statement


def merge_line_coverage(
    records: Iterable[RawRecord],
) -> tuple[list[int], list[LineVisitStatus]]:
    """Merge all statements of *records* into ``(coverage, line_status)``.

    Both lists are indexed by line number and sized ``max line + 1``; a file
    without statements yields two empty lists.  ``coverage`` starts at
    ``NO_DATA`` and saturates at 1, and a line is COVERED as soon as any
    statement for it was visited.  The result does not depend on the order
    of the statements.
    """
    statements: list[Statement] = sorted(
        (s for record in records for s in record.statements),
        key=lambda s: s.line,
    )
    if not statements:
        return [], []

    size = statements[-1].line + 1
    coverage = [NO_DATA] * size
    line_status = [LineVisitStatus.NOT_COVERED] * size

    for statement in statements:
        visits = 1 if statement.is_visited else 0
        current = coverage[statement.line]
        coverage[statement.line] = visits if current == NO_DATA else min(current + visits, 1)
        if statement.is_visited:
            line_status[statement.line] = LineVisitStatus.COVERED

    return coverage, line_status
