"""Build the sparse set of cells the rule engine changed."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TypeAlias

from dttools.cleaner.anchors import resolve_anchors
from dttools.cleaner.grid import Grid
from dttools.cleaner.rules import CellResult, RuleEngine

logger = logging.getLogger(__name__)

ChangeSet: TypeAlias = dict[tuple[int, int], CellResult]


def build_change_set(
    grid: Grid,
    engine: RuleEngine | None = None,
    anchors: Mapping[str, str] | None = None,
) -> ChangeSet:
    """Run the rule engine over the occupied extent of ``grid``.

    Only cells whose value changed are kept. Writing untouched cells back
    would reset their formatting in the output workbook.

    Args:
        grid: Snapshot of the sheet
        engine: Rule engine to use (default rule table when omitted)
        anchors: Anchor context; resolved from ``grid`` when omitted

    Returns:
        Mapping of ``(row, column)`` (1-based) to CellResult
    """
    engine = engine or RuleEngine()
    if anchors is None:
        anchors = resolve_anchors(grid)

    max_row, max_column = grid.occupied_extent()
    changes: ChangeSet = {}

    for row in range(1, max_row + 1):
        for column in range(1, max_column + 1):
            result = engine.transform(row, column, grid.get(row, column), anchors)
            if result.changed:
                changes[(row, column)] = result

    logger.debug(
        "Scanned rows=%d columns=%d changed=%d", max_row, max_column, len(changes)
    )
    return changes


def highlighted_cells(changes: ChangeSet) -> int:
    """Count entries flagged for highlighting."""
    return sum(1 for result in changes.values() if result.highlight)
