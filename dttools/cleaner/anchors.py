"""Anchor cells that gate the sentinel rewrite.

Row 3 of an instrument export carries the factor code for each column. A few
of those codes are read once before the scan and handed to the rule engine
by address name ("I3", "K3", ...).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from dttools.cleaner.coordinates import to_address
from dttools.cleaner.grid import Grid

ANCHOR_ROW = 3

# I, K, Q and AY
ANCHOR_COLUMNS: tuple[int, ...] = (9, 11, 17, 51)

DEFAULT_ANCHOR_CELLS: tuple[tuple[int, int], ...] = tuple(
    (ANCHOR_ROW, column) for column in ANCHOR_COLUMNS
)


def resolve_anchors(
    grid: Grid,
    cells: Iterable[tuple[int, int]] = DEFAULT_ANCHOR_CELLS,
) -> Mapping[str, str]:
    """Read the anchor cells from ``grid``.

    Args:
        grid: Snapshot of the sheet being processed
        cells: ``(row, column)`` positions to read, 1-based

    Returns:
        Read-only mapping of A1 address to cell text. Cells outside the
        grid resolve to ``""``.
    """
    return MappingProxyType(
        {to_address(column, row): grid.get(row, column) for row, column in cells}
    )
