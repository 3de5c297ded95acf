"""Read-only grid snapshot of a worksheet.

The rule engine never touches openpyxl objects directly. A worksheet is
rendered once into a dense rectangle of text values and every later step
works against that snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from openpyxl.worksheet.worksheet import Worksheet


class Extent(NamedTuple):
    """Region of the grid the engine inspects (1-based, inclusive)."""

    max_row: int
    max_column: int


def cell_to_text(value: Any) -> str:
    """Render a raw cell value the way the instruments' exports display it.

    Args:
        value: Raw value as returned by openpyxl (``data_only=True``)

    Returns:
        Text form of the value, ``""`` for empty cells
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return f"{value:.0f}"
        return str(value)
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


class Grid:
    """Immutable ``height x width`` rectangle of cell text.

    Rows and columns are 1-based in the public API. ``get`` follows
    spreadsheet semantics (anything outside the sheet is blank) while
    ``cell`` is strict and raises for out-of-range coordinates.
    """

    __slots__ = ("_rows", "_height", "_width")

    def __init__(self, rows: Sequence[Sequence[str]], width: int | None = None):
        if width is None:
            width = max((len(row) for row in rows), default=0)
        self._height = len(rows)
        self._width = width
        self._rows: tuple[tuple[str, ...], ...] = tuple(
            tuple(row) + ("",) * (width - len(row)) for row in rows
        )

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Any]]) -> "Grid":
        """Build a grid from raw values, padding ragged rows with blanks."""
        return cls([[cell_to_text(value) for value in row] for row in rows])

    @classmethod
    def from_worksheet(cls, ws: "Worksheet") -> "Grid":
        """Snapshot an openpyxl worksheet's values.

        The worksheet should come from a workbook loaded with
        ``data_only=True`` so formula cells contribute their cached values.
        """
        if ws.max_row == 1 and ws.max_column == 1 and ws.cell(row=1, column=1).value is None:
            return cls([], width=0)
        rows = ws.iter_rows(
            min_row=1,
            max_row=ws.max_row,
            min_col=1,
            max_col=ws.max_column,
            values_only=True,
        )
        return cls.from_rows(rows)

    @property
    def height(self) -> int:
        return self._height

    @property
    def width(self) -> int:
        return self._width

    def size(self) -> tuple[int, int]:
        """Return ``(height, width)``."""
        return self._height, self._width

    def get(self, row: int, column: int) -> str:
        """Return the text at a 1-based position, ``""`` when out of range."""
        if 1 <= row <= self._height and 1 <= column <= self._width:
            return self._rows[row - 1][column - 1]
        return ""

    def cell(self, row: int, column: int) -> str:
        """Return the text at a 1-based position.

        Raises:
            IndexError: If the position lies outside the grid.
        """
        if not (1 <= row <= self._height and 1 <= column <= self._width):
            raise IndexError(
                f"Cell ({row}, {column}) outside grid of size {self._height}x{self._width}"
            )
        return self._rows[row - 1][column - 1]

    def row(self, row: int) -> tuple[str, ...]:
        """Return a full 1-based row (strict)."""
        if not 1 <= row <= self._height:
            raise IndexError(f"Row {row} outside grid of height {self._height}")
        return self._rows[row - 1]

    def occupied_extent(self) -> Extent:
        """Compute the region the rule engine scans.

        ``max_column`` is the furthest last-non-empty column over all rows.
        When nothing is filled in it falls back to the grid width. Rows are
        never trimmed: ``max_row`` is always the grid height.
        """
        max_column = 0
        for values in self._rows:
            for index in range(len(values), 0, -1):
                if values[index - 1] != "":
                    max_column = max(max_column, index)
                    break
        if max_column == 0:
            max_column = self._width
        return Extent(self._height, max_column)

    def __repr__(self) -> str:
        return f"Grid(height={self._height}, width={self._width})"
