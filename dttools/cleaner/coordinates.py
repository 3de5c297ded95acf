"""Conversion between 1-based (row, column) pairs and A1-style addresses."""

from __future__ import annotations

from openpyxl.utils.cell import column_index_from_string, coordinate_from_string, get_column_letter
from openpyxl.utils.exceptions import CellCoordinatesException


def column_number_to_name(column: int) -> str:
    """Convert a 1-based column number to its letter name.

    Bijective base-26 with no zero digit: 1 -> "A", 26 -> "Z", 27 -> "AA".

    Raises:
        ValueError: If ``column`` is zero or negative.
    """
    if column <= 0:
        raise ValueError(f"Column number must be positive, got {column}")
    return get_column_letter(column)


def column_name_to_number(name: str) -> int:
    """Convert a column letter name back to its 1-based number.

    Raises:
        ValueError: If ``name`` is empty or contains non A-Z characters.
    """
    # openpyxl also accepts lowercase names
    if not name or not name.isascii() or not name.isalpha() or not name.isupper():
        raise ValueError(f"Invalid column name: {name!r}")
    return column_index_from_string(name)


def to_address(column: int, row: int) -> str:
    """Build an A1 address, e.g. ``to_address(28, 4) == "AB4"``."""
    if row <= 0:
        raise ValueError(f"Row number must be positive, got {row}")
    return f"{column_number_to_name(column)}{row}"


def parse_address(address: str) -> tuple[int, int]:
    """Split an A1 address into ``(column, row)``.

    Only plain relative addresses are accepted (no ``$`` anchors, no sheet
    prefix).
    """
    text = address.strip().upper()
    if "$" in text:
        raise ValueError(f"Invalid cell address: {address!r}")

    try:
        letters, row = coordinate_from_string(text)
    except (CellCoordinatesException, ValueError) as e:
        raise ValueError(f"Invalid cell address: {address!r}") from e
    return column_name_to_number(letters), row
