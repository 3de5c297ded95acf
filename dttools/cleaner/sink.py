"""Apply a change set to an openpyxl workbook and persist it.

The sink owns no transformation logic. It renames sheets, writes cell text
by A1 address, paints highlight fills and saves the result atomically.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from openpyxl.styles import PatternFill

from dttools.cleaner.change_set import ChangeSet
from dttools.cleaner.coordinates import to_address
from dttools.cleaner.errors import PersistError, SheetMissingError

if TYPE_CHECKING:
    from openpyxl import Workbook
    from openpyxl.worksheet.worksheet import Worksheet

logger = logging.getLogger(__name__)

# Instrument sheet names as exported -> names expected downstream
SHEET_RENAMES: Mapping[str, str] = {
    "甲烷非甲烷分析仪": "NMHC监测仪",
    "VOCs在线监测仪": "VOCs监测仪",
}


@dataclass(frozen=True)
class HighlightStyle:
    """Solid fill colour (ARGB hex) used to flag a cell."""

    color: str = "FFFF0000"

    def fill(self) -> PatternFill:
        return PatternFill(fill_type="solid", start_color=self.color, end_color=self.color)


def rename_sheets(wb: "Workbook", renames: Mapping[str, str] = SHEET_RENAMES) -> dict[str, str]:
    """Rename every sheet listed in ``renames`` that exists in ``wb``.

    Returns:
        The renames that were actually applied (old name -> resulting title).
    """
    applied: dict[str, str] = {}
    for old_name, new_name in renames.items():
        if old_name not in wb.sheetnames:
            continue
        ws = wb[old_name]
        # openpyxl suffixes the title if another sheet already has it
        ws.title = new_name
        applied[old_name] = ws.title
        logger.info("Renamed sheet '%s' to '%s'", old_name, ws.title)
    return applied


def get_sheet(wb: "Workbook", name: str) -> "Worksheet":
    """Return sheet ``name``.

    Raises:
        SheetMissingError: If the workbook has no sheet by that name.
    """
    if name not in wb.sheetnames:
        raise SheetMissingError(
            message="Sheet not found",
            detail=f"'{name}' (available: {', '.join(wb.sheetnames)})",
        )
    return wb[name]


def get_or_create_sheet(wb: "Workbook", name: str) -> "Worksheet":
    """Return sheet ``name``, creating it at the end of the workbook if absent."""
    if name in wb.sheetnames:
        return wb[name]
    return wb.create_sheet(title=name)


def set_text(ws: "Worksheet", address: str, text: str) -> None:
    """Write ``text`` into ``address``. Empty text clears the cell."""
    ws[address].value = text if text != "" else None


def set_fill(ws: "Worksheet", address: str, style: HighlightStyle) -> None:
    ws[address].fill = style.fill()


def apply_change_set(
    ws: "Worksheet",
    changes: ChangeSet,
    highlight: HighlightStyle = HighlightStyle(),
) -> int:
    """Write every change into ``ws``.

    Args:
        ws: Target worksheet, mutated in place
        changes: Change set keyed by 1-based ``(row, column)``
        highlight: Fill used for cells flagged by the engine

    Returns:
        Number of cells written.
    """
    for (row, column), result in changes.items():
        address = to_address(column, row)
        set_text(ws, address, result.new_value)
        if result.highlight:
            set_fill(ws, address, highlight)
    return len(changes)


def save_workbook(wb: "Workbook", output_path: Path) -> Path:
    """Persist ``wb`` to ``output_path`` atomically.

    The workbook is written to a temporary file next to the target and
    moved into place, so a failed save never leaves a partial file behind.

    Raises:
        PersistError: If the file cannot be written.
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.stem}.",
            suffix=output_path.suffix,
            dir=str(output_path.parent),
        )
        os.close(fd)
    except OSError as e:
        raise PersistError(message="Cannot save file", detail=f"{output_path}: {e}") from e

    temp_path = Path(tmp_name)
    try:
        wb.save(temp_path)
        os.replace(temp_path, output_path)
    except Exception as e:
        raise PersistError(message="Cannot save file", detail=f"{output_path}: {e}") from e
    finally:
        if temp_path.exists():
            temp_path.unlink()

    logger.info("Saved workbook to %s", output_path)
    return output_path


def workbook_to_bytes(wb: "Workbook") -> bytes:
    """Serialize ``wb`` in memory (used for HTTP responses)."""
    buffer = io.BytesIO()
    try:
        wb.save(buffer)
    except Exception as e:
        raise PersistError(message="Cannot serialize workbook", detail=str(e)) from e
    return buffer.getvalue()
