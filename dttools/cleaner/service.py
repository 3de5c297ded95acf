"""Workbook cleaning service.

Provides the WorkbookCleaner service and CleanerConfig dataclass for
configuring the cleaning pipeline, separating runtime config from app-level
settings.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from dttools.cleaner.anchors import resolve_anchors
from dttools.cleaner.change_set import ChangeSet, build_change_set, highlighted_cells
from dttools.cleaner.grid import Grid
from dttools.cleaner.rules import DEFAULT_RULES, Rule, RuleEngine
from dttools.cleaner.sink import (
    SHEET_RENAMES,
    HighlightStyle,
    apply_change_set,
    get_sheet,
    rename_sheets,
    save_workbook,
    workbook_to_bytes,
)
from dttools.cleaner.workbook import load_workbook_safe, output_filename, read_input_bytes
from dttools.core.config import settings

if TYPE_CHECKING:
    from openpyxl import Workbook

logger = logging.getLogger(__name__)


@dataclass
class CleanerConfig:
    """Configuration for the WorkbookCleaner service."""

    output_prefix: str = "processed_"
    highlight: HighlightStyle = field(default_factory=HighlightStyle)
    sheet_renames: Mapping[str, str] = field(default_factory=lambda: dict(SHEET_RENAMES))
    rules: tuple[Rule, ...] = DEFAULT_RULES

    @classmethod
    def from_settings(cls) -> "CleanerConfig":
        return cls(
            output_prefix=settings.output_prefix,
            highlight=HighlightStyle(color=settings.highlight_color),
        )


@dataclass
class CleanResult:
    """Summary of one cleaning run."""

    sheet_name: str
    source_sheet_name: str
    changes: ChangeSet
    renamed_sheets: dict[str, str]
    output_path: Path | None = None

    @property
    def changed_cells(self) -> int:
        return len(self.changes)

    @property
    def highlighted_cells(self) -> int:
        return highlighted_cells(self.changes)


class WorkbookCleaner:
    """Service running the rule engine over a workbook's active sheet.

    Usage:
        cleaner = WorkbookCleaner(CleanerConfig())
        result = cleaner.clean_file(Path("45vocs2.xlsx"))

    The source file is loaded twice: once with cached values for the grid
    snapshot and once in full for writing, so formulas and styles of
    untouched cells survive. The two are reconciled by the active sheet:
    the source by its original title, the sink by the worksheet object, so
    renames never redirect the writes.
    """

    def __init__(self, config: CleanerConfig | None = None):
        self.config = config or CleanerConfig()
        self._engine = RuleEngine(self.config.rules)

    def clean_file(self, input_path: Path, output_dir: Path | None = None) -> CleanResult:
        """Clean ``input_path`` and save the processed copy.

        The output is named ``<output_prefix><basename>`` and written to
        ``output_dir`` (the current working directory by default).
        """
        file_bytes = read_input_bytes(input_path)
        wb, result = self._clean(file_bytes)

        output_path = (output_dir or Path.cwd()) / output_filename(
            input_path.name, self.config.output_prefix
        )
        result.output_path = save_workbook(wb, output_path)
        return result

    def clean_bytes(self, file_bytes: bytes) -> tuple[CleanResult, bytes]:
        """Clean an in-memory workbook, returning the processed bytes."""
        wb, result = self._clean(file_bytes)
        return result, workbook_to_bytes(wb)

    def preview_bytes(self, file_bytes: bytes) -> CleanResult:
        """Compute the change set without producing a workbook."""
        _, result = self._clean(file_bytes)
        return result

    def _clean(self, file_bytes: bytes) -> tuple["Workbook", CleanResult]:
        sink = load_workbook_safe(file_bytes, data_only=False)
        source = load_workbook_safe(file_bytes, data_only=True)

        target = sink.active
        source_sheet_name = target.title
        renamed = rename_sheets(sink, self.config.sheet_renames)
        sheet_name = target.title

        grid = Grid.from_worksheet(get_sheet(source, source_sheet_name))
        anchors = resolve_anchors(grid)
        changes = build_change_set(grid, self._engine, anchors)

        apply_change_set(target, changes, self.config.highlight)

        result = CleanResult(
            sheet_name=sheet_name,
            source_sheet_name=source_sheet_name,
            changes=changes,
            renamed_sheets=renamed,
        )
        logger.info(
            "Cleaned sheet=%s rows=%d changed=%d highlighted=%d",
            sheet_name,
            grid.height,
            result.changed_cells,
            result.highlighted_cells,
        )
        return sink, result
