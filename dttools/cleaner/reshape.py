"""Reshape an ion chromatography export into the platform upload layout.

The source sheet has one header row (``时间`` plus one column per ion) and one
measurement per row. The output is a fresh workbook with a fixed five-row
header block followed by one row per timestamp.

Key functions:
- map_headers: Locate required columns by exact header title
- extract_records: Pull normalized time and valid ion values per row
- build_export_workbook: Lay the records out in the upload template
- ProtonReshaper: Orchestrates the above for files and uploads
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from openpyxl import Workbook

from dttools.cleaner.coordinates import to_address
from dttools.cleaner.errors import InputNotFoundError, MalformedContentError, SheetMissingError
from dttools.cleaner.grid import Grid
from dttools.cleaner.sink import HighlightStyle, save_workbook, set_fill, set_text, workbook_to_bytes
from dttools.cleaner.timestamps import normalize_timestamp
from dttools.cleaner.workbook import load_workbook_safe, output_filename, read_input_bytes
from dttools.core.config import settings

logger = logging.getLogger(__name__)

TIME_HEADER = "时间"

ION_HEADERS: tuple[str, ...] = (
    "NO₃⁻(μg/m³)",
    "SO₄²⁻(μg/m³)",
    "NH₄⁺(μg/m³)",
    "Cl⁻(μg/m³)",
    "K⁺(μg/m³)",
    "Na⁺(μg/m³)",
    "Mg²⁺(μg/m³)",
    "Ca²⁺(μg/m³)",
)

# Quality-flagged measurements, e.g. "1.2(C)" or "(RM)"
QUALITY_FLAG_PATTERN = re.compile(r"\((C|RM)\)")

WARNING_TEXT = "橙色和红色部分请勿改动！！！"
MISSING_STATION_TEXT = "请参考 proton_config.example.txt 创建配置文件 proton_config.txt"

SPECIES_ROW: tuple[str, ...] = (
    "离子色谱", "SO₂", "HNO₃", "HNO₂", "HCl", "NH₃", "NO₃⁻", "SO₄²⁻",
    "NH₄⁺", "Cl⁻", "K⁺", "Na⁺", "Mg²⁺", "Ca²⁺", "NO₂⁻",
)

FACTOR_CODE_ROW: tuple[str, ...] = (
    "4401000010003", "a21026", "a21511", "a21510", "a21024", "a21001",
    "a06006", "a06005", "a06009", "a06008", "a06013", "a06012",
    "a06011", "a06010", "a06019",
)

UNIT_ROW: tuple[str, ...] = (TIME_HEADER,) + ("μg/m³",) * 14

FIRST_DATA_ROW = 6
# NO₃⁻ sits in column G of the template; the eight ions are contiguous
FIRST_ION_COLUMN = 7


@dataclass(frozen=True)
class IonRecord:
    """One output row: a timestamp and the eight ion values (None if absent)."""

    time: str
    values: tuple[str | None, ...]


def map_headers(grid: Grid, required: Sequence[str]) -> dict[str, int]:
    """Map required header titles (row 1) to 1-based column numbers.

    Titles are compared after trimming surrounding whitespace; no fuzzy
    matching is attempted.

    Raises:
        MalformedContentError: If any required title is absent.
    """
    lookup: dict[str, int] = {}
    for column in range(1, grid.width + 1):
        header = grid.get(1, column).strip()
        if header:
            lookup[header] = column

    mapping: dict[str, int] = {}
    for title in required:
        if title not in lookup:
            raise MalformedContentError(
                message="Required column not found",
                detail=f"'{title}'",
            )
        mapping[title] = lookup[title]
    return mapping


def is_valid_measurement(value: str) -> bool:
    """True for a non-empty, unflagged, numeric measurement."""
    value = value.strip()
    if not value or QUALITY_FLAG_PATTERN.search(value):
        return False
    try:
        float(value)
    except ValueError:
        return False
    return True


def extract_records(grid: Grid) -> list[IonRecord]:
    """Collect one IonRecord per data row with a non-empty time.

    Raises:
        MalformedContentError: If the sheet has no data rows or a required
            header is missing.
    """
    if grid.height < 2:
        raise MalformedContentError(
            message="Not enough rows",
            detail=f"Sheet has {grid.height} row(s); expected a header and data",
        )

    columns = map_headers(grid, (TIME_HEADER, *ION_HEADERS))
    time_column = columns[TIME_HEADER]

    records: list[IonRecord] = []
    for row in range(2, grid.height + 1):
        time_value = grid.get(row, time_column)
        if not time_value:
            continue

        values: list[str | None] = []
        for header in ION_HEADERS:
            raw = grid.get(row, columns[header])
            values.append(raw if is_valid_measurement(raw) else None)

        records.append(IonRecord(time=normalize_timestamp(time_value), values=tuple(values)))

    return records


def load_station_text(path: Path) -> str:
    """Read the station description for A2, or the setup hint if missing.

    Raises:
        InputNotFoundError: If the file exists but cannot be read.
        MalformedContentError: If the file is not UTF-8 text.
    """
    if not path.exists():
        return MISSING_STATION_TEXT

    try:
        return path.read_text(encoding="utf-8").strip()
    except UnicodeDecodeError as e:
        raise MalformedContentError(
            message="Station config is not UTF-8 text",
            detail=f"{path}: {e}",
        ) from e
    except OSError as e:
        raise InputNotFoundError(
            message="Cannot read station config",
            detail=f"{path}: {e}",
        ) from e


def _write_row(ws, row: int, values: Sequence[str], style: HighlightStyle) -> None:
    for index, value in enumerate(values, start=1):
        address = to_address(index, row)
        set_text(ws, address, value)
        set_fill(ws, address, style)


def build_export_workbook(
    records: Sequence[IonRecord],
    station_text: str,
    banner: HighlightStyle,
    header: HighlightStyle,
) -> Workbook:
    """Lay ``records`` out in the upload template.

    Rows 1-2 carry the warning and station text (banner fill); rows 3-5 the
    species, factor codes and units (header fill); data starts at row 6 with
    the time in column A and the ions in columns G to N.
    """
    wb = Workbook()
    ws = wb.active

    for address, text in (("A1", WARNING_TEXT), ("A2", station_text)):
        set_text(ws, address, text)
        set_fill(ws, address, banner)

    _write_row(ws, 3, SPECIES_ROW, header)
    _write_row(ws, 4, FACTOR_CODE_ROW, header)
    _write_row(ws, 5, UNIT_ROW, header)

    for offset, record in enumerate(records):
        row = FIRST_DATA_ROW + offset
        time_address = to_address(1, row)
        set_text(ws, time_address, record.time)
        set_fill(ws, time_address, header)

        for index, value in enumerate(record.values):
            set_text(ws, to_address(FIRST_ION_COLUMN + index, row), value or "")

    return wb


@dataclass
class ReshapeConfig:
    """Configuration for the ProtonReshaper service."""

    output_prefix: str = "processed_"
    station_config_path: Path = Path("proton_config.txt")
    banner: HighlightStyle = field(default_factory=HighlightStyle)
    header: HighlightStyle = field(default_factory=lambda: HighlightStyle(color="FFFF9900"))

    @classmethod
    def from_settings(cls) -> "ReshapeConfig":
        return cls(
            output_prefix=settings.output_prefix,
            station_config_path=settings.proton_config_path,
            banner=HighlightStyle(color=settings.highlight_color),
            header=HighlightStyle(color=settings.header_color),
        )


class ProtonReshaper:
    """Service turning an ion chromatography export into the upload layout."""

    def __init__(self, config: ReshapeConfig | None = None):
        self.config = config or ReshapeConfig()

    def reshape_file(self, input_path: Path, output_dir: Path | None = None) -> Path:
        """Reshape ``input_path`` and save ``<output_prefix><basename>``."""
        wb = self._reshape(read_input_bytes(input_path))
        output_path = (output_dir or Path.cwd()) / output_filename(
            input_path.name, self.config.output_prefix
        )
        return save_workbook(wb, output_path)

    def reshape_bytes(self, file_bytes: bytes) -> bytes:
        return workbook_to_bytes(self._reshape(file_bytes))

    def _reshape(self, file_bytes: bytes) -> Workbook:
        source = load_workbook_safe(file_bytes, data_only=True)
        if not source.sheetnames:
            raise SheetMissingError(message="Workbook has no sheets")

        sheet_name = source.sheetnames[0]
        grid = Grid.from_worksheet(source[sheet_name])
        records = extract_records(grid)

        logger.info("Reshaping sheet=%s records=%d", sheet_name, len(records))
        return build_export_workbook(
            records,
            load_station_text(self.config.station_config_path),
            banner=self.config.banner,
            header=self.config.header,
        )
