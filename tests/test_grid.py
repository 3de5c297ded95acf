"""Unit tests for the Grid snapshot and its occupied extent."""

from datetime import datetime

import pytest

from dttools.cleaner.grid import Extent, Grid, cell_to_text
from tests.helpers import build_workbook


class TestCellToText:
    def test_none_is_empty(self):
        assert cell_to_text(None) == ""

    def test_strings_verbatim(self):
        assert cell_to_text("  a(b) ") == "  a(b) "

    def test_integral_float_drops_fraction(self):
        assert cell_to_text(-999.0) == "-999"
        assert cell_to_text(3.0) == "3"

    def test_fractional_float(self):
        assert cell_to_text(1.5) == "1.5"

    def test_int_and_bool(self):
        assert cell_to_text(42) == "42"
        assert cell_to_text(True) == "true"
        assert cell_to_text(False) == "false"

    def test_datetime(self):
        assert cell_to_text(datetime(2026, 1, 5, 14, 0, 0)) == "2026-01-05 14:00:00"


class TestGridAccess:
    def test_size_and_padding(self):
        grid = Grid.from_rows([["a"], ["b", "c", "d"]])
        assert grid.size() == (2, 3)
        assert grid.get(1, 3) == ""

    def test_get_out_of_range_is_blank(self):
        grid = Grid.from_rows([["a", "b"]])
        assert grid.get(0, 1) == ""
        assert grid.get(1, 0) == ""
        assert grid.get(2, 1) == ""
        assert grid.get(1, 51) == ""

    def test_cell_out_of_range_raises(self):
        grid = Grid.from_rows([["a", "b"]])
        assert grid.cell(1, 2) == "b"
        with pytest.raises(IndexError):
            grid.cell(2, 1)
        with pytest.raises(IndexError):
            grid.cell(1, 3)

    def test_row(self):
        grid = Grid.from_rows([["a", None, 3.0]])
        assert grid.row(1) == ("a", "", "3")
        with pytest.raises(IndexError):
            grid.row(2)


class TestOccupiedExtent:
    def test_rows_not_trimmed(self):
        grid = Grid.from_rows([["a", "b", "c", "d", "e"], [None] * 5, [None] * 5])
        assert grid.occupied_extent() == Extent(max_row=3, max_column=5)

    def test_max_over_rows(self):
        grid = Grid.from_rows([["a", None, None, None], [None, None, "x", None]])
        assert grid.occupied_extent() == (2, 3)

    def test_columns_past_last_content_ignored(self):
        grid = Grid([["a", "", ""], ["", "b", ""]], width=10)
        assert grid.width == 10
        assert grid.occupied_extent().max_column == 2

    def test_all_empty_falls_back_to_width(self):
        grid = Grid.from_rows([[None, None, None], [None, None, None]])
        assert grid.occupied_extent() == (2, 3)

    def test_empty_grid(self):
        grid = Grid([])
        assert grid.size() == (0, 0)
        assert grid.occupied_extent() == (0, 0)


class TestFromWorksheet:
    def test_snapshot_values(self):
        wb = build_workbook({"A1": "header", "C2": -999, "B3": 1.25})
        grid = Grid.from_worksheet(wb.active)
        assert grid.size() == (3, 3)
        assert grid.get(1, 1) == "header"
        assert grid.get(2, 3) == "-999"
        assert grid.get(3, 2) == "1.25"
        assert grid.get(2, 1) == ""

    def test_empty_worksheet(self):
        wb = build_workbook({})
        grid = Grid.from_worksheet(wb.active)
        assert grid.size() == (0, 0)
