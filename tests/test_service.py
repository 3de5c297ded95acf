"""End-to-end tests for the WorkbookCleaner service."""

from pathlib import Path

import pytest
from openpyxl import load_workbook

from dttools.cleaner.errors import InputNotFoundError, WorkbookLoadError
from dttools.cleaner.service import CleanerConfig, WorkbookCleaner
from dttools.cleaner.sink import HighlightStyle
from tests.helpers import build_workbook, workbook_bytes


@pytest.fixture()
def in_tmp_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestCleanFile:
    def test_end_to_end(self, in_tmp_cwd, write_xlsx, instrument_cells):
        input_path = write_xlsx(instrument_cells, title="甲烷非甲烷分析仪")

        result = WorkbookCleaner().clean_file(input_path)

        processed = in_tmp_cwd / "processed_input.xlsx"
        assert result.output_path == processed
        assert processed.exists()
        assert result.sheet_name == "NMHC监测仪"
        assert result.source_sheet_name == "甲烷非甲烷分析仪"
        assert result.renamed_sheets == {"甲烷非甲烷分析仪": "NMHC监测仪"}

        wb = load_workbook(processed)
        assert "NMHC监测仪" in wb.sheetnames
        ws = wb["NMHC监测仪"]
        assert ws["I4"].value == "-999#a24041"
        assert ws["K4"].value == "-999#a24537"
        assert ws["Q4"].value == "-999#a24504"
        assert ws["AY4"].value == "-999#a25501"
        assert ws["A3"].value == "foo"
        assert ws["A3"].fill.fill_type == "solid"
        assert ws["A3"].fill.fgColor.rgb == "FFFF0000"
        assert ws["B2"].value == "总烃(ppbC)"
        assert ws["A1"].value == "header"

    def test_change_counts(self, in_tmp_cwd, write_xlsx, instrument_cells):
        result = WorkbookCleaner().clean_file(write_xlsx(instrument_cells))
        # four sentinels, A3 and B2
        assert result.changed_cells == 6
        assert result.highlighted_cells == 1

    def test_numeric_sentinel_cells(self, in_tmp_cwd, write_xlsx):
        input_path = write_xlsx({"A1": "h", "I3": "a24514", "I4": -999, "I5": -999.0})
        WorkbookCleaner().clean_file(input_path)

        ws = load_workbook(in_tmp_cwd / "processed_input.xlsx").active
        assert ws["I4"].value == "-999#a24041"
        assert ws["I5"].value == "-999#a24041"

    def test_unrenamed_sheet_keeps_name(self, in_tmp_cwd, write_xlsx):
        input_path = write_xlsx({"A3": "x(y)"}, title="站点数据")
        result = WorkbookCleaner().clean_file(input_path)
        assert result.sheet_name == "站点数据"
        assert result.renamed_sheets == {}

    def test_other_sheets_renamed_and_untouched(self, in_tmp_cwd, tmp_path):
        wb = build_workbook({"A3": "x(y)"}, title="VOCs在线监测仪")
        other = wb.create_sheet("甲烷非甲烷分析仪")
        other["A3"] = "keep(me)"
        wb.active = 0
        path = tmp_path / "two.xlsx"
        wb.save(path)

        result = WorkbookCleaner().clean_file(path)

        out = load_workbook(in_tmp_cwd / "processed_two.xlsx")
        assert out.sheetnames == ["VOCs监测仪", "NMHC监测仪"]
        assert out["VOCs监测仪"]["A3"].value == "x"
        assert out["NMHC监测仪"]["A3"].value == "keep(me)"
        assert result.sheet_name == "VOCs监测仪"

    def test_rename_onto_existing_title_writes_active_sheet(self, in_tmp_cwd, tmp_path):
        wb = build_workbook({"A3": "x(y)"}, title="甲烷非甲烷分析仪")
        other = wb.create_sheet("NMHC监测仪")
        other["A3"] = "keep(me)"
        wb.active = 0
        path = tmp_path / "clash.xlsx"
        wb.save(path)

        result = WorkbookCleaner().clean_file(path)

        out = load_workbook(in_tmp_cwd / "processed_clash.xlsx")
        assert out.sheetnames == ["NMHC监测仪1", "NMHC监测仪"]
        assert out["NMHC监测仪1"]["A3"].value == "x"
        assert out["NMHC监测仪1"]["A3"].fill.fill_type == "solid"
        assert out["NMHC监测仪"]["A3"].value == "keep(me)"
        assert out["NMHC监测仪"]["A3"].fill.fill_type is None
        assert result.sheet_name == "NMHC监测仪1"
        assert result.renamed_sheets == {"甲烷非甲烷分析仪": "NMHC监测仪1"}

    def test_formulas_preserved(self, in_tmp_cwd, write_xlsx):
        input_path = write_xlsx({"A1": 1, "B1": "=A1*2", "A3": "a(b)"})
        WorkbookCleaner().clean_file(input_path)
        ws = load_workbook(in_tmp_cwd / "processed_input.xlsx").active
        assert ws["B1"].value == "=A1*2"

    def test_output_dir_and_prefix(self, tmp_path, write_xlsx):
        out_dir = tmp_path / "results"
        config = CleanerConfig(output_prefix="fixed_", highlight=HighlightStyle(color="FF00FF00"))
        result = WorkbookCleaner(config).clean_file(write_xlsx({"A3": "(x)y"}), output_dir=out_dir)

        assert result.output_path == out_dir / "fixed_input.xlsx"
        ws = load_workbook(result.output_path).active
        assert ws["A3"].value == "y"
        assert ws["A3"].fill.fgColor.rgb == "FF00FF00"

    def test_missing_input(self, in_tmp_cwd):
        with pytest.raises(InputNotFoundError):
            WorkbookCleaner().clean_file(in_tmp_cwd / "nope.xlsx")
        assert list(in_tmp_cwd.iterdir()) == []

    def test_invalid_input_produces_no_output(self, in_tmp_cwd):
        bad = in_tmp_cwd / "bad.xlsx"
        bad.write_bytes(b"not a workbook" * 20)
        with pytest.raises(WorkbookLoadError):
            WorkbookCleaner().clean_file(bad)
        assert [p.name for p in in_tmp_cwd.iterdir()] == ["bad.xlsx"]


class TestCleanBytes:
    def test_returns_processed_bytes(self, instrument_cells):
        file_bytes = workbook_bytes(build_workbook(instrument_cells))
        result, content = WorkbookCleaner().clean_bytes(file_bytes)
        assert result.changed_cells == 6
        assert content[:2] == b"PK"

    def test_preview_matches_clean(self, instrument_cells):
        file_bytes = workbook_bytes(build_workbook(instrument_cells, title="VOCs在线监测仪"))
        result = WorkbookCleaner().preview_bytes(file_bytes)
        assert result.sheet_name == "VOCs监测仪"
        assert result.changes[(3, 1)].new_value == "foo"
        assert result.output_path is None
