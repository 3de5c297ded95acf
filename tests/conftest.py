from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from dttools.main import create_app
from tests.helpers import build_workbook


@pytest.fixture()
def client() -> Iterator[TestClient]:
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def instrument_cells() -> dict[str, object]:
    """A VOCs/NMHC export with anchors, sentinels and bracketed text."""
    return {
        "A1": "header",
        "I3": "a24514",
        "K3": "a24011",
        "Q3": "a24510",
        "AY3": "a25014",
        "I4": "-999",
        "K4": "-999",
        "Q4": "-999",
        "AY4": "-999",
        "A3": "foo(bar)",
        "B2": "总烃(ppbv)",
    }


@pytest.fixture()
def write_xlsx(tmp_path: Path) -> Callable[..., Path]:
    def _write(cells: dict[str, object], name: str = "input.xlsx", title: str = "Sheet") -> Path:
        path = tmp_path / name
        build_workbook(cells, title=title).save(path)
        return path

    return _write


@pytest.fixture()
def ion_cells() -> dict[str, object]:
    """Ion chromatography export with one header row and three data rows."""
    headers = [
        "时间",
        "NO₃⁻(μg/m³)",
        "SO₄²⁻(μg/m³)",
        "NH₄⁺(μg/m³)",
        "Cl⁻(μg/m³)",
        "K⁺(μg/m³)",
        "Na⁺(μg/m³)",
        "Mg²⁺(μg/m³)",
        "Ca²⁺(μg/m³)",
    ]
    rows = [
        headers,
        ["2026-01-05T14:00:00", "1.5", "2.25", "0.8", "0.1", "0.05", "0.2", "0.01", "0.3"],
        ["2026/01/05 15:00:00", "1.2(C)", "abc", "", "0.1", "0.05", "(RM)", "0.01", "0.3"],
        ["", "9", "9", "9", "9", "9", "9", "9", "9"],
        ["bad time", "1", "2", "3", "4", "5", "6", "7", "8"],
    ]
    letters = "ABCDEFGHI"
    cells: dict[str, object] = {}
    for r, row in enumerate(rows, start=1):
        for c, value in enumerate(row):
            if value != "":
                cells[f"{letters[c]}{r}"] = value
    return cells
