from __future__ import annotations

import io

from openpyxl import Workbook


def build_workbook(cells: dict[str, object], title: str = "Sheet") -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for address, value in cells.items():
        ws[address] = value
    return wb


def workbook_bytes(wb: Workbook) -> bytes:
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
