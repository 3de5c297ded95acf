"""Sample workbook generator.

Writes small instrument exports that exercise every correction rule and the
reshape pipeline, for manual runs of ``dttools clean`` / ``dttools reshape``.

Usage examples
--------------
  python tools/generate_samples.py --output_dir ./samples
  python tools/generate_samples.py --output_dir ./samples --rows 200 --seed 7
"""

from __future__ import annotations

import argparse
import random
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional, Sequence

from openpyxl import Workbook

from dttools.cleaner.coordinates import to_address
from dttools.cleaner.reshape import ION_HEADERS, TIME_HEADER

# Factor codes on row 3 that switch the sentinel rewrite on
ANCHOR_CODES = {"I3": "a24514", "K3": "a24011", "Q3": "a24510", "AY3": "a25014"}


def build_vocs_sample(rows: int, rng: random.Random) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = "甲烷非甲烷分析仪"

    ws["A1"] = "甲烷非甲烷分析仪"
    ws["D1"] = "总烃(ppbvC)"
    ws["B2"] = "总烃(ppbv)"
    ws["C2"] = "间、对-二甲苯"
    ws["E2"] = "邻二甲苯"
    ws["A3"] = "时间(北京时间)"
    for address, code in ANCHOR_CODES.items():
        ws[address] = code

    start = datetime(2026, 1, 1)
    for offset in range(rows):
        row = 4 + offset
        ws.cell(row=row, column=1, value=(start + timedelta(hours=offset)).strftime("%Y-%m-%d %H:%M:%S"))
        for column in (9, 11, 17, 51):
            if rng.random() < 0.2:
                ws[to_address(column, row)] = -999
            else:
                ws[to_address(column, row)] = round(rng.uniform(0, 50), 2)
        if rng.random() < 0.1:
            ws.cell(row=row, column=2, value=f"{rng.uniform(0, 5):.2f}(C)")
    return wb


def build_proton_sample(rows: int, rng: random.Random) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.append([TIME_HEADER, *ION_HEADERS])

    start = datetime(2026, 1, 5)
    for offset in range(rows):
        stamp = start + timedelta(hours=offset)
        time_text = stamp.strftime("%Y-%m-%dT%H:%M:%S" if offset % 2 else "%Y/%m/%d %H:%M:%S")
        values = []
        for _ in ION_HEADERS:
            roll = rng.random()
            if roll < 0.05:
                values.append(f"{rng.uniform(0, 5):.2f}(C)")
            elif roll < 0.08:
                values.append("(RM)")
            else:
                values.append(f"{rng.uniform(0, 20):.3f}")
        ws.append([time_text, *values])
    return wb


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Generate sample instrument workbooks.")
    p.add_argument("--output_dir", type=str, required=True, help="Output directory.")
    p.add_argument("--rows", type=int, default=24, help="Data rows per workbook.")
    p.add_argument("--seed", type=int, default=12345, help="RNG seed (reproducible).")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    out_dir = Path(args.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    rng = random.Random(args.seed)

    build_vocs_sample(args.rows, rng).save(out_dir / "sample_vocs.xlsx")
    build_proton_sample(args.rows, rng).save(out_dir / "sample_proton.xlsx")

    print(f"Done. Output written to: {out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
