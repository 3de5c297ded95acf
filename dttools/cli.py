"""Command line entry point.

    dttools clean 45vocs2.xlsx
    dttools reshape proton202552_20260105143932.xlsx --output-dir out/
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from dttools.cleaner.errors import ProcessingError
from dttools.cleaner.reshape import ProtonReshaper, ReshapeConfig
from dttools.cleaner.service import CleanerConfig, WorkbookCleaner
from dttools.core.config import settings

EXIT_SUCCESS = 0
EXIT_PROCESSING_ERROR = 1


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="dttools",
        description="Normalize environmental-monitoring instrument workbooks.",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    clean = subparsers.add_parser(
        "clean",
        help="Apply the correction rules to a VOCs/NMHC monitor export",
    )
    clean.add_argument("input", type=Path, help="Workbook to process, e.g. 45vocs2.xlsx")
    clean.add_argument("--output-dir", type=Path, default=None, help="Directory for the processed copy (default: cwd)")

    reshape = subparsers.add_parser(
        "reshape",
        help="Reshape an ion chromatography export into the upload template",
    )
    reshape.add_argument("input", type=Path, help="Workbook to process")
    reshape.add_argument("--output-dir", type=Path, default=None, help="Directory for the processed copy (default: cwd)")

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "clean":
            result = WorkbookCleaner(CleanerConfig.from_settings()).clean_file(args.input, args.output_dir)
            output_path = result.output_path
        else:
            output_path = ProtonReshaper(ReshapeConfig.from_settings()).reshape_file(args.input, args.output_dir)
    except ProcessingError as e:
        print(f"Error processing workbook: {e}", file=sys.stderr)
        return EXIT_PROCESSING_ERROR

    print(f"Saved processed workbook to: {output_path}")
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
