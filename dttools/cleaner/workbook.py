"""Workbook loading and validation utilities.

This module provides safe loading of Excel workbooks with proper
error handling for missing, invalid, corrupt, or unsupported files.
"""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import openpyxl
from openpyxl import Workbook
from openpyxl.utils.exceptions import InvalidFileException

from dttools.cleaner.errors import InputNotFoundError, WorkbookLoadError


def read_input_bytes(path: Path) -> bytes:
    """Read a workbook file from disk.

    Raises:
        InputNotFoundError: If the path is missing, a directory, or unreadable.
    """
    if not path.exists():
        raise InputNotFoundError(
            message="Input file not found",
            detail=str(path),
        )
    if not path.is_file():
        raise InputNotFoundError(
            message="Input path is not a file",
            detail=str(path),
        )
    try:
        return path.read_bytes()
    except OSError as e:
        raise InputNotFoundError(
            message="Cannot read input file",
            detail=f"{path}: {e}",
        ) from e


def load_workbook_safe(file_bytes: bytes, data_only: bool = False) -> Workbook:
    """Safely load an Excel workbook from raw bytes.

    Args:
        file_bytes: Raw bytes of the Excel file
        data_only: Load cached formula results instead of formulas. The grid
            snapshot uses ``True``; the workbook that gets written back uses
            ``False`` so formulas survive.

    Returns:
        Workbook: Loaded openpyxl Workbook object

    Raises:
        WorkbookLoadError: If the file cannot be loaded due to:
            - Empty file data
            - Corrupt or invalid ZIP structure (xlsx files are ZIP archives)
            - Invalid Excel file format
            - Password-protected files
            - Other unexpected errors
    """
    if not file_bytes:
        raise WorkbookLoadError(
            message="Empty file",
            detail="The file contains no data"
        )

    # A valid xlsx file should be at least ~100 bytes (empty workbook)
    if len(file_bytes) < 100:
        raise WorkbookLoadError(
            message="Invalid file",
            detail=f"File too small ({len(file_bytes)} bytes) to be a valid Excel workbook"
        )

    file_stream = io.BytesIO(file_bytes)

    try:
        return openpyxl.load_workbook(
            file_stream,
            data_only=data_only,
            read_only=False,
        )

    except zipfile.BadZipFile as e:
        raise WorkbookLoadError(
            message="Invalid file format",
            detail="File is not a valid Excel workbook (corrupt or not .xlsx format)"
        ) from e

    except InvalidFileException as e:
        error_str = str(e).lower()

        if "password" in error_str or "encrypted" in error_str:
            raise WorkbookLoadError(
                message="Password-protected file",
                detail="Cannot open password-protected Excel files"
            ) from e

        raise WorkbookLoadError(
            message="Invalid Excel file",
            detail=str(e)
        ) from e

    except MemoryError as e:
        raise WorkbookLoadError(
            message="File too large",
            detail="The file is too large to process"
        ) from e

    except KeyError as e:
        # Valid ZIP, but missing [Content_Types].xml or similar
        raise WorkbookLoadError(
            message="Invalid Excel file",
            detail="File is a valid ZIP archive but not a valid Excel workbook (missing required components)"
        ) from e

    except Exception as e:
        error_type = type(e).__name__
        raise WorkbookLoadError(
            message="Failed to load workbook",
            detail=f"Unexpected error ({error_type}): {str(e)}"
        ) from e


def output_filename(filename: str, prefix: str) -> str:
    """Name of the processed copy of ``filename`` (base name only)."""
    name = Path(filename).name or "output.xlsx"
    return f"{prefix}{name}"
