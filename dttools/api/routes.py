"""API routes for dttools.

This module defines the REST API endpoints:
- POST /clean: Apply the correction rules and return the processed workbook
- POST /clean/preview: Return the change set as JSON
- POST /reshape: Reshape an ion chromatography export
- GET /health: Health check endpoint
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse, Response

from dttools.cleaner.coordinates import to_address
from dttools.cleaner.reshape import ProtonReshaper, ReshapeConfig
from dttools.cleaner.service import CleanerConfig, WorkbookCleaner
from dttools.cleaner.workbook import output_filename
from dttools.core.config import settings
from dttools.core.models import CellChange, ChangeSetResponse, ErrorResponse

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

router = APIRouter()
logger = logging.getLogger(__name__)

# Services are stateless; build them once from app settings.
cleaner = WorkbookCleaner(config=CleanerConfig.from_settings())
reshaper = ProtonReshaper(config=ReshapeConfig.from_settings())

_UPLOAD_RESPONSES = {
    400: {
        "description": "Invalid upload or processing error",
        "model": ErrorResponse,
    },
    422: {
        "description": "Request validation error (e.g., missing required form field)",
        "model": ErrorResponse,
    },
}


def _error(status_code: int, error: str, detail: str | None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


async def _read_xlsx_upload(file: UploadFile) -> bytes | JSONResponse:
    """Validate the upload and return its bytes, or an error response."""
    if not file.filename:
        return _error(400, "Invalid file", "No filename provided")

    if not file.filename.lower().endswith(".xlsx"):
        extension = file.filename[file.filename.rfind(".") :] if "." in file.filename else "no extension"
        return _error(400, "Invalid file format", f"Expected .xlsx file, got '{extension}'")

    try:
        return await file.read()
    except Exception as e:
        return _error(400, "Failed to read upload", f"{type(e).__name__}: {e}")
    finally:
        await file.close()


def _xlsx_response(content: bytes, filename: str, headers: dict[str, str] | None = None) -> Response:
    name = output_filename(filename, settings.output_prefix)
    all_headers = {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(name)}"}
    all_headers.update(headers or {})
    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=all_headers)


@router.get(
    "/health",
    summary="Health Check",
    description="Returns the health status of the API service.",
    response_description="Health status object",
)
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        dict: Health status with "status": "ok"
    """
    return {"status": "ok"}


@router.post(
    "/clean",
    summary="Clean Instrument Workbook",
    description=(
        "Upload an instrument export (.xlsx). Sheet names and cell values are "
        "normalized, calibration codes are attached to sentinel values and cells "
        "with removed bracketed content are highlighted."
    ),
    response_class=Response,
    responses={
        200: {"content": {XLSX_MEDIA_TYPE: {}}, "description": "Processed workbook"},
        **_UPLOAD_RESPONSES,
    },
)
async def clean_workbook(
    file: UploadFile = File(..., description="Instrument export (.xlsx format)"),
) -> Response:
    upload = await _read_xlsx_upload(file)
    if isinstance(upload, JSONResponse):
        return upload

    result, content = cleaner.clean_bytes(upload)

    logger.info(
        "Cleaned upload filename=%s sheet=%s changed=%d",
        file.filename,
        result.sheet_name,
        result.changed_cells,
    )
    return _xlsx_response(
        content,
        file.filename,
        headers={
            "X-Changed-Cells": str(result.changed_cells),
            "X-Highlighted-Cells": str(result.highlighted_cells),
        },
    )


@router.post(
    "/clean/preview",
    response_model=ChangeSetResponse,
    summary="Preview Workbook Changes",
    description="Run the correction rules and return the changed cells without producing a workbook.",
    responses=_UPLOAD_RESPONSES,
)
async def preview_changes(
    file: UploadFile = File(..., description="Instrument export (.xlsx format)"),
) -> ChangeSetResponse | JSONResponse:
    upload = await _read_xlsx_upload(file)
    if isinstance(upload, JSONResponse):
        return upload

    result = cleaner.preview_bytes(upload)

    changes = [
        CellChange(
            address=to_address(column, row),
            row=row,
            column=column,
            value=cell.new_value,
            highlight=cell.highlight,
        )
        for (row, column), cell in sorted(result.changes.items())
    ]
    return ChangeSetResponse(
        sheet_name=result.sheet_name,
        renamed_sheets=result.renamed_sheets,
        changes=changes,
    )


@router.post(
    "/reshape",
    summary="Reshape Ion Chromatography Export",
    description=(
        "Upload an ion chromatography export (.xlsx) and receive the upload "
        "template with normalized timestamps and validated ion values."
    ),
    response_class=Response,
    responses={
        200: {"content": {XLSX_MEDIA_TYPE: {}}, "description": "Reshaped workbook"},
        **_UPLOAD_RESPONSES,
    },
)
async def reshape_workbook(
    file: UploadFile = File(..., description="Ion chromatography export (.xlsx format)"),
) -> Response:
    upload = await _read_xlsx_upload(file)
    if isinstance(upload, JSONResponse):
        return upload

    content = reshaper.reshape_bytes(upload)

    return _xlsx_response(content, file.filename)
