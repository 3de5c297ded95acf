"""Pydantic models for the dttools API.

This module defines the response models for the HTTP API:
- CellChange: One cell rewritten by the rule engine
- ChangeSetResponse: Preview of every change for an uploaded workbook
- ErrorResponse: Error response for failed requests
"""

from pydantic import BaseModel, Field


class CellChange(BaseModel):
    """A single cell the rule engine rewrote."""

    address: str = Field(description="A1 address of the cell (e.g., 'I4')")
    row: int = Field(description="1-based row number", ge=1)
    column: int = Field(description="1-based column number", ge=1)
    value: str = Field(description="New cell text after all rules and trimming")
    highlight: bool = Field(
        default=False,
        description="True when bracketed content was removed and the cell is flagged for review",
    )


class ChangeSetResponse(BaseModel):
    """Successful response from the /clean/preview endpoint."""

    sheet_name: str = Field(description="Name of the processed sheet after renaming")
    renamed_sheets: dict[str, str] = Field(
        default_factory=dict,
        description="Sheets renamed before applying changes (old name -> new name)",
    )
    changes: list[CellChange] = Field(
        description="Changed cells ordered by row, then column"
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "sheet_name": "NMHC监测仪",
                    "renamed_sheets": {"甲烷非甲烷分析仪": "NMHC监测仪"},
                    "changes": [
                        {"address": "A3", "row": 3, "column": 1, "value": "foo", "highlight": True},
                        {"address": "I4", "row": 4, "column": 9, "value": "-999#a24041", "highlight": False},
                    ],
                }
            ]
        }
    }


class ErrorResponse(BaseModel):
    """Error response for failed requests.

    Returned with appropriate HTTP status codes (400, 422).
    """

    error: str = Field(
        description="Brief error message describing what went wrong"
    )
    detail: str | None = Field(
        default=None,
        description="Additional error details (if available)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "Invalid file format",
                    "detail": "Expected .xlsx file, got .csv",
                },
                {
                    "error": "Required column not found",
                    "detail": "'时间'",
                },
            ]
        }
    }
