"""Core models and configuration for dttools."""

from dttools.core.models import CellChange, ChangeSetResponse, ErrorResponse

__all__ = ["CellChange", "ChangeSetResponse", "ErrorResponse"]
