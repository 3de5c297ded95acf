"""Run-level errors for the workbook pipelines.

Every error here is fatal for a run: the pipeline stops and no output file
is produced. Cell-level data problems (unparseable timestamps, non-numeric
measurements) are not errors and never reach this module.
"""


class ProcessingError(Exception):
    """Base class for fatal pipeline errors.

    Attributes:
        message: Human-readable error description
        detail: Additional technical details (optional)
    """

    def __init__(self, message: str, detail: str | None = None):
        """Initialize ProcessingError.

        Args:
            message: Brief error message describing what went wrong
            detail: Additional error details or technical information
        """
        self.message = message
        self.detail = detail
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class InputNotFoundError(ProcessingError):
    """The input path does not exist or cannot be read."""


class WorkbookLoadError(ProcessingError):
    """The input exists but is not a loadable .xlsx workbook."""


class SheetMissingError(ProcessingError):
    """A sheet the pipeline needs is absent from the workbook."""


class MalformedContentError(ProcessingError):
    """The sheet lacks structure the pipeline depends on (e.g. a header column)."""


class PersistError(ProcessingError):
    """The output workbook could not be written."""
