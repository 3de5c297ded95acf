"""dttools - FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance,
sets up CORS middleware, maps pipeline errors to ErrorResponse JSON and
includes the API routes.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dttools.api.routes import router
from dttools.cleaner.errors import ProcessingError
from dttools.core.models import ErrorResponse

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="dttools",
        description=(
            "REST API that normalizes environmental-monitoring instrument "
            "workbooks (.xlsx) and reshapes ion chromatography exports."
        ),
        version="0.3.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # Configure CORS middleware (allow all origins for development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Changed-Cells", "X-Highlighted-Cells"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(  # type: ignore[misc]
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        missing_fields: list[str] = []
        for err in exc.errors():
            if err.get("type") == "missing":
                loc = err.get("loc") or ()
                if loc:
                    missing_fields.append(str(loc[-1]))

        detail = "Request body validation failed"
        if "file" in missing_fields:
            detail = "Missing required form field: file"

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error="Validation error",
                detail=detail,
            ).model_dump(),
        )

    @app.exception_handler(ProcessingError)
    async def processing_error_handler(  # type: ignore[misc]
        request: Request,
        exc: ProcessingError,
    ) -> JSONResponse:
        logger.warning("Processing failed path=%s error=%s", request.url.path, exc)
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=exc.message, detail=exc.detail).model_dump(),
        )

    app.include_router(router)

    return app


# Create the application instance
app = create_app()
