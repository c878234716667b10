"""
FastAPI entrypoint for the Extractor microservice.

This module defines the public HTTP interface for PDF text extraction.
Each route takes a document reference, delegates to the coordinator, and
returns a typed result. Failures are rendered uniformly as
``{"code", "message", "details"}`` with the status code of the error.

The application is stateless: each request opens, reads and closes its
own document. No document is cached between requests.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from extractor.app.config import ExtractorConfig
from extractor.app.coordinator.coordinator import ExtractionCoordinator
from extractor.app.errors import ExtractorError
from extractor.app.schemas.extraction import (
    DocumentRequest,
    ErrorResponse,
    ExtractionResult,
    FileHashResult,
    PageCountResult,
    TextFileResult,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Extractor Service",
    description=(
        "Extracts embedded receipt payloads or per-page text from PDF documents"
    ),
    version="0.1.0",
)


# ---------------------------------------------------------------------------
# Startup / Shutdown
# ---------------------------------------------------------------------------

@app.on_event("startup")
def startup_event() -> None:
    """
    Application startup hook.

    Configuration is loaded once and treated as immutable for the lifetime
    of the process.
    """
    config = ExtractorConfig.from_env()

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.state.config = config
    app.state.coordinator = ExtractionCoordinator(config=config)

    logger.info(
        "Extractor started (document_root=%s, sort_by_position=%s)",
        config.DOCUMENT_ROOT,
        config.SORT_BY_POSITION,
    )


# ---------------------------------------------------------------------------
# Error rendering
# ---------------------------------------------------------------------------

@app.exception_handler(ExtractorError)
async def extractor_error_handler(
    request: Request,
    exc: ExtractorError,
) -> JSONResponse:
    body = ErrorResponse(
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(),
    )


def _coordinator() -> ExtractionCoordinator:
    return app.state.coordinator


# ---------------------------------------------------------------------------
# API Routes
# ---------------------------------------------------------------------------

@app.post(
    "/documents/text-pages",
    response_model=ExtractionResult,
    responses={422: {"model": ErrorResponse}},
    summary="Extract embedded payload or per-page text",
)
def extract_text_pages(request: DocumentRequest) -> ExtractionResult:
    """
    Return the embedded payload as a single element if the PDF carries
    one, otherwise the text of every page in page order.
    """
    return _coordinator().extract_text_pages(request.reference)


@app.post(
    "/documents/page-count",
    response_model=PageCountResult,
    summary="Count the pages of a PDF",
)
def page_count(request: DocumentRequest) -> PageCountResult:
    return _coordinator().page_count(request.reference)


@app.post(
    "/documents/file-hash",
    response_model=FileHashResult,
    summary="SHA-256 of the raw file bytes",
)
def file_hash(request: DocumentRequest) -> FileHashResult:
    return _coordinator().file_hash(request.reference)


@app.post(
    "/documents/text-file",
    response_model=TextFileResult,
    summary="Read a file as UTF-8 text",
)
def read_text_file(request: DocumentRequest) -> TextFileResult:
    return _coordinator().read_text_file(request.reference)


# ---------------------------------------------------------------------------
# Health Check
# ---------------------------------------------------------------------------

@app.get(
    "/health",
    summary="Service health check",
)
def health_check() -> JSONResponse:
    """Simple health check endpoint."""
    return JSONResponse(
        content={
            "status": "ok",
            "service": "extractor",
        }
    )
