"""
Domain exception to HTTP response mapping.

Dependencies: fastapi, edu_rag.core.exceptions
System role: Uniform ErrorResponse bodies for API failures
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from edu_rag.core.exceptions import (
    ChunkNotFoundError,
    DocumentNotFoundError,
    EduRagException,
    SearchCancelledError,
    SearchTimeoutError,
    TransitionError,
    ValidationError,
)
from edu_rag.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)

# Most specific classes first
STATUS_CODES: list[tuple[type[EduRagException], int]] = [
    (ValidationError, 422),
    (TransitionError, 409),
    (DocumentNotFoundError, 404),
    (ChunkNotFoundError, 404),
    (SearchTimeoutError, 504),
    (SearchCancelledError, 499),
]


def status_code_for(exc: EduRagException) -> int:
    for exc_type, status_code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


async def handle_domain_error(request: Request, exc: EduRagException) -> JSONResponse:
    status_code = status_code_for(exc)
    message = f"{__name__}:handle_domain_error - {type(exc).__name__}: {exc}"
    if status_code >= 500:
        log_exception_with_context(logger, message, exc, path=request.url.path, code=exc.code)
    else:
        log_with_context(
            logger,
            logging.WARNING,
            message,
            path=request.url.path,
            status_code=status_code,
            code=exc.code,
        )
    return JSONResponse(
        status_code=status_code,
        content=exc.to_response().model_dump(mode="json"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EduRagException, handle_domain_error)
