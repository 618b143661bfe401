"""Exception handlers for the course chat FastAPI application.

Service errors are mapped to plain-text responses carrying the error
message, so clients see the same body whether the catalog or the
language-model API failed.

Usage:
    from course_chat.web.exception_handlers import setup_exception_handlers

    app = FastAPI()
    setup_exception_handlers(app)
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from course_chat.errors import (
    CourseChatError,
    DataSourceError,
    QuestionValidationError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

ERROR_TO_STATUS: dict[type[CourseChatError], int] = {
    QuestionValidationError: status.HTTP_400_BAD_REQUEST,
    DataSourceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    UpstreamError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: CourseChatError) -> int:
    for error_type, status_code in ERROR_TO_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the service error handler on ``app``."""

    @app.exception_handler(CourseChatError)
    async def course_chat_error_handler(request: Request, exc: CourseChatError) -> PlainTextResponse:
        status_code = status_for(exc)
        logger.warning(
            "Request failed on %s %s: %s (%s)",
            request.method,
            request.url.path,
            exc.message,
            type(exc).__name__,
        )
        return PlainTextResponse(exc.message, status_code=status_code)
