"""
Error handlers for the FastAPI application.
Typed service errors become the standard error envelope.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from accessmap.core.exceptions import AccessMapException

logger = logging.getLogger(__name__)


async def handle_access_map_exception(request: Request, exc: AccessMapException) -> JSONResponse:
    logger.error(
        f"{exc.error_code.value} on {request.method} {request.url.path}: {exc.message}",
        extra={
            'error_code': exc.error_code.value,
            'status_code': exc.status_code,
            'details': exc.details,
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "error",
            "data": None,
            "error": exc.message,
            "error_code": exc.error_code.value,
        },
    )


def setup_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccessMapException, handle_access_map_exception)
