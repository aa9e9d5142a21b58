"""
Global exception handlers.

ScheduleError subclasses become a structured JSON body with their own HTTP
status; anything else becomes a generic 500 that never leaks internals.
Request body validation keeps FastAPI's default 422 response.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from dance_schedule.core.errors import ScheduleError
from dance_schedule.core.logging import get_logger

logger = get_logger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ScheduleError, schedule_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)


async def schedule_error_handler(request: Request, exc: Exception) -> JSONResponse:
    if not isinstance(exc, ScheduleError):
        return await generic_error_handler(request, exc)
    log = logger.error if exc.http_status >= 500 else logger.info
    log(
        "request_rejected",
        error_code=exc.code.value,
        status_code=exc.http_status,
        path=request.url.path,
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_exception", path=request.url.path, error=str(exc), exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            },
        },
    )
