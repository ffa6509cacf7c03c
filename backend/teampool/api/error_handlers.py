"""Error Handlers — global exception handlers for the TeamPool API.

Invariants:
    - TeamPoolError → its own http_status with the to_response() envelope
    - RequestValidationError → 400 VALIDATION_ERROR with one entry per offending field
    - Any other exception → 500 INTERNAL_ERROR; message and traceback stay in the logs
    - Every error body has the same shape: {"error": {code, message, category, severity, ...}}

Design Decisions:
    - Client errors logged at WARNING, server errors at ERROR, both tagged with the
      team/user ids carried on the error's context
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from teampool.core.errors import ErrorCategory, ErrorSeverity, TeamPoolError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    app.add_exception_handler(TeamPoolError, handle_teampool_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def error_body(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity, **extra,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


async def handle_teampool_error(request: Request, exc: TeamPoolError) -> JSONResponse:
    level = logging.ERROR if exc.http_status >= 500 else logging.WARNING
    logger.log(
        level,
        exc.message,
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "team_id": exc.context.team_id,
            "user_id": exc.context.user_id,
            "expense_id": exc.context.expense_id,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_validation_error(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [
        {
            # Drop the "body"/"path"/"query" prefix: clients know which part they sent
            "field": ".".join(str(loc) for loc in e["loc"][1:]) or str(e["loc"][0]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    logger.warning(
        f"Rejected request: {len(details)} invalid field(s)",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__}: {exc}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )
