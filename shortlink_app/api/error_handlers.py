"""
Global exception handlers.

Maps link store errors to HTTP responses:
- AliasInUse -> 409
- NotFound -> 404
- KeyspaceExhausted, PersistenceError, InvariantViolation -> 500
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from shortlink_app.errors import (
    AliasInUse,
    InvariantViolation,
    KeyspaceExhausted,
    NotFound,
    PersistenceError,
    ShortlinkError,
)

STATUS_CODES = {
    AliasInUse: status.HTTP_409_CONFLICT,
    NotFound: status.HTTP_404_NOT_FOUND,
    KeyspaceExhausted: status.HTTP_500_INTERNAL_SERVER_ERROR,
    PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    InvariantViolation: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: ShortlinkError) -> int:
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_error_handlers(app: FastAPI) -> None:
    """Register link store error handlers on the FastAPI app"""

    @app.exception_handler(ShortlinkError)
    async def shortlink_error_handler(request: Request, exc: ShortlinkError):
        status_code = status_code_for(exc)

        if status_code >= 500:
            print(f"❌ {type(exc).__name__} on {request.url.path}: {exc}")
            # Server-side details stay in the log
            detail = "Server error. See logs for more info."
        else:
            detail = str(exc)

        return JSONResponse(status_code=status_code, content={"detail": detail})
