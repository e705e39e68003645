"""
Exception handler registration.

Every invocation failure reaches the client the same way: HTTP 500 with a
plain-text body. Only the server-side log tells the kinds apart.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from .core.exceptions import FunctionInvocationError, TranspileError

logger = logging.getLogger("fnbridge.main")

FAILURE_PREFIX = "Function invocation failed: "


def invocation_failed_response(exc: BaseException) -> PlainTextResponse:
    return PlainTextResponse(
        FAILURE_PREFIX + str(exc),
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def function_invocation_error_handler(request: Request, exc: FunctionInvocationError):
    extra = {
        "path": request.url.path,
        "method": request.method,
        "error_kind": exc.kind,
        "function_name": getattr(exc, "function_name", None),
    }
    if isinstance(exc, TranspileError):
        extra["source_path"] = exc.source_path
    logger.error(f"Error during invocation: {exc}", extra=extra)
    return invocation_failed_response(exc)


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )
    return invocation_failed_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(FunctionInvocationError, function_invocation_error_handler)
