"""
Custom exception classes.

Represent errors raised while loading definitions and invoking handlers,
plus the exception handlers registered on the application.
"""

import logging

from fastapi import Request, status
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class SqsInvokeError(Exception):
    """Base exception class for the offline SQS invoke bridge."""

    pass


class DefinitionLoadError(SqsInvokeError):
    """Raised when the service definition file cannot be read or parsed."""

    def __init__(self, path: str, cause: Exception):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to load service definition {path}: {cause}")


class UnknownQueueError(SqsInvokeError):
    """Raised when a queue name was never declared as a queue resource."""

    def __init__(self, queue_name: str):
        self.queue_name = queue_name
        super().__init__(f"Unknown queue name: {queue_name}")


class LambdaInvokeError(SqsInvokeError):
    """Base exception class for Lambda invocation."""

    pass


class LambdaExecutionError(LambdaInvokeError):
    """Raised when the Lambda runtime cannot be reached."""

    def __init__(self, function_name: str, cause: Exception):
        self.function_name = function_name
        self.cause = cause
        super().__init__(f"Lambda execution failed for {function_name}: {cause}")


# ===========================================
# Exception Handlers
# ===========================================


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

    return PlainTextResponse(
        "Internal Server Error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """
    Handler for HTTPException (unknown paths, unsupported methods).
    """
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)
