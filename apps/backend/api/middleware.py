"""
Request logging middleware and the mapping from generation errors to HTTP responses
"""
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from agents.generation.exceptions import GenerationError
from models.requests import ErrorResponse
from setup_logging_optimized import get_logger

logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with a short id and logs its duration"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        method = request.method
        path = request.url.path
        quiet = path.endswith('/health')

        start_time = time.time()
        if not quiet:
            logger.info(f"Request started: {method} {path} - Request ID: {request_id}")

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(f"Request failed: {method} {path} - Error: {e} - Duration: {duration_ms}ms - Request ID: {request_id}")
            raise

        duration_ms = int((time.time() - start_time) * 1000)
        if not quiet:
            logger.info(f"Request completed: {method} {path} - Status: {response.status_code} - Duration: {duration_ms}ms")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(duration_ms)
        return response


def generation_error_response(error: GenerationError, status: Optional[str] = None) -> JSONResponse:
    """
    Map a pipeline failure to its payload.

    ConfigurationError -> 500, NetworkError -> 504, UpstreamError -> the
    upstream status, FormatError -> 502. The status code lives on the
    exception class.
    """
    logger.error(f"{type(error).__name__}: {error}")
    payload = ErrorResponse(error=error.message, status=status)
    return JSONResponse(status_code=error.status_code, content=payload.model_dump(exclude_none=True))


def unexpected_error_response(error: Exception) -> JSONResponse:
    logger.exception(f"Unexpected error: {error}")
    payload = ErrorResponse(error=str(error) or "Failed to process request")
    return JSONResponse(status_code=500, content=payload.model_dump(exclude_none=True))


async def validation_error_response(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request bodies that fail validation answer 422 with the same {error} payload."""
    messages = [str(e.get('msg', '')) for e in exc.errors()]
    payload = ErrorResponse(error="; ".join(m for m in messages if m) or "Invalid request")
    return JSONResponse(status_code=422, content=payload.model_dump(exclude_none=True))
