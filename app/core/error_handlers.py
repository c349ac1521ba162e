"""
Error handlers for the sandbox server.

Every error is answered with the same envelope the PHP endpoint uses:
``{"status": "error", "message": ...}``.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class EndpointError(Exception):
    """Raised by sandbox endpoints to answer with an error envelope."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ErrorHandler:
    """Turns exceptions into error envelopes and counts them per status."""

    def __init__(self):
        self.error_counts: Dict[int, int] = {}

    def _create_error_response(self, message: str, status_code: int, data: Optional[Any] = None) -> JSONResponse:
        self.error_counts[status_code] = self.error_counts.get(status_code, 0) + 1
        content = {"status": "error", "message": message}
        if data is not None:
            content["data"] = data
        return JSONResponse(status_code=status_code, content=content)

    async def handle_endpoint_error(self, request: Request, exc: EndpointError) -> JSONResponse:
        logger.warning(
            f"{request.method} {request.url.path} rejected: {exc.message}",
            extra={"status_code": exc.status_code},
        )
        return self._create_error_response(exc.message, exc.status_code)

    async def handle_validation_error(self, request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = [".".join(str(p) for p in err.get("loc", ())[1:]) for err in exc.errors()]
        message = f"Invalid request fields: {', '.join(f for f in fields if f) or 'body'}"
        logger.warning(f"{request.method} {request.url.path} validation failed: {message}")
        return self._create_error_response(message, 400)

    async def handle_http_exception(self, request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return self._create_error_response(str(exc.detail), exc.status_code)

    async def handle_generic_exception(self, request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return self._create_error_response("Internal server error", 500)

    def get_error_statistics(self) -> Dict[str, int]:
        return {str(code): count for code, count in sorted(self.error_counts.items())}


error_handler = ErrorHandler()


def setup_error_handlers(app):
    """Register envelope-producing handlers on a FastAPI app."""

    @app.exception_handler(EndpointError)
    async def endpoint_error_handler(request: Request, exc: EndpointError):
        return await error_handler.handle_endpoint_error(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return await error_handler.handle_validation_error(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return await error_handler.handle_http_exception(request, exc)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        return await error_handler.handle_generic_exception(request, exc)
