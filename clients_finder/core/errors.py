import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404


class ConfigurationError(AppError):
    status_code = 500


class UpstreamError(AppError):
    """An external API (places, email, storage) answered with a failure."""
    status_code = 500


def _error_response(status_code: int, message: str):
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


# ---------------------------------------------------------
# HANDLERS
# ---------------------------------------------------------
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} failed: {exc.message}")
    return _error_response(exc.status_code, exc.message)


async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(exc.status_code, str(exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # First problem is enough for the UI
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", []) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return _error_response(400, message)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"💥 Unhandled error on {request.method} {request.url.path}")
    return _error_response(500, str(exc) or "Internal server error")


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
