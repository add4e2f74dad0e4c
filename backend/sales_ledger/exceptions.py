import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sales_ledger.errors import ErrorType, ERROR_STATUS_MAP

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Custom exception that the store layer can raise."""

    def __init__(self, error_type: ErrorType, message: str):
        self.error_type = error_type
        self.message = message
        super().__init__(message)


async def app_exception_handler(_request: Request, exc: AppException) -> JSONResponse:
    """Global handler for AppException - converts to proper HTTP response."""
    status_code = ERROR_STATUS_MAP.get(exc.error_type, 500)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message}
    )


def format_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into one readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and parameters are client errors - 400 instead of 422."""
    message = format_validation_errors(exc)
    status_code = ERROR_STATUS_MAP[ErrorType.VALIDATION_ERROR]
    return JSONResponse(
        status_code=status_code,
        content={"detail": message}
    )


async def generic_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Global handler for unhandled exceptions - returns 500."""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=ERROR_STATUS_MAP[ErrorType.INTERNAL_ERROR],
        content={"detail": str(exc) or "Internal server error"}
    )
