# app/errors.py
# Role: Error taxonomy for the finance tracker and the FastAPI handlers
#       that turn each error into its HTTP response.

"""
Errors raised by the service layer and how they reach the client.

- ValidationError -> 400 {"message", "field"}
- NotFoundError   -> 404 {"message"}
- InternalError   -> 500 {"message": "Internal server error"} (cause is logged, not exposed)
"""

from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class FinanceError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_body(self) -> dict:
        return {"message": self.message}


class ValidationError(FinanceError):
    """Bad, missing or out-of-range input. Raised before any store write."""

    status_code = 400

    def __init__(self, field: Optional[str], message: str):
        super().__init__(message)
        self.field = field

    def to_body(self) -> dict:
        body = {"message": self.message}
        if self.field:
            body["field"] = self.field
        return body

    def __str__(self) -> str:
        return f"{self.field}: {self.message}" if self.field else self.message


class NotFoundError(FinanceError):
    """The targeted identifier does not exist."""

    status_code = 404


class InternalError(FinanceError):
    """Storage or infrastructure failure."""

    status_code = 500

    def to_body(self) -> dict:
        return {"message": INTERNAL_ERROR_MESSAGE}


def _first_request_error(exc: RequestValidationError) -> ValidationError:
    """Collapse FastAPI's error list into our single-field ValidationError."""
    errors = exc.errors()
    if not errors:
        return ValidationError(None, "Invalid request")

    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path")]
    # JSON decode errors carry a character offset, not a field name
    field = None if all(p.isdigit() for p in loc) else ".".join(loc)
    message = str(first.get("msg", "Invalid request"))
    if field is None and first.get("type") == "missing":
        message = "Request body is required"
    return ValidationError(field, message)


def register_error_handlers(app: FastAPI) -> None:
    """Attach handlers for the error taxonomy to the app."""

    @app.exception_handler(FinanceError)
    async def handle_finance_error(request: Request, exc: FinanceError):
        if isinstance(exc, ValidationError):
            logger.info("validation_failed", path=request.url.path, field=exc.field, message=exc.message)
        elif isinstance(exc, NotFoundError):
            logger.info("not_found", path=request.url.path, message=exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        err = _first_request_error(exc)
        logger.info("validation_failed", path=request.url.path, field=err.field, message=err.message)
        return JSONResponse(status_code=err.status_code, content=err.to_body())

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error("unhandled_error", path=request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})
