import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import FORM_FIELD, EventNotFound, StoreError, ValidationError, Violation

logger = logging.getLogger(__name__)


def _validation_response(exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Validation failed", "details": exc.details()},
    )


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return _validation_response(exc)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # malformed JSON bodies and unparseable query parameters
    violations = []
    for error in exc.errors():
        loc = [part for part in error.get("loc", ()) if isinstance(part, str) and part not in ("body", "query", "path")]
        violations.append(Violation(loc[0] if loc else FORM_FIELD, error.get("msg", "Invalid input")))
    return _validation_response(ValidationError(violations))


async def handle_not_found(request: Request, exc: EventNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "Not found"})


async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(EventNotFound, handle_not_found)
    app.add_exception_handler(StoreError, handle_store_error)
