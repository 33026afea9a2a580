"""Exception → HTTP response mapping.

Operational errors carry a machine readable ``code``; domain rule violations
carry only a message; anything else is an internal error and is logged.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.errors import ConflictError, DomainError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _message(exc: Exception) -> str:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, str):
        return messages
    if isinstance(messages, dict) and messages:
        value = next(iter(messages.values()))
        if isinstance(value, list | tuple) and value:
            return str(value[0])
        return str(value)
    return str(exc)


def _errors(exc: ValidationError) -> dict:
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        return {field: list(value) if isinstance(value, list | tuple) else [value] for field, value in messages.items()}
    return {}


async def _not_found(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"code": "NOT_FOUND", "message": _message(exc)})


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"code": "VALIDATION_ERROR", "message": _message(exc), "errors": _errors(exc)},
    )


async def _request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body") or "body"
        errors.setdefault(field, []).append(error["msg"])
    return JSONResponse(
        status_code=400,
        content={"code": "VALIDATION_ERROR", "message": "Invalid request", "errors": errors},
    )


async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"code": exc.code, "message": exc.message})


async def _domain_error(request: Request, exc: DomainError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": exc.message})


async def _internal_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=500,
        content={"code": "INTERNAL_ERROR", "message": "Internal server error"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ObjectNotFoundError, _not_found)
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(ConflictError, _conflict)
    app.add_exception_handler(DomainError, _domain_error)
    app.add_exception_handler(Exception, _internal_error)
