from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.responses import Response

from seatlock.core.entities.errors import ReservationError
from seatlock.schemas.models import Error

ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


def _describe(errors: list[dict[str, Any]]) -> str:
    parts = []
    for err in errors:
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        parts.append(f"{location}: {err.get('msg', 'invalid')}" if location else err.get("msg", "invalid"))
    return "; ".join(parts) or "invalid request"


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Request bodies or path params that fail schema validation get the same
    {"detail", "error"} body as an InvalidInput result from the service.
    """
    error = exc if isinstance(exc, RequestValidationError) else RequestValidationError([])
    body = Error(detail=_describe(error.errors()), error=ReservationError.INVALID_INPUT.value)
    logger.debug(f"[request-invalid] {request.method} {request.url.path} {body.detail}")
    return JSONResponse(status_code=422, content=body.model_dump())


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    RequestValidationError: validation_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
