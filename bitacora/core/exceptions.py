"""
Global exception handlers for consistent API errors.

Every error body has the same shape:

    {"message": ..., "error_code": ..., "details": {...}, "request_id": ...}

`error_code` and `details` come from BitacoraAPIException subclasses
(`error_code` / `extra`); `details` is only sent for client errors, 5xx
context stays in the logs.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

log = logging.getLogger("bitacora.errors")


def _req_id(request: Request) -> Optional[str]:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _error_body(request: Request, message: Any, **fields: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message}
    body.update({key: value for key, value in fields.items() if value})
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        error_code = getattr(exc, "error_code", None)
        extra = getattr(exc, "extra", None) or {}
        log_context = {"request_id": _req_id(request), "error_code": error_code, **extra}

        if exc.status_code >= 500:
            log.error(f"HTTP {exc.status_code}: {exc.detail}", extra=log_context)
            body = _error_body(request, exc.detail or "HTTP error", error_code=error_code)
        else:
            log.info(f"HTTP {exc.status_code}: {exc.detail}", extra=log_context)
            body = _error_body(
                request,
                exc.detail or "HTTP error",
                error_code=error_code,
                details=jsonable_encoder(extra),
            )
        return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        body = _error_body(request, "Validation error", errors=jsonable_encoder(exc.errors()))
        return JSONResponse(status_code=422, content=body)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        log.exception("Unhandled error", extra={"request_id": _req_id(request)})
        return JSONResponse(status_code=500, content=_error_body(request, "Internal server error"))
