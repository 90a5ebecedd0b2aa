"""Render every failure as an ``ErrorResponse`` body."""

from typing import Any

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .exceptions import APIError
from .schemas import ErrorResponse

logger = structlog.get_logger()


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    code: str,
    detail: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        detail=detail,
        code=code,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json"),
        headers=headers,
    )


async def _on_api_error(request: Request, exc: APIError) -> JSONResponse:
    detail = exc.detail.get("detail") if isinstance(exc.detail, dict) else exc.detail
    log = logger.error if exc.status_code >= 500 else logger.info
    log("request_rejected", code=exc.code, status_code=exc.status_code, detail=detail)
    return _error_response(request, exc.status_code, exc.message, exc.code, detail)


async def _on_http_error(request: Request, exc: HTTPException) -> JSONResponse:
    logger.info("http_error", status_code=exc.status_code, detail=exc.detail)
    return _error_response(
        request,
        exc.status_code,
        str(exc.detail),
        f"HTTP_{exc.status_code}",
        headers=exc.headers,
    )


async def _on_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.info("request_invalid", problems=problems)
    return _error_response(
        request, 422, "Validation error", "VALIDATION_ERROR", "; ".join(problems)
    )


async def _on_unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error_type=type(exc).__name__)
    return _error_response(request, 500, "Internal server error", "INTERNAL_ERROR")


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on ``app``.

    Handlers are matched along the exception MRO, so ``APIError`` subclasses
    keep their own code and anything unexpected becomes an opaque 500.
    """
    app.add_exception_handler(APIError, _on_api_error)
    app.add_exception_handler(HTTPException, _on_http_error)
    app.add_exception_handler(RequestValidationError, _on_validation_error)
    app.add_exception_handler(Exception, _on_unhandled)
