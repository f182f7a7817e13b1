"""
Response envelope and error → HTTP status mapping

Успех:  {"success": true, "data": ..., "message"?: ..., "count"?: ...}
Ошибка: {"success": false, "error": "..."}
"""
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from chainvault.application.errors import AuthenticationError, NotFoundError, ServiceError

logger = logging.getLogger(__name__)


def ok(data: Any = None, message: str | None = None, **extra) -> dict:
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    body.update(extra)
    return body


def fail(error: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def service_health(service: str) -> dict:
    return {
        "success": True,
        "service": service,
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def status_for(exc: ServiceError) -> int:
    """
    HTTP статус для ошибки сервисного слоя

    404 - запись, запрошенная по id из URL, не найдена
    401 - неверные учётные данные
    400 - всё остальное (валидация, бизнес-правила, кривой id, ссылки из payload)
    """
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, AuthenticationError):
        return 401
    return 400


def _format_request_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        parts.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return ", ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        status_code = status_for(exc)
        logger.info("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
        return fail(str(exc), status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return fail(_format_request_errors(exc), 400)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return fail(str(exc.detail), exc.status_code)
