# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_service.common.errors import AppError, Message, ValidationFailedError, describe_failure, normalize
from user_service.common.logging import LogContext, get_logger
from user_service.common.redaction import redact_body
from user_service.common.request_context import REQUEST_ID_HEADER, get_request_id, utc_now_iso
from user_service.infra.config import settings

logger = get_logger("AllExceptionsFilter")

_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")
_VALUE_ERROR_PREFIX = "Value error, "


def build_envelope(
    *,
    status_code: int,
    message: Message,
    error: str,
    details: Any = None,
    request_id: Optional[str] = None,
    path: str,
    method: str,
) -> Dict[str, Any]:
    envelope: Dict[str, Any] = {
        "statusCode": status_code,
        "timestamp": utc_now_iso(),
        "path": path,
        "method": method,
        "message": message,
        "error": error,
    }
    if details is not None:
        envelope["details"] = details
    if request_id is not None:
        envelope["requestId"] = request_id
    return envelope


def request_target(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def request_id_of(request: Request) -> Optional[str]:
    return (
        getattr(request.state, "request_id", None)
        or get_request_id()
        or request.headers.get(REQUEST_ID_HEADER)
    )


def format_validation_errors(errors: List[Dict[str, Any]]) -> Dict[str, List[str]]:
    """pydantic 错误列表 -> {字段: [错误信息]}"""
    formatted: Dict[str, List[str]] = {}
    for err in errors:
        loc = [str(x) for x in err.get("loc", ())]
        source = loc[0] if loc else "body"
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        key = ".".join(loc) or source

        msg = str(err.get("msg", "invalid value"))
        if msg.startswith(_VALUE_ERROR_PREFIX):
            msg = msg[len(_VALUE_ERROR_PREFIX):]
        formatted.setdefault(key, []).append(msg)
    return formatted


def error_response(request: Request, exc: Any) -> JSONResponse:
    """所有异常的统一出口：归一化 -> 响应体 -> 一条日志

    异常记在 request.state.failure 上，埋点中间件据此把已转成响应的异常按失败上报。
    """
    request.state.failure = exc
    normalized = normalize(exc, development=settings.is_development)
    request_id = request_id_of(request)
    path = request_target(request)

    envelope = build_envelope(
        status_code=normalized.status_code,
        message=normalized.message,
        error=normalized.error,
        details=normalized.details,
        request_id=request_id,
        path=path,
        method=request.method,
    )

    log_context = LogContext(
        request_id=request_id,
        metadata={
            "statusCode": normalized.status_code,
            "path": path,
            "method": request.method,
            "query": dict(request.query_params),
            "body": redact_body(getattr(request.state, "json_body", None)),
            "ip": request.client.host if request.client else None,
            "userAgent": request.headers.get("user-agent"),
        },
    )

    if normalized.status_code >= 500:
        kind, raw_message, stack = describe_failure(exc)
        logger.error(f"Internal Server Error: {kind}: {raw_message}", stack, log_context)
    else:
        logger.warn(f"Client Error: {_message_text(normalized.message)}", log_context)

    return JSONResponse(status_code=normalized.status_code, content=envelope)


def _message_text(message: Message) -> str:
    return message if isinstance(message, str) else ", ".join(str(m) for m in message)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return error_response(request, exc)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(request, exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(request, ValidationFailedError(format_validation_errors(list(exc.errors()))))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    return error_response(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
