# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from starlette.exceptions import HTTPException as StarletteHTTPException

Message = Union[str, List[str]]


@dataclass(eq=False)
class AppError(Exception):
    """业务异常统一

    只给 message 时按"字符串载荷"处理：error 取异常类名；
    显式给出 error / details 时原样透传到响应体。
    """
    message: Message
    status_code: int = 400
    error: Optional[str] = None
    details: Optional[Any] = None

    def __str__(self) -> str:
        return self.message if isinstance(self.message, str) else "; ".join(self.message)


class BadRequestError(AppError):
    def __init__(self, message: Message = "Bad request", *, error: Optional[str] = None, details: Any = None) -> None:
        super().__init__(message=message, status_code=400, error=error, details=details)


class NotFoundError(AppError):
    def __init__(self, message: Message = "Not found", *, error: Optional[str] = None, details: Any = None) -> None:
        super().__init__(message=message, status_code=404, error=error, details=details)


class ConflictError(AppError):
    def __init__(self, message: Message = "Conflict", *, error: Optional[str] = None, details: Any = None) -> None:
        super().__init__(message=message, status_code=409, error=error, details=details)


class ValidationFailedError(AppError):
    def __init__(self, violations: Dict[str, List[str]]) -> None:
        super().__init__(
            message="Validation failed",
            status_code=400,
            error="ValidationError",
            details=violations,
        )
        self.violations = violations


# ---------- fault variants ----------

INTERNAL_SERVER_ERROR = "InternalServerError"
INTERNAL_SERVER_ERROR_MESSAGE = "Internal server error"


@dataclass(frozen=True)
class ClientFault:
    """带明确状态码的已识别异常"""
    status_code: int
    message: Message
    error: str
    details: Optional[Any] = None


@dataclass(frozen=True)
class UnknownFault:
    """其他任何异常（或根本不是异常的值）"""
    raw: Any


Fault = Union[ClientFault, UnknownFault]


@dataclass(frozen=True)
class NormalizedError:
    status_code: int
    message: Message
    error: str
    details: Optional[Any] = None


def classify(exc: Any) -> Fault:
    if isinstance(exc, AppError):
        return ClientFault(
            status_code=exc.status_code,
            message=exc.message,
            error=exc.error or type(exc).__name__,
            details=exc.details,
        )

    if isinstance(exc, StarletteHTTPException):
        payload = exc.detail
        if isinstance(payload, Mapping):
            return ClientFault(
                status_code=exc.status_code,
                message=payload.get("message") or str(exc),
                error=payload.get("error") or type(exc).__name__,
                details=payload.get("details"),
            )
        return ClientFault(status_code=exc.status_code, message=str(payload), error=type(exc).__name__)

    return UnknownFault(raw=exc)


def normalize(exc: Any, *, development: bool = False) -> NormalizedError:
    """任意异常 -> (status, message, error, details)，本身不会抛错"""
    fault = classify(exc)
    if isinstance(fault, ClientFault):
        return NormalizedError(fault.status_code, fault.message, fault.error, fault.details)

    kind, message, stack = describe_failure(fault.raw)
    details = {"message": message, "stack": stack} if development else None
    return NormalizedError(500, INTERNAL_SERVER_ERROR_MESSAGE, kind, details)


def describe_failure(raw: Any) -> Tuple[str, str, str]:
    """(类名, 原始消息, 堆栈文本)；非异常值按 InternalServerError 处理"""
    if isinstance(raw, BaseException):
        kind = type(raw).__name__ or INTERNAL_SERVER_ERROR
        message = _safe_str(raw)
        try:
            stack = "".join(traceback.format_exception(type(raw), raw, raw.__traceback__))
        except Exception:  # noqa: BLE001
            stack = f"{kind}: {message}"
        return kind, message, stack

    message = _safe_str(raw)
    return INTERNAL_SERVER_ERROR, message, f"{INTERNAL_SERVER_ERROR}: {message}"


def _safe_str(value: Any) -> str:
    try:
        return str(value)
    except Exception:  # noqa: BLE001
        return object.__repr__(value)
