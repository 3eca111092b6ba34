# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""请求级埋点

RequestInstrumentationMiddleware 持有一个有序的 hook 列表，
每个请求调用一次 before()，结束时调用一次 after()（带耗时与结果）。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from starlette.requests import Request

from user_service.common.errors import describe_failure
from user_service.common.logging import AppLogger, LogContext, get_logger
from user_service.common.redaction import redact_body
from user_service.common.request_context import REQUEST_ID_HEADER

SLOW_REQUEST_THRESHOLD_MS = 1000


@dataclass(frozen=True)
class RequestInfo:
    method: str
    url: str
    request_id: Optional[str] = None
    query: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    user_agent: Optional[str] = None
    ip: Optional[str] = None

    @classmethod
    def from_request(cls, request: Request, body: Any = None) -> "RequestInfo":
        query = request.url.query
        return cls(
            method=request.method,
            url=f"{request.url.path}?{query}" if query else request.url.path,
            request_id=getattr(request.state, "request_id", None) or request.headers.get(REQUEST_ID_HEADER),
            query=dict(request.query_params),
            body=body,
            user_agent=request.headers.get("user-agent"),
            ip=request.client.host if request.client else None,
        )


@dataclass(frozen=True)
class Outcome:
    """成功时只带 status_code；失败时带 error，异常已被转成响应时也带 status_code"""
    status_code: Optional[int] = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class RequestHook(ABC):
    def before(self, info: RequestInfo) -> None:
        return None

    @abstractmethod
    def after(self, info: RequestInfo, elapsed_ms: int, outcome: Outcome) -> None:
        raise NotImplementedError


class LoggingHook(RequestHook):
    def __init__(self, logger: Optional[AppLogger] = None) -> None:
        self._logger = logger or get_logger("HTTP")

    def before(self, info: RequestInfo) -> None:
        self._logger.info(
            f"Incoming Request: {info.method} {info.url}",
            LogContext(
                request_id=info.request_id,
                metadata={
                    "method": info.method,
                    "url": info.url,
                    "query": info.query,
                    "body": redact_body(info.body),
                    "userAgent": info.user_agent,
                    "ip": info.ip,
                },
            ),
        )

    def after(self, info: RequestInfo, elapsed_ms: int, outcome: Outcome) -> None:
        if outcome.failed:
            kind, message, stack = describe_failure(outcome.error)
            self._logger.error(
                f"Request Failed: {info.method} {info.url} - {elapsed_ms}ms",
                stack,
                LogContext(
                    request_id=info.request_id,
                    metadata={
                        "method": info.method,
                        "url": info.url,
                        "responseTime": elapsed_ms,
                        "errorName": kind,
                        "errorMessage": message,
                        "statusCode": outcome.status_code,
                    },
                ),
            )
            return

        self._logger.info(
            f"Request Completed: {info.method} {info.url} - {elapsed_ms}ms",
            LogContext(
                request_id=info.request_id,
                metadata={
                    "method": info.method,
                    "url": info.url,
                    "responseTime": elapsed_ms,
                    "statusCode": outcome.status_code,
                },
            ),
        )


class PerformanceHook(RequestHook):
    def __init__(self, threshold_ms: int = SLOW_REQUEST_THRESHOLD_MS, logger: Optional[AppLogger] = None) -> None:
        self.threshold_ms = threshold_ms
        self._logger = logger or get_logger("Performance")

    def after(self, info: RequestInfo, elapsed_ms: int, outcome: Outcome) -> None:
        if elapsed_ms <= self.threshold_ms:
            return
        self._logger.warn(
            f"Slow request detected: {info.method} {info.url} - {elapsed_ms}ms",
            LogContext(
                request_id=info.request_id,
                metadata={
                    "method": info.method,
                    "url": info.url,
                    "executionTime": elapsed_ms,
                    "threshold": self.threshold_ms,
                },
            ),
        )
