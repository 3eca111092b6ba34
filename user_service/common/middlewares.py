# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import json
import time
from typing import Callable, Optional, Sequence

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from user_service.common.instrumentation import Outcome, RequestHook, RequestInfo
from user_service.common.request_context import (
    REQUEST_ID_HEADER,
    new_request_id,
    reset_request_id,
    set_request_id,
)


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        request.state.request_id = request_id
        token = set_request_id(request_id)
        try:
            response: Response = await call_next(request)
        finally:
            reset_request_id(token)
        response.headers["X-Request-Id"] = request_id
        return response


class RequestInstrumentationMiddleware(BaseHTTPMiddleware):
    """按顺序调用 hooks：请求前 before，结束后 after（成功或失败）

    - 已被异常处理器转成响应的异常（记在 request.state.failure）也按失败上报
    - 未被处理的异常：hooks 观察后交给 on_error 生成响应；未配置 on_error 时原样抛出
    """

    def __init__(
        self,
        app: ASGIApp,
        hooks: Sequence[RequestHook] = (),
        on_error: Optional[Callable[[Request, Exception], Response]] = None,
    ) -> None:
        super().__init__(app)
        self.hooks = tuple(hooks)
        self.on_error = on_error

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        body = await _read_json_body(request)
        request.state.json_body = body
        info = RequestInfo.from_request(request, body)

        started = time.perf_counter()
        for hook in self.hooks:
            hook.before(info)

        try:
            response: Response = await call_next(request)
        except Exception as exc:
            self._after(info, started, Outcome(error=exc))
            if self.on_error is None:
                raise
            return self.on_error(request, exc)

        failure = getattr(request.state, "failure", None)
        self._after(info, started, Outcome(status_code=response.status_code, error=failure))
        return response

    def _after(self, info: RequestInfo, started: float, outcome: Outcome) -> None:
        elapsed_ms = _elapsed_ms(started)
        for hook in self.hooks:
            hook.after(info, elapsed_ms, outcome)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


async def _read_json_body(request: Request):
    content_type = request.headers.get("content-type", "")
    if "json" not in content_type:
        return None
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        # 非法 JSON 交给后面的校验层报 400，这里只是日志用
        return None
