# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Optional


REQUEST_ID_HEADER = "x-request-id"

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def new_request_id() -> str:
    return str(uuid.uuid4())


def set_request_id(request_id: Optional[str]) -> Token:
    return _request_id_ctx.set(request_id or None)


def reset_request_id(token: Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> Optional[str]:
    """当前请求的 request id，请求之外返回 None"""
    return _request_id_ctx.get()


def utc_now_iso() -> str:
    """ISO-8601，毫秒精度，UTC 以 Z 结尾"""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
