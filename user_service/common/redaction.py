# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from typing import Any, Mapping

REDACTED = "[REDACTED]"

SENSITIVE_FIELDS = frozenset({"password", "token", "secret", "apiKey", "accessToken"})


def redact_body(body: Any) -> Any:
    """请求体脱敏：浅拷贝，仅替换顶层敏感字段

    嵌套对象里的敏感字段不会处理；非 dict 输入原样返回。
    """
    if not isinstance(body, Mapping):
        return body

    sanitized = dict(body)
    for key in SENSITIVE_FIELDS:
        if key in sanitized:
            sanitized[key] = REDACTED
    return sanitized
