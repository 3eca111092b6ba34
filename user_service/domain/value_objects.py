# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import re

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

INVALID_EMAIL_MESSAGE = "email must be an email"


def is_valid_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


class Email:
    """邮箱值对象：小写 + 去空白后校验格式"""

    __slots__ = ("_value",)

    def __init__(self, email: str) -> None:
        normalized = email.strip().lower()
        if not is_valid_email(normalized):
            raise ValueError("Invalid email format")
        self._value = normalized

    @property
    def value(self) -> str:
        return self._value

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Email) and other._value == self._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"Email({self._value!r})"
