# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import math
from datetime import datetime
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from user_service.domain.value_objects import INVALID_EMAIL_MESSAGE, is_valid_email

T = TypeVar("T")


class CamelModel(BaseModel):
    """响应统一使用 camelCase 字段名"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ---------- users ----------

class CreateUserRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, max_length=100, examples=["John Doe"])
    email: str = Field(..., max_length=255, examples=["john.doe@example.com"])

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name should not be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def _email_format(cls, v: str) -> str:
        normalized = v.strip().lower()
        if not is_valid_email(normalized):
            raise ValueError(INVALID_EMAIL_MESSAGE)
        return normalized


class UserResponse(CamelModel):
    id: str = Field(..., examples=["123e4567-e89b-12d3-a456-426614174000"])
    name: str = Field(..., examples=["John Doe"])
    email: str = Field(..., examples=["john.doe@example.com"])
    is_active: bool = Field(..., examples=[True])
    created_at: datetime
    updated_at: datetime


class PaginatedResponse(CamelModel, Generic[T]):
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int

    @classmethod
    def of(cls, data: List[T], total: int, page: int, limit: int) -> "PaginatedResponse[T]":
        return cls(
            data=data,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )


# ---------- health ----------

class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str
    uptime: float
