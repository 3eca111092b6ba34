# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import time

from fastapi import APIRouter

from user_service.common.request_context import utc_now_iso
from user_service.domain import schemas


router = APIRouter(tags=["Health"])

_started_at = time.monotonic()


@router.get("/health", response_model=schemas.HealthResponse)
def health_check() -> schemas.HealthResponse:
    return schemas.HealthResponse(
        status="ok",
        timestamp=utc_now_iso(),
        uptime=round(time.monotonic() - _started_at, 3),
    )
