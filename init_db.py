# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

from user_service.common.logging import get_logger, setup_logging
from user_service.domain import models  # noqa: F401
from user_service.infra.config import settings
from user_service.infra.db import Base, engine

logger = get_logger("InitDb")


def init_db() -> None:
    """本地开发用：直接按 ORM 建表（线上走 alembic upgrade head）"""
    setup_logging(settings.logging_config)
    logger.info("Creating tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Done.")


if __name__ == "__main__":
    init_db()
