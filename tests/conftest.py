# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""pytest 公共夹具：SQLite 内存库 + 可捕获的日志输出"""

from __future__ import annotations

import io
import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENV", "prod")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from user_service.common.logging import LogFormat, LoggingConfig, LogLevel, setup_logging  # noqa: E402
from user_service.domain import models  # noqa: F401,E402
from user_service.infra.db import Base, get_db  # noqa: E402
from user_service.main import app  # noqa: E402


@dataclass
class LogSink:
    stdout: io.StringIO = field(default_factory=io.StringIO)
    stderr: io.StringIO = field(default_factory=io.StringIO)

    @staticmethod
    def _lines(buf: io.StringIO) -> List[str]:
        return [line for line in buf.getvalue().splitlines() if line]

    def out_lines(self) -> List[str]:
        return self._lines(self.stdout)

    def err_lines(self) -> List[str]:
        return self._lines(self.stderr)

    def records(self) -> List[Dict[str, Any]]:
        """JSON 格式下的全部记录（stdout + stderr）"""
        return [json.loads(line) for line in self.out_lines() + self.err_lines()]


@pytest.fixture
def log_sink() -> Iterator[LogSink]:
    sink = LogSink()
    setup_logging(LoggingConfig(LogFormat.JSON, LogLevel.VERBOSE), stdout=sink.stdout, stderr=sink.stderr)
    yield sink
    setup_logging(LoggingConfig(LogFormat.JSON, LogLevel.INFO), stdout=io.StringIO(), stderr=io.StringIO())


@pytest.fixture
def db_session() -> Iterator[Session]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    testing_session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = testing_session()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session: Session, log_sink: LogSink) -> Iterator[TestClient]:
    def _override_get_db() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
