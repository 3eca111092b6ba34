# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

"""结构化日志

- 所有诊断输出都经过 AppLogger：按阈值过滤、组装 LogEntry、交给 stdlib handler 输出
- error / warn 写 stderr，其余写 stdout，与输出格式无关
- AppLogger 是不可变值：上下文名在 get_logger() 时绑定，单次调用可用字符串覆盖
"""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict, dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, TextIO, Union

from user_service.common.request_context import get_request_id, utc_now_iso

ROOT_LOGGER_NAME = "user_service"

VERBOSE = 5
logging.addLevelName(VERBOSE, "VERBOSE")


class LogLevel(str, Enum):
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    VERBOSE = "verbose"

    @property
    def levelno(self) -> int:
        return _STDLIB_LEVELS[self]


class LogFormat(str, Enum):
    JSON = "json"
    TEXT = "text"


# 严重程度从高到低
SEVERITY_ORDER = (LogLevel.ERROR, LogLevel.WARN, LogLevel.INFO, LogLevel.DEBUG, LogLevel.VERBOSE)

_STDLIB_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARN: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.VERBOSE: VERBOSE,
}


def should_emit(level: LogLevel, threshold: LogLevel) -> bool:
    return SEVERITY_ORDER.index(level) <= SEVERITY_ORDER.index(threshold)


@dataclass(frozen=True)
class LoggingConfig:
    format: LogFormat = LogFormat.JSON
    threshold: LogLevel = LogLevel.INFO


@dataclass(frozen=True)
class LogContext:
    """单次调用附带的结构化上下文"""

    request_id: Optional[str] = None
    correlation_id: Optional[str] = None
    user_id: Optional[str] = None
    metadata: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    level: LogLevel
    message: str
    context: Optional[str] = None
    trace: Optional[str] = None
    request_id: Optional[str] = None
    correlation_id: Optional[str] = None
    user_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = field(default=None)

    def to_dict(self) -> Dict[str, Any]:
        """camelCase 键，省略空字段"""
        raw = asdict(self)
        out: Dict[str, Any] = {}
        for key, value in raw.items():
            if value is None:
                continue
            out[_CAMEL_KEYS.get(key, key)] = value.value if isinstance(value, LogLevel) else value
        return out


_CAMEL_KEYS = {
    "request_id": "requestId",
    "correlation_id": "correlationId",
    "user_id": "userId",
}


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        entry = _entry_of(record)
        return json.dumps(entry.to_dict(), ensure_ascii=False, default=str)


class TextLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: A003
        entry = _entry_of(record)
        context_str = f"[{entry.context}]" if entry.context else ""
        request_id_str = f"[{entry.request_id}]" if entry.request_id else ""
        line = f"{entry.timestamp} {entry.level.value.upper()} {context_str}{request_id_str} {entry.message}"
        if entry.level is LogLevel.ERROR and entry.trace:
            line = f"{line}\n{entry.trace}"
        return line


def _entry_of(record: logging.LogRecord) -> LogEntry:
    entry = getattr(record, "entry", None)
    if isinstance(entry, LogEntry):
        return entry
    # 非 AppLogger 产生的记录（第三方库直接写 user_service.* logger）
    level = next((lv for lv in SEVERITY_ORDER if record.levelno >= lv.levelno), LogLevel.VERBOSE)
    trace = logging.Formatter().formatException(record.exc_info) if record.exc_info else None
    return LogEntry(
        timestamp=utc_now_iso(),
        level=level,
        message=record.getMessage(),
        context=record.name,
        trace=trace,
        request_id=get_request_id(),
    )


class _BelowLevelFilter(logging.Filter):
    def __init__(self, levelno: int) -> None:
        super().__init__()
        self._levelno = levelno

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        return record.levelno < self._levelno


_config = LoggingConfig()


def setup_logging(
    config: LoggingConfig = LoggingConfig(),
    *,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> None:
    """初始化日志输出，只在启动时调用（测试里可传入 StringIO 捕获输出）"""
    global _config
    _config = config

    formatter: logging.Formatter
    if config.format is LogFormat.TEXT:
        formatter = TextLogFormatter()
    else:
        formatter = JsonLogFormatter()

    out_handler = logging.StreamHandler(stdout if stdout is not None else sys.stdout)
    out_handler.addFilter(_BelowLevelFilter(logging.WARNING))
    out_handler.setFormatter(formatter)

    err_handler = logging.StreamHandler(stderr if stderr is not None else sys.stderr)
    err_handler.setLevel(logging.WARNING)
    err_handler.setFormatter(formatter)

    root = logging.getLogger(ROOT_LOGGER_NAME)
    # 阈值由 AppLogger 自己判断，stdlib 这一层全部放行
    root.setLevel(VERBOSE)
    root.propagate = False
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(out_handler)
    root.addHandler(err_handler)


@dataclass(frozen=True)
class AppLogger:
    context: Optional[str] = None

    def info(self, message: str, context: Union[str, LogContext, None] = None) -> None:
        self._write(LogLevel.INFO, message, context)

    def error(
        self,
        message: str,
        trace: Optional[str] = None,
        context: Union[str, LogContext, None] = None,
    ) -> None:
        self._write(LogLevel.ERROR, message, context, trace)

    def warn(self, message: str, context: Union[str, LogContext, None] = None) -> None:
        self._write(LogLevel.WARN, message, context)

    def debug(self, message: str, context: Union[str, LogContext, None] = None) -> None:
        self._write(LogLevel.DEBUG, message, context)

    def verbose(self, message: str, context: Union[str, LogContext, None] = None) -> None:
        self._write(LogLevel.VERBOSE, message, context)

    def build_entry(
        self,
        level: LogLevel,
        message: str,
        context: Union[str, LogContext, None] = None,
        trace: Optional[str] = None,
    ) -> LogEntry:
        if isinstance(context, str):
            entry = LogEntry(
                timestamp=utc_now_iso(),
                level=level,
                message=message,
                context=context or self.context,
            )
        elif context is not None:
            entry = LogEntry(
                timestamp=utc_now_iso(),
                level=level,
                message=message,
                context=self.context,
                request_id=context.request_id,
                correlation_id=context.correlation_id,
                user_id=context.user_id,
                metadata=dict(context.metadata) if context.metadata is not None else None,
            )
        else:
            entry = LogEntry(timestamp=utc_now_iso(), level=level, message=message, context=self.context)

        if entry.request_id is None:
            entry = replace(entry, request_id=get_request_id())
        if trace:
            entry = replace(entry, trace=trace)
        return entry

    def _write(
        self,
        level: LogLevel,
        message: str,
        context: Union[str, LogContext, None] = None,
        trace: Optional[str] = None,
    ) -> None:
        if not should_emit(level, _config.threshold):
            return
        entry = self.build_entry(level, message, context, trace)
        logging.getLogger(ROOT_LOGGER_NAME).log(level.levelno, entry.message, extra={"entry": entry})


def get_logger(context: Optional[str] = None) -> AppLogger:
    return AppLogger(context=context)
