# -*- coding: utf-8 -*-
# @Author: yaccii
# @Description:

from __future__ import annotations

import io
import json

import pytest

from user_service.common.logging import (
    SEVERITY_ORDER,
    LogContext,
    LogFormat,
    LoggingConfig,
    LogLevel,
    get_logger,
    setup_logging,
    should_emit,
)
from user_service.common.request_context import reset_request_id, set_request_id


def _setup(fmt: LogFormat = LogFormat.JSON, threshold: LogLevel = LogLevel.VERBOSE):
    out, err = io.StringIO(), io.StringIO()
    setup_logging(LoggingConfig(fmt, threshold), stdout=out, stderr=err)
    return out, err


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    setup_logging(LoggingConfig(), stdout=io.StringIO(), stderr=io.StringIO())


class TestSeverity:
    def test_order_is_most_to_least_severe(self) -> None:
        assert SEVERITY_ORDER == (
            LogLevel.ERROR,
            LogLevel.WARN,
            LogLevel.INFO,
            LogLevel.DEBUG,
            LogLevel.VERBOSE,
        )

    @pytest.mark.parametrize("threshold", list(LogLevel))
    def test_should_emit_matches_index_rule(self, threshold: LogLevel) -> None:
        for level in LogLevel:
            expected = SEVERITY_ORDER.index(level) <= SEVERITY_ORDER.index(threshold)
            assert should_emit(level, threshold) is expected

    def test_error_always_passes(self) -> None:
        assert all(should_emit(LogLevel.ERROR, t) for t in LogLevel)


class TestThreshold:
    def test_below_threshold_produces_no_output(self) -> None:
        out, err = _setup(threshold=LogLevel.WARN)
        logger = get_logger("Test")
        logger.info("info message")
        logger.debug("debug message")
        logger.verbose("verbose message")
        assert out.getvalue() == ""
        assert err.getvalue() == ""

    def test_at_threshold_is_emitted(self) -> None:
        out, err = _setup(threshold=LogLevel.WARN)
        get_logger("Test").warn("careful")
        assert out.getvalue() == ""
        assert json.loads(err.getvalue())["message"] == "careful"

    def test_info_threshold_drops_debug(self) -> None:
        out, _ = _setup(threshold=LogLevel.INFO)
        logger = get_logger("Test")
        logger.debug("hidden")
        logger.info("shown")
        lines = out.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["message"] == "shown"


class TestRouting:
    @pytest.mark.parametrize("fmt", list(LogFormat))
    def test_error_and_warn_go_to_stderr(self, fmt: LogFormat) -> None:
        out, err = _setup(fmt)
        logger = get_logger("Test")
        logger.error("boom")
        logger.warn("hmm")
        assert out.getvalue() == ""
        assert len(err.getvalue().splitlines()) == 2

    @pytest.mark.parametrize("fmt", list(LogFormat))
    def test_other_levels_go_to_stdout(self, fmt: LogFormat) -> None:
        out, err = _setup(fmt)
        logger = get_logger("Test")
        logger.info("a")
        logger.debug("b")
        logger.verbose("c")
        assert err.getvalue() == ""
        assert len(out.getvalue().splitlines()) == 3


class TestJsonFormat:
    def test_record_fields(self) -> None:
        out, _ = _setup()
        get_logger("UserUsecase").info(
            "hello",
            LogContext(request_id="req-1", correlation_id="corr-1", user_id="u-1", metadata={"k": 1}),
        )
        record = json.loads(out.getvalue())
        assert record["level"] == "info"
        assert record["message"] == "hello"
        assert record["context"] == "UserUsecase"
        assert record["requestId"] == "req-1"
        assert record["correlationId"] == "corr-1"
        assert record["userId"] == "u-1"
        assert record["metadata"] == {"k": 1}
        assert record["timestamp"].endswith("Z")

    def test_absent_fields_are_omitted(self) -> None:
        out, _ = _setup()
        get_logger().info("bare")
        record = json.loads(out.getvalue())
        assert set(record) == {"timestamp", "level", "message"}

    def test_error_carries_trace(self) -> None:
        _, err = _setup()
        get_logger("Test").error("failed", "Traceback: line 1")
        record = json.loads(err.getvalue())
        assert record["level"] == "error"
        assert record["trace"] == "Traceback: line 1"

    def test_string_context_overrides_bound_name(self) -> None:
        out, _ = _setup()
        logger = get_logger("Bound")
        logger.info("one", "Override")
        logger.info("two")
        first, second = [json.loads(line) for line in out.getvalue().splitlines()]
        assert first["context"] == "Override"
        assert second["context"] == "Bound"

    def test_empty_string_context_falls_back_to_bound_name(self) -> None:
        out, _ = _setup()
        get_logger("Bound").info("msg", "")
        assert json.loads(out.getvalue())["context"] == "Bound"

    def test_request_id_taken_from_current_request(self) -> None:
        out, _ = _setup()
        token = set_request_id("from-request")
        try:
            get_logger("Test").info("inside request")
        finally:
            reset_request_id(token)
        assert json.loads(out.getvalue())["requestId"] == "from-request"


class TestTextFormat:
    def test_line_layout(self) -> None:
        out, _ = _setup(LogFormat.TEXT)
        get_logger("HTTP").info("Incoming", LogContext(request_id="abc"))
        line = out.getvalue().rstrip("\n")
        timestamp, rest = line.split(" ", 1)
        assert timestamp.endswith("Z")
        assert rest == "INFO [HTTP][abc] Incoming"

    def test_missing_context_and_request_id(self) -> None:
        out, _ = _setup(LogFormat.TEXT)
        get_logger().debug("plain")
        line = out.getvalue().rstrip("\n")
        assert line.split(" ", 1)[1] == "DEBUG  plain"

    def test_error_trace_on_its_own_line(self) -> None:
        _, err = _setup(LogFormat.TEXT)
        get_logger("Filter").error("boom", "Traceback (most recent call last): ...")
        lines = err.getvalue().splitlines()
        assert len(lines) == 2
        assert lines[0].endswith("ERROR [Filter] boom")
        assert lines[1] == "Traceback (most recent call last): ..."

    def test_warn_is_rendered_upper_case(self) -> None:
        _, err = _setup(LogFormat.TEXT)
        get_logger("X").warn("w")
        assert " WARN [X] w" in err.getvalue()
