"""
Tests for the exception hierarchy and logging setup.
"""
import logging

import pytest

from gamedata_insight.exceptions import (
    AggregatorFinalizedError,
    AnalysisError,
    CatalogueFormatError,
    ConfigurationError,
    InsightError,
    ParseError,
    RecordsFormatError,
    wrap_exception,
)
from gamedata_insight.logging_config import (
    ROOT_LOGGER_NAME,
    ColoredFormatter,
    InsightLogger,
    get_logger,
    log_performance,
    setup_logging,
)


class TestExceptions:
    def test_details_in_message(self):
        err = CatalogueFormatError("bad entry", file_path="rels.json", entry_index=2)
        assert isinstance(err, ParseError)
        assert str(err) == "bad entry (file_path=rels.json, line_number=2, parser_type=catalogue)"

    def test_no_details(self):
        assert str(InsightError("plain")) == "plain"

    def test_records_error(self):
        err = RecordsFormatError("broken", file_path="a.json")
        assert err.parser_type == "records"
        assert err.details == {"file_path": "a.json", "parser_type": "records"}

    def test_configuration_error_keeps_falsy_value(self):
        err = ConfigurationError("bad", config_key="sample_record_limit", config_value=0)
        assert err.details["config_value"] == 0

    def test_aggregator_error(self):
        err = AggregatorFinalizedError()
        assert isinstance(err, AnalysisError)
        assert err.analysis == "aggregation"

    def test_wrap_exception(self):
        cause = ValueError("boom")
        wrapped = wrap_exception(cause, "reading failed", RecordsFormatError, file_path="x.json")
        assert isinstance(wrapped, RecordsFormatError)
        assert wrapped.cause is cause
        assert wrapped.message == "reading failed"

    def test_wrap_keeps_own_exceptions(self):
        original = ConfigurationError("already ours")
        assert wrap_exception(original, "ignored", RecordsFormatError) is original


class TestLogging:
    @pytest.fixture(autouse=True)
    def restore_logging(self):
        yield
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root.handlers):
            handler.close()
        root.handlers.clear()
        InsightLogger._configured = False

    def test_loggers_nest_under_root(self):
        assert get_logger("gamedata_insight.balance").name == "gamedata_insight.balance"
        assert get_logger("tests").name == "gamedata_insight.tests"
        assert get_logger("tests") is get_logger("tests")

    def test_file_logging(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        setup_logging(level="DEBUG", log_file=log_file, console_output=False, force=True)
        get_logger("tests").info("hello %s", "file")
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")

    def test_setup_is_idempotent_without_force(self):
        setup_logging(level="ERROR", console_output=False, force=True)
        setup_logging(level="DEBUG", console_output=False)
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.ERROR

    def test_colored_formatter(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "careful", None, None)
        out = ColoredFormatter("%(levelname)s %(message)s").format(record)
        assert out == "\033[33mWARNING\033[0m careful"

    def test_log_performance_passes_through(self):
        @log_performance
        def add(a, b):
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"

    def test_log_performance_reraises(self):
        @log_performance
        def fail():
            raise KeyError("missing")

        with pytest.raises(KeyError):
            fail()
