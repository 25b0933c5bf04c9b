"""Tests for the loguru setup."""

import pytest

from shellsuggest import logger as logger_module
from shellsuggest.logger import get_logger, setup_logger


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    monkeypatch.delenv("SHELLSUGGEST_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SHELLSUGGEST_TRACE", raising=False)
    previous = logger_module._log_file_path
    yield tmp_path
    setup_logger(log_file=previous, trace=False)


class TestSetupLogger:
    def test_protocol_trace_holds_only_shell_traffic(self, log_dir):
        setup_logger(
            log_file=str(log_dir / "main.log"),
            log_level="INFO",
            trace=True,
            trace_file=str(log_dir / "protocol.log"),
        )

        get_logger("suggest.wire").debug("Decoded 2 completions")
        get_logger("suggest.command_cache").info("Global command cache replaced")

        trace = (log_dir / "protocol.log").read_text(encoding="utf-8")
        assert "suggest.wire" in trace
        assert "Decoded 2 completions" in trace
        assert "Global command cache replaced" not in trace

        main = (log_dir / "main.log").read_text(encoding="utf-8")
        assert "suggest.command_cache" in main
        assert "Decoded 2 completions" not in main

    def test_no_trace_file_by_default(self, log_dir):
        setup_logger(log_file=str(log_dir / "main.log"), trace_file=str(log_dir / "protocol.log"))
        get_logger("terminal.osc").info("Dropped sequence")
        assert not (log_dir / "protocol.log").exists()

    def test_level_from_environment(self, log_dir, monkeypatch):
        monkeypatch.setenv("SHELLSUGGEST_LOG_LEVEL", "debug")
        setup_logger(log_file=str(log_dir / "main.log"))

        get_logger("cli").debug("Would write trigger")

        assert "Would write trigger" in (log_dir / "main.log").read_text(encoding="utf-8")

    def test_unbound_logger_has_default_name(self, log_dir):
        setup_logger(log_file=str(log_dir / "main.log"))
        get_logger().info("started")
        assert "shellsuggest:" in (log_dir / "main.log").read_text(encoding="utf-8")
