"""
Tests for observability — logging setup and console output.
"""

import logging

import pytest

from fetchlog_deploy.core.observability import console
from fetchlog_deploy.core.observability.logging_config import (
    ConsoleTagFormatter,
    configure_from_environment,
    level_number,
    resolve_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(level, msg="pip fallback applied"):
    return logging.LogRecord("fetchlog_deploy.x", level, "x.py", 12, msg, None, None)


# ── Logging ──────────────────────────────────────────────────────────


class TestSetupLogging:
    def test_default_is_warning(self):
        setup_logging()
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1

    def test_debug(self):
        setup_logging("debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_file_handler_with_own_level(self, tmp_path):
        log_file = tmp_path / "deploy.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("fetchlog_deploy.test").debug("pip fallback applied")
        for handler in root.handlers:
            handler.flush()
        assert "pip fallback applied" in log_file.read_text()

    def test_file_level_defaults_to_console_level(self, tmp_path):
        setup_logging("INFO", log_file=str(tmp_path / "deploy.log"))
        assert [h.level for h in logging.getLogger().handlers] == [logging.INFO, logging.INFO]

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_file_settings_from_environment(self, tmp_path):
        log_file = tmp_path / "deploy.log"
        configure_from_environment(
            logging.WARNING,
            {"FETCHLOG_LOG_FILE": str(log_file), "FETCHLOG_LOG_FILE_LEVEL": "debug"},
        )
        levels = sorted(h.level for h in logging.getLogger().handlers)
        assert levels == [logging.DEBUG, logging.WARNING]

    def test_empty_log_file_variable_ignored(self):
        configure_from_environment(logging.WARNING, {"FETCHLOG_LOG_FILE": ""})
        assert len(logging.getLogger().handlers) == 1


class TestConsoleTagFormatter:
    def test_quiet_lines_match_console_tags(self):
        formatter = ConsoleTagFormatter(logging.WARNING)
        assert formatter.format(_record(logging.WARNING)) == "[WARN]  pip fallback applied"
        assert formatter.format(_record(logging.ERROR)) == "[ERROR] pip fallback applied"

    def test_verbose_adds_logger_name(self):
        formatter = ConsoleTagFormatter(logging.INFO)
        assert formatter.format(_record(logging.INFO)) == (
            "[INFO]  fetchlog_deploy.x  pip fallback applied"
        )

    def test_debug_adds_line_number(self):
        formatter = ConsoleTagFormatter(logging.DEBUG)
        assert formatter.format(_record(logging.DEBUG)).startswith("[DEBUG] fetchlog_deploy.x:12")


class TestResolveLevel:
    def test_flags_beat_environment(self):
        environ = {"FETCHLOG_LOG_LEVEL": "ERROR"}
        assert resolve_level(debug=True, environ=environ) == logging.DEBUG
        assert resolve_level(verbose=True, environ=environ) == logging.INFO

    def test_debug_beats_quiet(self):
        assert resolve_level(debug=True, quiet=True) == logging.DEBUG

    def test_quiet(self):
        assert resolve_level(quiet=True, environ={"FETCHLOG_LOG_LEVEL": "DEBUG"}) == logging.ERROR

    def test_environment_used_without_flags(self):
        assert resolve_level(environ={"FETCHLOG_LOG_LEVEL": "info"}) == logging.INFO

    def test_default_warning(self):
        assert resolve_level() == logging.WARNING

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("INFO", logging.INFO),
            ("error", logging.ERROR),
            (" debug ", logging.DEBUG),
            (logging.ERROR, logging.ERROR),
            ("", logging.WARNING),
            (None, logging.WARNING),
            ("chatty", logging.WARNING),
        ],
    )
    def test_level_number(self, value, expected):
        assert level_number(value) == expected


# ── Console ──────────────────────────────────────────────────────────


class TestConsole:
    def test_streams(self, capsys):
        console.info("probing")
        console.success("done")
        console.warn("careful")
        console.error("broken")

        captured = capsys.readouterr()
        assert captured.out == "[INFO]  probing\n[OK]    done\n"
        assert captured.err == "[WARN]  careful\n[ERROR] broken\n"

    def test_banner(self, capsys):
        console.banner("Service Installation")
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["=" * 40, "  FetchLog - Service Installation", "=" * 40]

    def test_diagnostic_is_verbatim(self, capsys):
        text = "  File \"x.py\", line 1\n    pip: error: weird   spacing\n"
        console.diagnostic(text)
        assert capsys.readouterr().err == text

    def test_empty_output_prints_nothing(self, capsys):
        console.diagnostic("")
        console.raw("")
        captured = capsys.readouterr()
        assert captured.out == "" and captured.err == ""
