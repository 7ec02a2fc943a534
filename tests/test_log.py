"""Tests for the console logging helpers."""

import pytest

import apisync_log
from apisync_log import echo, error, set_verbosity, warn


@pytest.fixture(autouse=True)
def quiet():
    set_verbosity(False)
    yield
    set_verbosity(False)


class TestLogging:
    """Test verbosity handling and stderr output."""

    def test_echo_silent_by_default(self, capsys) -> None:
        echo("hidden")
        assert capsys.readouterr().out == ""

    def test_echo_when_verbose(self, capsys) -> None:
        set_verbosity(True)

        echo("shown", 3)

        assert apisync_log.VERBOSE is True
        assert capsys.readouterr().out == "shown 3\n"

    def test_warn_always_on_stderr(self, capsys) -> None:
        warn("anchor missing in", "extension.ts")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "Warning: anchor missing in extension.ts\n"

    def test_error_always_on_stderr(self, capsys) -> None:
        error("Error:", "boom")
        assert capsys.readouterr().err == "Error: boom\n"
