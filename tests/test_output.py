"""Tests for the diagnostic output system.

Covers:
- NO_COLOR / TERM=dumb color disabling
- stdout is never touched by diagnostics
- Verbose mode debug output
- Markup in messages is printed literally
- Global instance management
"""

from __future__ import annotations

import pytest

from fclicache import output as output_module
from fclicache.output import (
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    """Ensure the global output instance is reset between tests."""
    reset_output()
    yield
    reset_output()


class TestColorDisabling:
    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True
        assert OutputManager().no_color is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_color_enabled_by_default(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False

    def test_flag(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm")
        assert OutputManager(no_color=True).no_color is True


class TestStreams:
    def test_warning_goes_to_stderr(self, capsys):
        OutputManager(no_color=True).warning("disk full")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "fclicache: warning: disk full\n"

    def test_error_goes_to_stderr(self, capsys):
        OutputManager(no_color=True).error("no shell")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "fclicache: error: no shell\n"

    def test_rich_error_escapes_markup(self, capsys, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm")
        OutputManager().error("bad [bold]path[/bold]")
        assert "[bold]path[/bold]" in capsys.readouterr().err


class TestVerbose:
    def test_debug_hidden_by_default(self, capsys):
        OutputManager(no_color=True).debug("hidden")
        assert capsys.readouterr().err == ""

    def test_debug_shown_when_verbose(self, capsys):
        mgr = OutputManager(no_color=True, verbose=True)
        assert mgr.is_verbose is True
        mgr.debug("visible")
        assert capsys.readouterr().err == "[debug] visible\n"


class TestGlobalInstance:
    def test_get_output_creates_default(self):
        assert isinstance(get_output(), OutputManager)

    def test_set_and_get(self):
        mgr = OutputManager(no_color=True)
        set_output(mgr)
        assert get_output() is mgr

    def test_convenience_functions_delegate(self, capsys):
        set_output(OutputManager(no_color=True, verbose=True))
        output_module.warning("w")
        output_module.error("e")
        output_module.debug("d")
        assert capsys.readouterr().err == (
            "fclicache: warning: w\nfclicache: error: e\n[debug] d\n"
        )
