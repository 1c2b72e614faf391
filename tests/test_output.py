"""Tests for the output system.

Covers format resolution, stdout/stderr discipline, quiet and verbose
modes, the key/value table, and the global instance helpers.
"""

from __future__ import annotations

import json

import pytest

from reactiveapi import output as output_module
from reactiveapi.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


@pytest.fixture(autouse=True)
def _reset_global_output():
    reset_output()
    yield
    reset_output()


@pytest.fixture()
def non_tty(monkeypatch):
    monkeypatch.setattr("reactiveapi.output._is_tty", lambda: False)


class TestFormatResolution:
    def test_auto_is_plain_off_tty(self, non_tty) -> None:
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_is_rich_on_tty(self, monkeypatch) -> None:
        monkeypatch.setattr("reactiveapi.output._is_tty", lambda: True)
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)

        assert OutputManager().format == OutputFormat.RICH

    def test_no_color_forces_plain_on_tty(self, monkeypatch) -> None:
        monkeypatch.setattr("reactiveapi.output._is_tty", lambda: True)

        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format_wins(self, non_tty) -> None:
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON


class TestColorDetection:
    def test_no_color_env(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "")

        assert _should_disable_color()

    def test_dumb_terminal(self, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")

        assert _should_disable_color()

    def test_default(self, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")

        assert not _should_disable_color()


class TestFormatResponse:
    def test_json_mode(self, capsys) -> None:
        OutputManager(format=OutputFormat.JSON).format_response({"id": 1, "tags": ["a"]})

        captured = capsys.readouterr()
        assert json.loads(captured.out) == {"id": 1, "tags": ["a"]}
        assert captured.err == ""

    def test_json_string_is_reparsed(self, capsys) -> None:
        OutputManager(format=OutputFormat.JSON).format_response('{"a": 1}')

        assert json.loads(capsys.readouterr().out) == {"a": 1}

    def test_plain_dict(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_response({"id": 1, "name": "Ann"})

        assert capsys.readouterr().out == "id\t1\nname\tAnn\n"

    def test_plain_list_of_dicts(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_response([{"id": 1, "n": "a"}, 2])

        assert capsys.readouterr().out == "1\ta\n2\n"

    def test_plain_text(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN).format_response("pong")

        assert capsys.readouterr().out == "pong\n"


class TestPrintTable:
    def test_json(self, capsys) -> None:
        OutputManager(format=OutputFormat.JSON).print_table({"size": 3, "enabled": True})

        assert json.loads(capsys.readouterr().out) == {"size": 3, "enabled": True}

    def test_plain(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN).print_table({"size": 3})

        assert capsys.readouterr().out == "size\t3\n"


class TestDiagnostics:
    def test_info_goes_to_stderr(self, capsys) -> None:
        OutputManager(format=OutputFormat.PLAIN, no_color=True).info("working")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "working\n"

    def test_quiet_suppresses_info_and_success(self, capsys) -> None:
        manager = OutputManager(no_color=True, quiet=True)
        manager.info("i")
        manager.success("s")
        manager.suggest("next")

        assert capsys.readouterr().err == ""

    def test_quiet_keeps_warnings_and_errors(self, capsys) -> None:
        manager = OutputManager(no_color=True, quiet=True)
        manager.warning("careful")
        manager.error("boom")

        assert capsys.readouterr().err == "Warning: careful\nError: boom\n"

    def test_debug_only_when_verbose(self, capsys) -> None:
        OutputManager(no_color=True).debug("hidden")
        OutputManager(no_color=True, verbose=True).debug("shown")

        assert capsys.readouterr().err == "[debug] shown\n"

    def test_suggest_prefix(self, capsys) -> None:
        OutputManager(no_color=True).suggest("run init")

        assert capsys.readouterr().err == "→ run init\n"


class TestGlobalInstance:
    def test_lazy_default(self) -> None:
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_and_reset(self) -> None:
        manager = OutputManager(format=OutputFormat.JSON)
        set_output(manager)
        assert get_output() is manager

        reset_output()
        assert get_output() is not manager

    def test_module_helpers_delegate(self, capsys) -> None:
        set_output(OutputManager(format=OutputFormat.JSON, no_color=True))

        output_module.format_response([1, 2])
        output_module.error("bad")

        captured = capsys.readouterr()
        assert json.loads(captured.out) == [1, 2]
        assert captured.err == "Error: bad\n"
