"""Terminal output for the ``reactiveapi`` command line.

Data and diagnostics go to different streams:

* **stdout** carries response payloads and command results only, so the
  CLI can be piped into ``jq`` and friends.
* **stderr** carries status lines, warnings, errors and debug messages.

Formatting is Rich when stdout is an interactive terminal and plain text
otherwise.  ``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` disable colour.

:class:`OutputManager` holds the preferences; it is created in
:func:`~reactiveapi.app.main_callback` and installed with
:func:`set_output`.  The module-level helpers delegate to whichever
manager is installed.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """Supported output formats.

    ``AUTO`` becomes ``RICH`` on a colour-capable TTY and ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Routes CLI output to stdout or stderr in the resolved format.

    Args:
        format: Requested format; ``AUTO`` is resolved at construction.
        no_color: Disable colour and Rich markup.
        quiet: Suppress informational and success messages.
        verbose: Show debug messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            self._format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    # ------------------------------------------------------------------ #
    # stdout
    # ------------------------------------------------------------------ #

    def format_response(self, data: Any) -> None:
        """Render a decoded response payload to stdout.

        Strings that hold JSON are re-parsed so they are pretty-printed like
        any other structured payload.
        """
        data = _maybe_json(data)
        if self._format == OutputFormat.JSON:
            self.print_data(_dumps(data))
        elif self._format == OutputFormat.PLAIN:
            for line in _plain_lines(data):
                self.print_data(line)
        elif isinstance(data, (dict, list)):
            self._stdout.print(Syntax(_dumps(data), "json", theme="monokai", word_wrap=True))
        else:
            self._stdout.print(str(data))

    def print_data(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def print_table(self, rows: dict[str, Any], title: Optional[str] = None) -> None:
        """Print key/value pairs as a two-column table (or a JSON object)."""
        if self._format == OutputFormat.JSON:
            self.print_data(_dumps(rows))
        elif self._format == OutputFormat.PLAIN:
            for key, value in rows.items():
                self.print_data(f"{key}\t{value}")
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            table.add_column("Key")
            table.add_column("Value")
            for key, value in rows.items():
                table.add_row(str(key), str(value))
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # stderr
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._diagnostic(message, markup="green")

    def warning(self, message: str) -> None:
        """Print a warning.  Shown even in quiet mode."""
        self._diagnostic(message, markup="yellow", prefix="Warning:")

    def error(self, message: str) -> None:
        """Print an error.  Always shown."""
        self._diagnostic(message, markup="bold red", prefix="Error:")

    def suggest(self, message: str) -> None:
        """Print a dimmed next-step hint."""
        if not self._quiet:
            self._diagnostic(f"→ {message}", markup="dim")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._diagnostic(message, markup="dim", prefix="[debug]")

    def _diagnostic(
        self, message: str, markup: Optional[str] = None, prefix: Optional[str] = None
    ) -> None:
        if self._no_color or markup is None:
            text = f"{prefix} {message}" if prefix else message
            print(text, file=sys.stderr, flush=True)
            return
        if prefix:
            # Escape the bracket so Rich does not read "[debug]" as a style tag.
            label = prefix.replace("[", "\\[")
            self._stderr.print(f"[{markup}]{label}[/{markup}] {message}")
        else:
            self._stderr.print(f"[{markup}]{message}[/{markup}]")


def _dumps(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def _maybe_json(data: Any) -> Any:
    if isinstance(data, str):
        try:
            return json.loads(data)
        except ValueError:
            return data
    return data


def _plain_lines(data: Any) -> list[str]:
    if isinstance(data, dict):
        return [f"{key}\t{value}" for key, value in data.items()]
    if isinstance(data, list):
        return [
            "\t".join(str(v) for v in item.values()) if isinstance(item, dict) else str(item)
            for item in data
        ]
    return [str(data)]


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the installed :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the installed manager.  Used by the test suite between tests."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def print_data(text: str) -> None:
    get_output().print_data(text)


def print_table(rows: dict[str, Any], title: Optional[str] = None) -> None:
    get_output().print_table(rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def suggest(message: str) -> None:
    get_output().suggest(message)


def debug(message: str) -> None:
    get_output().debug(message)
