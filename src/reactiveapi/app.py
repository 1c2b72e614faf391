"""Typer application and console entry point for reactiveapi.

The command line is a thin shell over the library: ``request`` builds a
:class:`~reactiveapi.client.api.JSONReactiveAPI` from the active profile and
runs one call through the pipeline; ``init``, ``cache`` and ``config``
manage the state that call depends on.

:func:`main` is the console-script entry point declared in
``pyproject.toml``.  It installs a SIGINT handler and invokes the
app.  :class:`~reactiveapi.exceptions.ReactiveAPIError`
exits with the error's own exit code; anything else is written to a crash
log under the data directory.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from reactiveapi import __version__
from reactiveapi.exit_codes import EXIT_CANCELLED, EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="reactiveapi",
    help="Call JSON REST APIs through the reactiveapi pipeline.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from reactiveapi.commands.cache import cache_app  # noqa: E402
from reactiveapi.commands.config import config_app  # noqa: E402
from reactiveapi.commands.init import init_command  # noqa: E402
from reactiveapi.commands.request import request_command  # noqa: E402

app.command("request")(request_command)
app.command("init")(init_command)
app.add_typer(cache_app, name="cache", help="Response cache management.")
app.add_typer(config_app, name="config", help="Configuration management.")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"reactiveapi {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Profile name to use."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output and library logging."
    ),
) -> None:
    """Install the output manager and share global flags via ``ctx.obj``."""
    from reactiveapi.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    if verbose:
        _configure_logging()

    ctx.ensure_object(dict)
    ctx.obj["profile"] = profile
    ctx.obj["verbose"] = verbose


def _configure_logging() -> None:
    """Send the library's DEBUG records to stderr."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger = logging.getLogger("reactiveapi")
    logger.setLevel(logging.DEBUG)
    if not logger.handlers:
        logger.addHandler(handler)


def _setup_signal_handlers() -> None:
    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log() -> str:
    """Write the current traceback under ``<data dir>/logs`` and return its path."""
    from reactiveapi.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / f"crash-{datetime.now().strftime('%Y%m%d-%H%M%S')}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """Console-script entry point.

    Raises:
        SystemExit: Always, with the command's exit code.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except (KeyboardInterrupt, asyncio.CancelledError):
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_CANCELLED)
    except Exception as exc:
        from reactiveapi.exceptions import ReactiveAPIError
        from reactiveapi.output import error

        if isinstance(exc, ReactiveAPIError):
            error(str(exc))
            sys.exit(exc.exit_code)

        log_path = _write_crash_log()
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
