"""Typer application and CLI entry point for fclicache.

This module defines the single ``fclicache`` command::

    fclicache --ttl SECONDS [--clean] [--cache-dir PATH] 'COMMAND'

It wires CLI flags into an :class:`~fclicache.output.OutputManager`, a
:class:`~fclicache.cache.CacheStore` and
:func:`~fclicache.runner.cache_aware_execute`, then exits with the wrapped
command's exit code.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs signal handlers and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from fclicache import __version__
from fclicache.exit_codes import (
    EXIT_BROKEN_PIPE,
    EXIT_GENERIC_FAILURE,
    EXIT_INTERRUPTED,
)


app = typer.Typer(
    name="fclicache",
    help="Cache the output and exit code of a shell command for a given TTL.",
    add_completion=False,
    rich_markup_mode="rich",
)

_MAX_TTL = 2**64 - 1


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"fclicache {__version__}")
        raise typer.Exit()


def _silence_stdout() -> None:
    """Point stdout at devnull so the interpreter's final flush cannot fail again."""
    try:
        fd = sys.stdout.fileno()
    except (OSError, ValueError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull, fd)
    finally:
        os.close(devnull)


def _configure_logging(verbose: bool, console: Console) -> None:
    """Route the ``fclicache`` loggers to stderr when ``--verbose`` is set.

    Handlers installed by an earlier invocation in the same process are
    dropped first, since they hold a console bound to the old stderr.
    """
    pkg_logger = logging.getLogger("fclicache")
    for handler in list(pkg_logger.handlers):
        if isinstance(handler, RichHandler):
            pkg_logger.removeHandler(handler)
    if not verbose:
        pkg_logger.setLevel(logging.NOTSET)
        return
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG)


@app.command()
def cli(
    command: str = typer.Argument(
        help="Command line to run and cache. Quote it if it contains spaces, "
        "e.g. 'sleep 10 && date'.",
    ),
    ttl: int = typer.Option(
        ...,
        "--ttl",
        "-t",
        min=0,
        max=_MAX_TTL,
        help="Seconds the cached result stays valid.",
    ),
    clean: bool = typer.Option(
        False,
        "--clean",
        "-c",
        help="Ignore any cached result, re-run the command and cache it again.",
    ),
    cache_dir: Optional[str] = typer.Option(
        None,
        "--cache-dir",
        help="Directory holding cache entries (default: $FCLICACHE_CACHE_DIR "
        "or the platform cache directory).",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output on stderr."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Run COMMAND through the shell, or replay its cached result.

    Within the TTL, identical COMMAND strings replay the stored stdout,
    stderr and exit code without running anything. The tool exits with the
    command's own exit code either way.

    Cached output is stored in plaintext; do not cache secrets.
    """
    from fclicache.cache import CacheStore
    from fclicache.config import resolve_cache_config
    from fclicache.exceptions import FclicacheError
    from fclicache.output import OutputManager, error, set_output
    from fclicache.runner import cache_aware_execute

    output = OutputManager(no_color=no_color, verbose=verbose)
    set_output(output)
    _configure_logging(verbose, output.console)

    try:
        store = CacheStore(resolve_cache_config(cache_dir))
        output.debug(f"Cache entry: {store.path_for(command)}")
        exit_code = cache_aware_execute(command, ttl, store, force_renew=clean)
    except FclicacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)
    except BrokenPipeError:
        _silence_stdout()
        raise typer.Exit(code=EXIT_BROKEN_PIPE)

    raise typer.Exit(code=exit_code)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from fclicache.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``fclicache`` console script.

    Known :class:`~fclicache.exceptions.FclicacheError` failures are
    handled inside :func:`cli`. Anything else produces a crash log and a
    generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from fclicache.output import error

        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
