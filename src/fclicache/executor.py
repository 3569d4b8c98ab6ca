"""Shell execution, output capture and replay.

:func:`execute` hands the command string to the platform shell
(``/bin/sh -c`` on POSIX) so pipes, ``&&``, globbing and redirections behave
exactly as at an interactive prompt. stdout and stderr are captured as raw
bytes; nothing is decoded. stdin is inherited from the calling process.

:func:`replay` writes a captured result back to the caller's own streams,
byte for byte. It serves both fresh runs and cache hits.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import BinaryIO, Optional

from fclicache.exceptions import ExecError
from fclicache.models import ExecutionResult

logger = logging.getLogger(__name__)


def _normalise_returncode(returncode: int) -> int:
    """Map ``subprocess`` return codes to shell-style exit codes.

    A child killed by signal N is reported by Python as ``-N``; shells report
    it as ``128 + N``.
    """
    if returncode < 0:
        return 128 - returncode
    return returncode


def execute(command: str) -> ExecutionResult:
    """Run *command* through the system shell and capture its outcome.

    Blocks until the child process exits. A non-zero exit code is a normal
    result, not an error.

    Args:
        command: The full command line, passed verbatim to the shell.

    Returns:
        The captured stdout, stderr and exit code.

    Raises:
        ExecError: If the shell itself cannot be launched.
    """
    logger.debug("executing: %s", command)
    try:
        completed = subprocess.run(
            command,
            shell=True,
            capture_output=True,
        )
    except OSError as exc:
        raise ExecError(f"Cannot launch shell for command {command!r}: {exc}") from exc

    exit_code = _normalise_returncode(completed.returncode)
    logger.debug(
        "command exited with %d (%d bytes stdout, %d bytes stderr)",
        exit_code,
        len(completed.stdout),
        len(completed.stderr),
    )
    return ExecutionResult(
        stdout=completed.stdout,
        stderr=completed.stderr,
        exit_code=exit_code,
    )


def _binary_stream(stream: object) -> BinaryIO:
    """Return the byte layer of a text stream such as ``sys.stdout``."""
    # Flush pending text first so nothing written earlier ends up reordered.
    flush = getattr(stream, "flush", None)
    if flush is not None:
        flush()
    return getattr(stream, "buffer", stream)  # type: ignore[return-value]


def replay(
    result: ExecutionResult,
    stdout: Optional[BinaryIO] = None,
    stderr: Optional[BinaryIO] = None,
) -> None:
    """Write *result*'s captured bytes to the given binary streams.

    Args:
        result: The output to forward.
        stdout: Destination for captured stdout. Defaults to the byte layer
            of ``sys.stdout``.
        stderr: Destination for captured stderr. Defaults to the byte layer
            of ``sys.stderr``.
    """
    out = stdout if stdout is not None else _binary_stream(sys.stdout)
    err = stderr if stderr is not None else _binary_stream(sys.stderr)
    if result.stdout:
        out.write(result.stdout)
    out.flush()
    if result.stderr:
        err.write(result.stderr)
    err.flush()
