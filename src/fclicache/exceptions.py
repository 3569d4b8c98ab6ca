"""Exception hierarchy for fclicache.

All exceptions inherit from :class:`FclicacheError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`fclicache.exit_codes`.
The CLI command in :func:`fclicache.app.cli` catches ``FclicacheError``,
prints it and exits with the appropriate code.

Subclass hierarchy::

    FclicacheError (exit 1)
    +-- ExecError           (exit 125)
    +-- StoreError          (exit 1, caught by the runner)
"""

from fclicache.exit_codes import EXIT_EXEC_FAILURE, EXIT_GENERIC_FAILURE


class FclicacheError(Exception):
    """Base exception for all fclicache errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ExecError(FclicacheError):
    """Raised when the system shell cannot be spawned.

    A command that runs and exits non-zero is *not* an ``ExecError``; its
    exit code is an ordinary, cacheable result.
    """

    exit_code = EXIT_EXEC_FAILURE


class StoreError(FclicacheError):
    """Raised when a cache entry cannot be written (permissions, disk full, bad path).

    The runner reports it as a warning and carries on: the command output has
    already been delivered, it just will not be reused next time.
    """

    exit_code = EXIT_GENERIC_FAILURE
