"""Numeric exit codes used by fclicache itself.

On both the cache-hit and cache-miss paths fclicache exits with the wrapped
command's own exit code. The constants below are only used when the tool
fails before a command result exists, so shell wrappers can tell a broken
invocation apart from the command's normal failures.

Example::

    $ fclicache --ttl 60 'exit 7'
    $ echo $?
    7     # the command's code, replayed from cache on later runs

    $ fclicache --ttl -1 'true'
    $ echo $?
    2     # EXIT_INVALID_USAGE -- TTL must be non-negative
"""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred inside fclicache."""

EXIT_INVALID_USAGE = 2
"""The tool was invoked with invalid arguments or missing required options."""

EXIT_EXEC_FAILURE = 125
"""The system shell could not be launched, so no command result exists."""

EXIT_INTERRUPTED = 130
"""Interrupted by Ctrl-C (128 + SIGINT)."""

EXIT_BROKEN_PIPE = 141
"""The reader of stdout went away mid-write (128 + SIGPIPE)."""
