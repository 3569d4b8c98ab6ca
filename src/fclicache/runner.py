"""Cache-aware command execution.

:func:`cache_aware_execute` is the whole hit/miss decision:

1. Look up a valid entry for the command. On a hit, replay it and return its
   exit code without running anything.
2. On a miss, run the command and replay its output immediately.
3. Try to store the result, even if the replay failed. A failed write is
   reported as a warning and otherwise ignored.
4. Return the command's exit code.

There is no coordination between concurrent invocations. Two simultaneous
misses both run the command and the last write wins.
"""

from __future__ import annotations

from typing import BinaryIO, Optional

from fclicache.cache import CacheStore
from fclicache.exceptions import StoreError
from fclicache.executor import execute, replay
from fclicache.models import ExecutionResult
from fclicache.output import debug, warning


def cache_aware_execute(
    command: str,
    ttl_seconds: int,
    store: CacheStore,
    *,
    force_renew: bool = False,
    stdout: Optional[BinaryIO] = None,
    stderr: Optional[BinaryIO] = None,
) -> int:
    """Replay a cached result for *command* or run it and cache the result.

    Args:
        command: Command line handed verbatim to the shell and used as the
            cache key.
        ttl_seconds: Validity of a freshly stored entry.
        store: Where entries are looked up and written.
        force_renew: Skip the lookup and always run the command, replacing
            any cached entry.
        stdout: Binary stream receiving the command's stdout. Defaults to
            the process's own stdout.
        stderr: Binary stream receiving the command's stderr. Defaults to
            the process's own stderr.

    Returns:
        The exit code of the command, live or cached.

    Raises:
        ExecError: If the shell cannot be launched.
    """
    if not force_renew:
        entry = store.lookup(command)
        if entry is not None:
            debug(f"Replaying cached result from {entry.created_at.isoformat()}")
            replay(entry.result, stdout, stderr)
            return entry.exit_code
    else:
        debug("Cache renewal requested, skipping lookup")

    result = execute(command)
    try:
        replay(result, stdout, stderr)
    finally:
        _store_result(store, command, result, ttl_seconds)

    return result.exit_code


def _store_result(
    store: CacheStore,
    command: str,
    result: ExecutionResult,
    ttl_seconds: int,
) -> None:
    """Write *result* to the cache, downgrading a failed write to a warning.

    Also runs when the replay was cut short (e.g. a closed pipe), since the
    command already ran and its side effects should not be repeated.
    """
    try:
        store.store(
            command,
            result.stdout,
            result.stderr,
            result.exit_code,
            ttl_seconds,
        )
    except StoreError as exc:
        warning(f"{exc} (result not cached)")
