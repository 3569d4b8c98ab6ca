"""fclicache -- cache the output of slow shell commands for a fixed TTL.

Running ``fclicache --ttl 60 'some slow command'`` executes the command once,
stores its stdout, stderr and exit code on disk, and replays that result for
every identical invocation during the next 60 seconds.

Typical workflow::

    fclicache --ttl 3600 'curl -s https://example.com/big.json'   # runs
    fclicache --ttl 3600 'curl -s https://example.com/big.json'   # replays

Output is stored in plaintext under the user's cache directory. Do not cache
commands whose output contains secrets.

Modules:
    app: Typer application and CLI entry point.
    runner: Hit/miss orchestration between the store and the executor.
    cache: On-disk :class:`~fclicache.cache.CacheStore`.
    executor: Shell execution, output capture and replay.
    models: Pydantic models shared across the package.
    config: XDG-aware cache directory resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes used by the tool itself.
    output: stderr diagnostics with Rich support.
"""

__version__ = "0.3.0"
