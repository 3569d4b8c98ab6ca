"""Canonical Pydantic models shared across all fclicache modules.

**Persisted state** -- :class:`CacheEntry`, one JSON document per distinct
command under the cache directory.

**Process results** -- :class:`ExecutionResult`, the ``(stdout, stderr,
exit_code)`` triple produced by :mod:`fclicache.executor` and replayed on a
cache hit.

**Configuration** -- :class:`CacheConfig`, handed explicitly to
:class:`~fclicache.cache.CacheStore` so tests can point it at a temporary
directory.

Bytes fields are serialised as base64 in JSON mode so that arbitrary,
non-UTF-8 output round-trips exactly.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

_MAX_UTC = datetime.max.replace(tzinfo=timezone.utc)


class ExecutionResult(BaseModel):
    """Captured outcome of one shell command run.

    A non-zero ``exit_code`` is an ordinary result, cached and replayed like
    any other.
    """

    model_config = ConfigDict(frozen=True)

    stdout: bytes = Field(default=b"", description="Raw bytes written to stdout")
    stderr: bytes = Field(default=b"", description="Raw bytes written to stderr")
    exit_code: int = Field(default=0, description="Process exit code")


class CacheEntry(BaseModel):
    """A single cached command result.

    Entries are immutable once written. Refreshing a command's cache writes a
    brand new entry (new ``created_at``, new TTL, new output) over the old
    file.

    Attributes:
        command: The exact command text used as the cache key. No
            normalisation is applied, so ``"ls -l"`` and ``"ls  -l"`` are
            different entries.
        created_at: UTC wall-clock time at which the entry was written.
        ttl_seconds: Seconds after ``created_at`` during which the entry is
            valid.
        stdout: Captured stdout bytes.
        stderr: Captured stderr bytes.
        exit_code: Captured exit code.
    """

    model_config = ConfigDict(
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    command: str = Field(description="Exact command text (cache key)")
    created_at: datetime = Field(description="UTC creation time")
    ttl_seconds: int = Field(ge=0, description="Validity window in seconds")
    stdout: bytes = Field(default=b"")
    stderr: bytes = Field(default=b"")
    exit_code: int = Field(default=0)

    @property
    def expires_at(self) -> datetime:
        """The first instant at which this entry is no longer valid (UTC).

        TTLs reaching past the largest representable datetime are clamped to
        it, so such entries never expire.
        """
        created = self.created_at
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        try:
            return created + timedelta(seconds=self.ttl_seconds)
        except OverflowError:
            return _MAX_UTC

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Return ``True`` while ``now < created_at + ttl_seconds``.

        Args:
            now: Reference time. Defaults to the current UTC time.
        """
        if now is None:
            now = datetime.now(timezone.utc)
        return now < self.expires_at

    @property
    def result(self) -> ExecutionResult:
        """The cached output as an :class:`ExecutionResult` ready for replay."""
        return ExecutionResult(
            stdout=self.stdout,
            stderr=self.stderr,
            exit_code=self.exit_code,
        )


class CacheConfig(BaseModel):
    """Location of the on-disk cache.

    Built by :func:`~fclicache.config.resolve_cache_config` from CLI flags,
    environment and platform defaults.
    """

    root: Path = Field(description="Directory holding one entry file per command")
