"""On-disk store of command results with TTL-based validity.

Each distinct command string maps to exactly one JSON file,
``<root>/<sha256(command)>.json``, holding a serialised
:class:`~fclicache.models.CacheEntry`. Storage therefore grows with the
number of distinct commands, not with the number of invocations.

Expired entries are never deleted proactively. :meth:`CacheStore.lookup`
ignores them and the next :meth:`CacheStore.store` overwrites them in place.

See Also:
    :func:`fclicache.config.atomic_write` -- the temp-file-then-rename write
    used for every entry.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from fclicache.config import atomic_write
from fclicache.exceptions import StoreError
from fclicache.models import CacheConfig, CacheEntry

logger = logging.getLogger(__name__)

_ENTRY_SUFFIX = ".json"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _recorded_command(command: str) -> str:
    """Command text as stored in the entry.

    Undecodable argv bytes reach Python as lone surrogates, which JSON cannot
    carry; they are recorded as backslash escapes instead.
    """
    return command.encode("utf-8", "backslashreplace").decode("utf-8")


class CacheStore:
    """Durable key-value store of command results.

    Args:
        config: Where entries live. The directory is created on the first
            :meth:`store` call, not here.

    Example::

        from fclicache.cache import CacheStore
        from fclicache.models import CacheConfig

        store = CacheStore(CacheConfig(root=Path("/tmp/fclicache")))
        store.store("date", b"Mon Oct 19\\n", b"", 0, ttl_seconds=60)
        hit = store.lookup("date")
    """

    def __init__(self, config: CacheConfig) -> None:
        self._config = config

    @property
    def root(self) -> Path:
        """Directory holding the entry files."""
        return self._config.root

    def path_for(self, command: str) -> Path:
        """Return the entry file location for *command*."""
        return self.root / f"{self._make_key(command)}{_ENTRY_SUFFIX}"

    def lookup(self, command: str) -> Optional[CacheEntry]:
        """Return the valid cached entry for *command*, or ``None``.

        A missing, unreadable, corrupt or truncated file, an expired entry,
        and an entry recorded for a different command string all count as a
        miss. This method never raises for those conditions and never
        modifies the store.
        """
        path = self.path_for(command)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.debug("cache miss (no entry): %s", path)
            return None
        except OSError as exc:
            logger.debug("cache miss (unreadable entry %s): %s", path, exc)
            return None

        try:
            entry = CacheEntry.model_validate_json(raw)
        except ValidationError as exc:
            logger.debug(
                "cache miss (corrupt entry %s): %d validation error(s)",
                path,
                exc.error_count(),
            )
            return None

        if entry.command != _recorded_command(command):
            logger.debug("cache miss (key collision at %s)", path)
            return None

        if not entry.is_valid(_utcnow()):
            logger.debug("cache miss (expired at %s): %s", entry.expires_at.isoformat(), path)
            return None

        logger.debug("cache hit: %s", path)
        return entry

    def store(
        self,
        command: str,
        stdout: bytes,
        stderr: bytes,
        exit_code: int,
        ttl_seconds: int,
    ) -> CacheEntry:
        """Persist a new entry for *command*, replacing any previous one.

        The entry is stamped with the current UTC time and written atomically
        with ``0o600`` permissions, so a concurrent :meth:`lookup` sees either
        the old entry or the new one, never a partial file.

        Returns:
            The entry that was written.

        Raises:
            StoreError: If the cache directory cannot be created or the entry
                cannot be written.
        """
        entry = CacheEntry(
            command=_recorded_command(command),
            created_at=_utcnow(),
            ttl_seconds=ttl_seconds,
            stdout=stdout,
            stderr=stderr,
            exit_code=exit_code,
        )
        path = self.path_for(command)
        try:
            atomic_write(path, entry.model_dump_json().encode("utf-8"))
        except (OSError, ValueError) as exc:
            raise StoreError(f"Cannot write cache entry {path}: {exc}") from exc
        logger.debug("cached result (exit %d, ttl %ds): %s", exit_code, ttl_seconds, path)
        return entry

    def _make_key(self, command: str) -> str:
        """SHA-256 hex digest of the exact command text."""
        return hashlib.sha256(command.encode("utf-8", "surrogatepass")).hexdigest()
