"""Cache location resolution with XDG paths, atomic writes, and precedence.

This module handles everything fclicache knows about the filesystem outside
the cache entries themselves:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.fclicache/`` on macOS and Windows. See :func:`get_cache_dir`,
  :func:`get_entries_dir` and :func:`get_data_dir`.
* **Precedence resolution** -- :func:`resolve_cache_config` merges the
  ``--cache-dir`` flag, the ``FCLICACHE_CACHE_DIR`` environment variable and
  the platform default into a :class:`~fclicache.models.CacheConfig`.
* **Atomic file writes** -- :func:`atomic_write` uses a temp-file-then-rename
  strategy so concurrent readers never see a partially written file.

Resolving the cache location never creates it; the store creates the
directory on its first write.
"""

from __future__ import annotations

import os
import platform
import tempfile
from pathlib import Path
from typing import Optional

from fclicache.models import CacheConfig

_APP_NAME = "fclicache"
_ENTRIES_DIRNAME = "entries"

CACHE_DIR_ENV_VAR = "FCLICACHE_CACHE_DIR"
"""Environment variable overriding the directory that holds cache entries."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_cache_dir() -> Path:
    """Return the fclicache cache directory without creating it.

    On Linux/BSD: ``$XDG_CACHE_HOME/fclicache/`` (default ``~/.cache/fclicache/``).
    On macOS/Windows: ``~/.fclicache/cache/``.

    Cached data can be safely deleted at any time.
    """
    if _is_xdg_platform():
        return _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    return _fallback_base_dir() / "cache"


def get_entries_dir() -> Path:
    """Return the default directory holding one entry file per command."""
    return get_cache_dir() / _ENTRIES_DIRNAME


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/fclicache/`` (default ``~/.local/share/fclicache/``).
    On macOS/Windows: ``~/.fclicache/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Precedence resolution ---


def resolve_cache_config(cli_cache_dir: Optional[str] = None) -> CacheConfig:
    """Resolve where cache entries live.

    Precedence (high to low):
        1. ``--cache-dir`` CLI flag (``cli_cache_dir``)
        2. ``FCLICACHE_CACHE_DIR`` environment variable
        3. Platform default (:func:`get_entries_dir`)

    Empty values are ignored. ``~`` is expanded in explicit paths.

    Returns:
        A :class:`~fclicache.models.CacheConfig` whose ``root`` may not
        exist yet.
    """
    if cli_cache_dir:
        return CacheConfig(root=Path(cli_cache_dir).expanduser())
    env_dir = os.environ.get(CACHE_DIR_ENV_VAR, "")
    if env_dir:
        return CacheConfig(root=Path(env_dir).expanduser())
    return CacheConfig(root=get_entries_dir())


# --- Atomic file writes ---


def atomic_write(path: Path, data: bytes, mode: int = 0o600) -> None:
    """Write *data* to *path* atomically using temp file + rename.

    The parent directory is created if missing. The temporary file lives in
    the same directory as *path* so that ``os.replace`` is an atomic rename
    on POSIX systems. Permissions are restricted to *mode* before any content
    is written. On any failure the temp file is removed and the error is
    re-raised.

    Raises:
        OSError: If the directory or file cannot be created or written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
        tmp_path = fd.name
        os.chmod(tmp_path, mode)
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise
