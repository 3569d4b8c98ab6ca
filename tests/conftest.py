"""Shared test fixtures for fclicache.

Provides reusable fixtures for isolating the cache and data directories,
building stores against temporary paths, managing output state, and running
the CLI. These fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from fclicache.cache import CacheStore
from fclicache.models import CacheConfig
from fclicache.output import OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches a reference to sys.stderr at creation time.
    When Typer's CliRunner redirects the stream and the test finishes, the
    cached reference becomes stale. Resetting forces a fresh manager to be
    created on next use.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _reset_logging_between_tests() -> None:
    """Drop handlers installed by --verbose so they never outlive their stream."""
    yield
    pkg_logger = logging.getLogger("fclicache")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate cache and data directories to a temporary directory.

    Sets XDG_CACHE_HOME and XDG_DATA_HOME to subdirectories of tmp_path,
    clears FCLICACHE_CACHE_DIR, and changes the working directory to
    tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("FCLICACHE_CACHE_DIR", raising=False)
    monkeypatch.setattr("fclicache.config._is_xdg_platform", lambda: True)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Directory for cache entries (not created up front)."""
    return tmp_path / "entries"


@pytest.fixture
def store(cache_root: Path) -> CacheStore:
    """A CacheStore writing into a temporary directory."""
    return CacheStore(CacheConfig(root=cache_root))


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless OutputManager so stderr assertions see plain text."""
    output = OutputManager(no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
