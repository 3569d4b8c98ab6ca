"""Tests for the Pydantic models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from fclicache.models import CacheEntry, ExecutionResult


def _entry(**overrides) -> CacheEntry:
    data = {
        "command": "echo hi",
        "created_at": datetime(2030, 1, 1, tzinfo=timezone.utc),
        "ttl_seconds": 60,
        "stdout": b"hi\n",
        "stderr": b"",
        "exit_code": 0,
    }
    data.update(overrides)
    return CacheEntry(**data)


class TestCacheEntry:
    def test_expires_at(self) -> None:
        entry = _entry()
        assert entry.expires_at == datetime(2030, 1, 1, 0, 1, tzinfo=timezone.utc)

    def test_is_valid_boundaries(self) -> None:
        entry = _entry()
        created = entry.created_at
        assert entry.is_valid(created) is True
        assert entry.is_valid(created + timedelta(seconds=59)) is True
        assert entry.is_valid(created + timedelta(seconds=60)) is False

    def test_naive_created_at_treated_as_utc(self) -> None:
        entry = _entry(created_at=datetime(2030, 1, 1))
        assert entry.is_valid(datetime(2030, 1, 1, 0, 0, 30, tzinfo=timezone.utc)) is True

    def test_negative_ttl_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _entry(ttl_seconds=-1)

    def test_frozen(self) -> None:
        entry = _entry()
        with pytest.raises(ValidationError):
            entry.exit_code = 1  # type: ignore[misc]

    def test_result(self) -> None:
        entry = _entry(stdout=b"o", stderr=b"e", exit_code=9)
        assert entry.result == ExecutionResult(stdout=b"o", stderr=b"e", exit_code=9)

    def test_json_round_trip_binary(self) -> None:
        entry = _entry(stdout=b"\x00\xff\x80abc", stderr=b"\xc3\x28")
        restored = CacheEntry.model_validate_json(entry.model_dump_json())
        assert restored == entry

    def test_huge_ttl_never_expires(self) -> None:
        entry = _entry(ttl_seconds=2**64 - 1)
        assert entry.expires_at == datetime.max.replace(tzinfo=timezone.utc)
        assert entry.is_valid(entry.created_at) is True
        assert entry.is_valid(datetime(9999, 12, 31, tzinfo=timezone.utc)) is True

    def test_ttl_just_past_datetime_range_is_clamped(self) -> None:
        remaining = datetime.max.replace(tzinfo=timezone.utc) - datetime(
            2030, 1, 1, tzinfo=timezone.utc
        )
        entry = _entry(ttl_seconds=remaining.days * 86400 + remaining.seconds + 1)
        assert entry.expires_at == datetime.max.replace(tzinfo=timezone.utc)
