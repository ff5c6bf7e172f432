"""Tests for core/cache.py."""

from __future__ import annotations

import pytest

from ticketboard.core import cache as keys
from ticketboard.core.cache import CacheStore


class TestCacheStore:
    def test_missing_key_returns_default(self, cache: CacheStore):
        assert cache.get(keys.MEMBERS) is None
        assert cache.get(keys.MEMBERS, []) == []

    def test_set_then_get(self, cache: CacheStore):
        cache.set(keys.UNASSIGNED_TICKET_NUMBERS, ["812", "813"])
        assert cache.get(keys.UNASSIGNED_TICKET_NUMBERS) == ["812", "813"]

    def test_set_overwrites(self, cache: CacheStore):
        cache.set(keys.METRICS_ROWS, [{"a": 1}])
        cache.set(keys.METRICS_ROWS, [{"b": 2}])
        assert cache.get(keys.METRICS_ROWS) == [{"b": 2}]

    def test_corrupt_file_returns_default(self, cache: CacheStore):
        cache.directory.mkdir(parents=True)
        (cache.directory / "members.json").write_text("{not json", encoding="utf-8")
        assert cache.get(keys.MEMBERS, []) == []

    def test_bom_is_tolerated(self, cache: CacheStore):
        cache.directory.mkdir(parents=True)
        (cache.directory / "departments.json").write_text('\ufeff[{"id": "1"}]', encoding="utf-8")
        assert cache.get(keys.DEPARTMENTS) == [{"id": "1"}]

    def test_no_temp_files_left_behind(self, cache: CacheStore):
        cache.set(keys.DEPARTMENTS, [])
        assert [p.name for p in cache.directory.iterdir()] == ["departments.json"]

    def test_remove(self, cache: CacheStore):
        cache.set(keys.DEPARTMENTS, [{"id": "1"}])
        cache.remove(keys.DEPARTMENTS)
        assert cache.get(keys.DEPARTMENTS) is None
        cache.remove(keys.DEPARTMENTS)

    def test_keys_and_clear(self, cache: CacheStore):
        assert cache.keys() == []
        cache.set(keys.MEMBERS, [])
        cache.set(keys.DEPARTMENTS, [])
        assert cache.keys() == ["departments", "members"]
        assert cache.clear() == 2
        assert cache.keys() == []

    def test_invalid_key_rejected(self, cache: CacheStore):
        with pytest.raises(ValueError, match="Invalid cache key"):
            cache.set("../escape", 1)

    def test_known_keys_are_valid(self, cache: CacheStore):
        for key in keys.ALL_KEYS:
            cache.set(key, None)
        assert len(cache.keys()) == len(keys.ALL_KEYS)
