"""
Unit tests for the in-memory stores and the history cache
"""
import pytest

from totem_toolkit.cache import HistoryCache
from totem_toolkit.exceptions import ConcurrentModificationError
from totem_toolkit.quota import RefreshQuota
from totem_toolkit.reactions.database import StoredHistory

from tests.helpers import NOW, make_event


@pytest.mark.asyncio
async def test_missing_history_is_empty_at_version_zero(history_db, target):
    stored = await history_db.get_history(target)

    assert stored.history == []
    assert stored.version == 0


@pytest.mark.asyncio
async def test_save_bumps_version(history_db, target):
    saved = await history_db.save_history(target, [make_event("alice", original=NOW)], expected_version=0)
    stored = await history_db.get_history(target)

    assert saved.version == 1
    assert stored.version == 1
    assert stored.history[0].subject_id == "alice"


@pytest.mark.asyncio
async def test_stale_write_is_rejected(history_db, target):
    await history_db.save_history(target, [make_event("alice", original=NOW)], expected_version=0)

    with pytest.raises(ConcurrentModificationError):
        await history_db.save_history(target, [], expected_version=0)
    assert len((await history_db.get_history(target)).history) == 1


@pytest.mark.asyncio
async def test_reads_are_copies(history_db, target):
    await history_db.save_history(target, [make_event("alice", original=NOW)], expected_version=0)

    stored = await history_db.get_history(target)
    stored.history[0].is_active = False

    assert (await history_db.get_history(target)).history[0].is_active


@pytest.mark.asyncio
async def test_quota_round_trip(quota_db):
    assert await quota_db.get_quota("alice") is None

    await quota_db.save_quota(RefreshQuota.new("alice", NOW, daily_allowance=2), expected_version=0)

    assert (await quota_db.get_quota("alice")).refreshes_remaining == 2


def test_cache_set_get_invalidate():
    cache = HistoryCache(ttl_seconds=60)
    stored = StoredHistory(history=[make_event("alice", original=NOW)], version=1)

    cache.set("k", stored)
    assert cache.get("k") is stored
    assert len(cache) == 1

    cache.invalidate("k")
    assert cache.get("k") is None
    cache.invalidate("k")


def test_cache_expires_entries():
    ticks = iter([100.0, 100.5, 200.0])
    cache = HistoryCache(ttl_seconds=10, timer=lambda: next(ticks))

    cache.set("k", StoredHistory())
    assert cache.get("k") is not None
    assert cache.get("k") is None
    assert len(cache) == 0


def test_cache_without_ttl_keeps_entries():
    cache = HistoryCache(ttl_seconds=0)
    cache.set("k", StoredHistory())

    assert cache.get("k") is not None
    cache.clear()
    assert cache.get("k") is None


@pytest.mark.asyncio
async def test_stale_quota_write_is_rejected(quota_db):
    saved = await quota_db.save_quota(RefreshQuota.new("alice", NOW, daily_allowance=2), expected_version=0)
    assert saved.version == 1

    await quota_db.save_quota(saved.model_copy(update={"refreshes_remaining": 1}), expected_version=1)
    with pytest.raises(ConcurrentModificationError):
        await quota_db.save_quota(saved.model_copy(update={"refreshes_remaining": 1}), expected_version=1)

    stored = await quota_db.get_quota("alice")
    assert stored.refreshes_remaining == 1
    assert stored.version == 2


class CountingLock:
    def __init__(self) -> None:
        self.entered = 0

    def __enter__(self):
        self.entered += 1

    def __exit__(self, *exc):
        return False


def test_cache_len_takes_the_lock():
    cache = HistoryCache(ttl_seconds=0)
    cache.set("k", StoredHistory())
    lock = CountingLock()
    cache._lock = lock

    assert len(cache) == 1
    assert lock.entered == 1
