import asyncio

from loguru import logger

from totem_toolkit.exceptions import ConcurrentModificationError
from totem_toolkit.quota import RefreshQuota
from totem_toolkit.reactions.data_models import ReactionHistory, TargetKey
from totem_toolkit.reactions.database import QuotaDatabase, ReactionHistoryDatabase, StoredHistory


class InMemoryReactionHistoryDatabase(ReactionHistoryDatabase):
    """Dict-backed history store. Copies on read and write so callers never share events."""

    def __init__(self) -> None:
        self._histories: dict[str, StoredHistory] = {}
        self._lock = asyncio.Lock()

    async def get_history(self, target: TargetKey) -> StoredHistory:
        async with self._lock:
            stored = self._histories.get(target.key)
            if stored is None:
                return StoredHistory()
            return stored.model_copy(deep=True)

    async def save_history(self, target: TargetKey, history: ReactionHistory, expected_version: int) -> StoredHistory:
        async with self._lock:
            current = self._histories.get(target.key)
            current_version = current.version if current else 0
            if current_version != expected_version:
                raise ConcurrentModificationError(
                    f"History for '{target.key}' is at version {current_version}, expected {expected_version}."
                )
            stored = StoredHistory(
                history=[event.model_copy() for event in history],
                version=current_version + 1,
            )
            self._histories[target.key] = stored
            logger.debug(f"Saved history for '{target.key}' at version {stored.version}")
            return stored.model_copy(deep=True)


class InMemoryQuotaDatabase(QuotaDatabase):
    def __init__(self) -> None:
        self._quotas: dict[str, RefreshQuota] = {}
        self._lock = asyncio.Lock()

    async def get_quota(self, subject_id: str) -> RefreshQuota | None:
        async with self._lock:
            quota = self._quotas.get(subject_id)
            return quota.model_copy() if quota else None

    async def save_quota(self, quota: RefreshQuota, expected_version: int) -> RefreshQuota:
        async with self._lock:
            current = self._quotas.get(quota.subject_id)
            current_version = current.version if current else 0
            if current_version != expected_version:
                raise ConcurrentModificationError(
                    f"Quota for '{quota.subject_id}' is at version {current_version}, expected {expected_version}."
                )
            stored = quota.model_copy(update={"version": current_version + 1})
            self._quotas[quota.subject_id] = stored
            return stored.model_copy()
