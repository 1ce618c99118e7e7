"""
Totem reaction controller (Facade).

'TotemReactionController' is the single entry point a host application calls
from its UI action handlers. It coordinates two pluggable repositories, the
history cache and the state machine to handle one reaction intent end to end:

    1. reject anonymous callers before touching storage
    2. read the target's history (and, for refresh, the subject's quota,
       replenished if its reset time has passed)
    3. run 'apply_reaction'
    4. for refresh, spend the quota unit with compare-and-swap
    5. write the history back with compare-and-swap, refunding the quota
       unit if that write does not go through
    6. invalidate the cached history

Steps 2-5 are retried when either compare-and-swap loses. Every outcome,
including conflicts that outlast the retries and store failures, is returned
as a 'ReactionResult'; nothing is raised to the caller.

'get_summary' is the read path: like count and crispness for display,
recomputed on every call from the (possibly cached) history.
"""

from collections.abc import Callable

from loguru import logger

from totem_toolkit.cache import HistoryCache
from totem_toolkit.exceptions import ConcurrentModificationError, ReactionErrorKind
from totem_toolkit.quota import RefreshQuota
from totem_toolkit.reactions.data_models import ReactionIntent, ReactionResult, TargetKey, TotemSummary
from totem_toolkit.reactions.database import QuotaDatabase, ReactionHistoryDatabase, StoredHistory
from totem_toolkit.reactions.state_machine import apply_reaction
from totem_toolkit.scoring.decay import freshness_of
from totem_toolkit.settings import Settings
from totem_toolkit.utils.time import get_current_timestamp


class TotemReactionController:
    def __init__(
        self,
        history_db: ReactionHistoryDatabase,
        quota_db: QuotaDatabase,
        settings: Settings | None = None,
        cache: HistoryCache | None = None,
        clock: Callable[[], int] = get_current_timestamp,
    ):
        self.history_db = history_db
        self.quota_db = quota_db
        self.settings = settings or Settings()
        self.cache = cache if cache is not None else HistoryCache(self.settings.cache_ttl_seconds)
        self.clock = clock

    async def like(self, target: TargetKey, subject_id: str | None) -> ReactionResult:
        return await self.react(target, subject_id, ReactionIntent.LIKE)

    async def unlike(self, target: TargetKey, subject_id: str | None) -> ReactionResult:
        return await self.react(target, subject_id, ReactionIntent.UNLIKE)

    async def restore(self, target: TargetKey, subject_id: str | None) -> ReactionResult:
        return await self.react(target, subject_id, ReactionIntent.RESTORE)

    async def refresh(self, target: TargetKey, subject_id: str | None) -> ReactionResult:
        return await self.react(target, subject_id, ReactionIntent.REFRESH)

    async def react(self, target: TargetKey, subject_id: str | None, intent: ReactionIntent) -> ReactionResult:
        if not subject_id:
            logger.warning(f"Anonymous {intent} on '{target.key}' rejected")
            return ReactionResult(
                error=ReactionErrorKind.NOT_AUTHENTICATED,
                message="A signed-in user is required to react to a totem.",
            )
        try:
            return await self._react(target, subject_id, intent)
        except Exception as e:
            logger.exception(f"Storage failure during {intent} by '{subject_id}' on '{target.key}'")
            return ReactionResult(error=ReactionErrorKind.STORAGE_FAILURE, message=str(e))

    async def _react(self, target: TargetKey, subject_id: str, intent: ReactionIntent) -> ReactionResult:
        attempts = self.settings.max_write_retries + 1
        result = ReactionResult()
        for attempt in range(1, attempts + 1):
            now = self.clock()
            stored = await self.history_db.get_history(target)
            try:
                quota = await self.get_quota(subject_id) if intent == ReactionIntent.REFRESH else None
            except ConcurrentModificationError as e:
                logger.warning(f"Quota conflict for '{subject_id}' (attempt {attempt}/{attempts}): {e}")
                continue

            result = apply_reaction(
                stored.history,
                subject_id,
                intent,
                now,
                quota.refreshes_remaining if quota else None,
            )
            if not result.ok:
                return result

            if quota is not None and result.quota_remaining is not None:
                try:
                    await self.quota_db.save_quota(
                        quota.model_copy(update={"refreshes_remaining": result.quota_remaining}), quota.version
                    )
                except ConcurrentModificationError as e:
                    logger.warning(f"Quota conflict for '{subject_id}' (attempt {attempt}/{attempts}): {e}")
                    continue

            try:
                await self.history_db.save_history(target, result.history, stored.version)
            except ConcurrentModificationError as e:
                logger.warning(f"Write conflict on '{target.key}' (attempt {attempt}/{attempts}): {e}")
                if quota is not None:
                    await self._refund_refresh(subject_id)
                continue
            except Exception:
                if quota is not None:
                    await self._refund_refresh(subject_id)
                raise
            finally:
                self.cache.invalidate(target.key)

            logger.info(f"{intent} by '{subject_id}' on '{target.key}' saved")
            return result

        return ReactionResult(
            history=result.history,
            quota_remaining=result.quota_remaining,
            error=ReactionErrorKind.CONCURRENT_MODIFICATION,
            message=f"'{target.key}' kept changing while saving, try again.",
        )

    async def _refund_refresh(self, subject_id: str) -> None:
        for _ in range(self.settings.max_write_retries + 1):
            quota = await self.quota_db.get_quota(subject_id)
            if quota is None:
                return
            try:
                await self.quota_db.save_quota(
                    quota.model_copy(update={"refreshes_remaining": quota.refreshes_remaining + 1}), quota.version
                )
                logger.info(f"Refunded one refresh to '{subject_id}'")
                return
            except ConcurrentModificationError:
                continue
        logger.error(f"Could not refund a refresh to '{subject_id}'")

    async def get_quota(self, subject_id: str) -> RefreshQuota:
        """Return the subject's quota, creating or replenishing it as needed.

        Raises:
            ConcurrentModificationError: another writer saved the quota first.
        """
        now = self.clock()
        allowance = self.settings.daily_refreshes
        quota = await self.quota_db.get_quota(subject_id)
        if quota is None:
            return await self.quota_db.save_quota(RefreshQuota.new(subject_id, now, allowance), 0)
        replenished = quota.replenish_if_due(now, allowance)
        if replenished is not quota:
            logger.info(f"Replenished refreshes for '{subject_id}' to {allowance}")
            return await self.quota_db.save_quota(replenished, quota.version)
        return quota

    async def get_history(self, target: TargetKey) -> StoredHistory:
        cached = self.cache.get(target.key)
        if cached is not None:
            return cached
        stored = await self.history_db.get_history(target)
        self.cache.set(target.key, stored)
        return stored

    async def get_summary(self, target: TargetKey) -> TotemSummary:
        stored = await self.get_history(target)
        return TotemSummary(
            target=target,
            likes=sum(1 for event in stored.history if event.is_active),
            crispness=freshness_of(stored.history, self.clock(), self.settings.decay_model),
        )
