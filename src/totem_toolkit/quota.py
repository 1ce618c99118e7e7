"""
Daily refresh quota.

Refreshing a like costs one unit of the subject's daily allowance. The quota
lives on the user's account record; 'replenish_if_due' is the reset rule an
external scheduler (or the controller, lazily on read) applies once
'refresh_reset_time' has passed.
"""

from pydantic import BaseModel

from totem_toolkit.utils.time import ONE_DAY_MS

DEFAULT_DAILY_REFRESHES = 5


class RefreshQuota(BaseModel):
    """Refreshes a subject has left until 'refresh_reset_time' (epoch ms).

    'version' is bumped by the store on every save and checked on the next one.
    """

    subject_id: str
    refreshes_remaining: int = DEFAULT_DAILY_REFRESHES
    refresh_reset_time: int
    version: int = 0

    @classmethod
    def new(cls, subject_id: str, now: int, daily_allowance: int = DEFAULT_DAILY_REFRESHES) -> "RefreshQuota":
        return cls(subject_id=subject_id, refreshes_remaining=daily_allowance, refresh_reset_time=now + ONE_DAY_MS)

    def replenish_if_due(self, now: int, daily_allowance: int = DEFAULT_DAILY_REFRESHES) -> "RefreshQuota":
        """Return a topped-up copy when the reset time has passed, otherwise 'self'.

        The next reset time advances in whole days from the previous one so a
        subject who was away for several days is not reset on every read.
        """
        if now < self.refresh_reset_time:
            return self
        days_elapsed = (now - self.refresh_reset_time) // ONE_DAY_MS + 1
        return self.model_copy(
            update={
                "refreshes_remaining": daily_allowance,
                "refresh_reset_time": self.refresh_reset_time + days_elapsed * ONE_DAY_MS,
            }
        )
