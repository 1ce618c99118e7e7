"""
Storage interfaces for reaction histories and refresh quotas.

The toolkit does not persist anything itself. A host application plugs in a
document store by implementing these ABCs; 'InMemoryReactionHistoryDatabase'
and 'InMemoryQuotaDatabase' are reference implementations for tests and local
runs.

'save_history' is a compare-and-swap on 'version': the write succeeds only if
the stored version still equals 'expected_version', which is how concurrent
toggles on the same totem are kept from interleaving.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from totem_toolkit.quota import RefreshQuota
from totem_toolkit.reactions.data_models import ReactionHistory, TargetKey


class StoredHistory(BaseModel):
    """A history as read from the store, with the version to write back against."""

    history: ReactionHistory = Field(default_factory=list)
    version: int = 0


class ReactionHistoryDatabase(ABC):
    """Abstract repository for per-target reaction histories."""

    @abstractmethod
    async def get_history(self, target: TargetKey) -> StoredHistory:
        """Return the stored history, or an empty one at version 0."""
        pass

    @abstractmethod
    async def save_history(self, target: TargetKey, history: ReactionHistory, expected_version: int) -> StoredHistory:
        """Persist 'history' if the stored version is still 'expected_version'.

        Raise 'ConcurrentModificationError' otherwise.
        """
        pass


class QuotaDatabase(ABC):
    """Abstract repository for 'RefreshQuota' records.

    'save_quota' is a compare-and-swap on 'RefreshQuota.version', like
    'save_history'. A subject's quota is shared by every target they react to,
    so the per-target history check alone does not stop two refreshes from
    spending the same unit.
    """

    @abstractmethod
    async def get_quota(self, subject_id: str) -> RefreshQuota | None:
        pass

    @abstractmethod
    async def save_quota(self, quota: RefreshQuota, expected_version: int) -> RefreshQuota:
        """Persist 'quota' if the stored version is still 'expected_version' (0 when absent).

        Return the stored record with its new version. Raise
        'ConcurrentModificationError' otherwise.
        """
        pass
