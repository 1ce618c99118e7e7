"""
Totem reaction toolkit.

Scores the crispness of totem likes and mediates like / unlike / restore /
refresh over a target's reaction history:

    from totem_toolkit import apply_reaction, compute_freshness, ReactionIntent

Host applications that want storage, caching and quota handling wired up use
the controller:

    from totem_toolkit import TotemReactionController, InMemoryReactionHistoryDatabase, InMemoryQuotaDatabase
"""

from totem_toolkit.cache import HistoryCache
from totem_toolkit.controller import TotemReactionController
from totem_toolkit.exceptions import ReactionError, ReactionErrorKind
from totem_toolkit.quota import RefreshQuota
from totem_toolkit.reactions import (
    InMemoryQuotaDatabase,
    InMemoryReactionHistoryDatabase,
    ReactionEvent,
    ReactionIntent,
    ReactionResult,
    ReactionState,
    TargetKey,
    TotemSummary,
    apply_reaction,
)
from totem_toolkit.scoring import ONE_WEEK_MS, DecayModel, compute_freshness, freshness_of
from totem_toolkit.settings import Settings, load_settings

__all__ = [
    "ONE_WEEK_MS",
    "DecayModel",
    "HistoryCache",
    "InMemoryQuotaDatabase",
    "InMemoryReactionHistoryDatabase",
    "ReactionError",
    "ReactionErrorKind",
    "ReactionEvent",
    "ReactionIntent",
    "ReactionResult",
    "ReactionState",
    "RefreshQuota",
    "Settings",
    "TargetKey",
    "TotemReactionController",
    "TotemSummary",
    "apply_reaction",
    "compute_freshness",
    "freshness_of",
    "load_settings",
]
