from totem_toolkit.reactions.data_models import (
    ReactionEvent,
    ReactionHistory,
    ReactionIntent,
    ReactionResult,
    ReactionState,
    TargetKey,
    TotemSummary,
)
from totem_toolkit.reactions.database import QuotaDatabase, ReactionHistoryDatabase, StoredHistory
from totem_toolkit.reactions.in_memory import InMemoryQuotaDatabase, InMemoryReactionHistoryDatabase
from totem_toolkit.reactions.state_machine import apply_reaction, current_state, transition

__all__ = [
    "InMemoryQuotaDatabase",
    "InMemoryReactionHistoryDatabase",
    "QuotaDatabase",
    "ReactionEvent",
    "ReactionHistory",
    "ReactionHistoryDatabase",
    "ReactionIntent",
    "ReactionResult",
    "ReactionState",
    "StoredHistory",
    "TargetKey",
    "TotemSummary",
    "apply_reaction",
    "current_state",
    "transition",
]
