"""
Reaction data models.

A 'ReactionEvent' records one subject's like on one totem target (a tag
attached to an answer). Events are never deleted: unliking flips 'is_active'
so 'original_timestamp' survives for a later restore. A 'ReactionHistory' is
the list of events for a single target, looked up by 'subject_id'.

'ReactionResult' is what 'apply_reaction' and the controller hand back to
callers: either the next history (and quota) or a typed error kind.
"""

from enum import StrEnum

from pydantic import BaseModel, Field

from totem_toolkit.exceptions import ReactionErrorKind


class ReactionState(StrEnum):
    """Where a subject stands within one history."""

    ABSENT = "absent"
    ACTIVE = "active"
    INACTIVE = "inactive"


class ReactionIntent(StrEnum):
    LIKE = "like"
    UNLIKE = "unlike"
    RESTORE = "restore"
    REFRESH = "refresh"


class ReactionEvent(BaseModel):
    """
    One subject's reaction to one target.

    Attributes:
        subject_id: Opaque identifier of the authenticated user.
        original_timestamp: Epoch ms of the first like. Kept across restores,
            overwritten by refreshes. This is the anchor the decay uses.
        last_updated_at: Epoch ms of the latest state change.
        is_active: Whether the like currently counts.
        value: Reaction weight.
    """

    subject_id: str
    original_timestamp: int
    last_updated_at: int
    is_active: bool = True
    value: float = 1


ReactionHistory = list[ReactionEvent]


class TargetKey(BaseModel):
    """Identifies a single totem on a single answer."""

    post_id: str
    answer_id: str
    totem_name: str

    @property
    def key(self) -> str:
        return f"{self.post_id}/{self.answer_id}/{self.totem_name}"


class ReactionResult(BaseModel):
    """Outcome of a reaction intent.

    On failure 'history' is the unchanged input history and 'quota_remaining'
    the unchanged input quota.
    """

    history: ReactionHistory = Field(default_factory=list)
    quota_remaining: int | None = None
    error: ReactionErrorKind | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TotemSummary(BaseModel):
    """Display values for one totem, derived at read time."""

    target: TargetKey
    likes: int
    crispness: float
