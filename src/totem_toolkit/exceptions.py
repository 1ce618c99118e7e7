"""
Typed reaction errors.

The state machine raises these internally; 'apply_reaction' and the controller
convert them into 'ReactionResult' objects so no domain failure crosses the
storage boundary as an exception. Each subclass carries a 'ReactionErrorKind'
that callers match on to pick the user-facing message.
"""

from enum import StrEnum


class ReactionErrorKind(StrEnum):
    QUOTA_EXHAUSTED = "quota_exhausted"
    INVALID_TRANSITION = "invalid_transition"
    NOT_AUTHENTICATED = "not_authenticated"
    CONCURRENT_MODIFICATION = "concurrent_modification"
    STORAGE_FAILURE = "storage_failure"


class ReactionError(Exception):
    """Base class for all reaction failures."""

    kind: ReactionErrorKind


class QuotaExhaustedError(ReactionError):
    """Refresh requested with no refreshes left today."""

    kind = ReactionErrorKind.QUOTA_EXHAUSTED


class InvalidTransitionError(ReactionError):
    """The intent is not allowed from the subject's current state."""

    kind = ReactionErrorKind.INVALID_TRANSITION


class NotAuthenticatedError(ReactionError):
    kind = ReactionErrorKind.NOT_AUTHENTICATED


class ConcurrentModificationError(ReactionError):
    """The stored record changed between read and write."""

    kind = ReactionErrorKind.CONCURRENT_MODIFICATION
