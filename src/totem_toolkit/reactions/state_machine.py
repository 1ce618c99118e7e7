"""
Reaction state machine.

Per subject, a history is in one of three states: ABSENT (no event),
ACTIVE or INACTIVE. Intents move a subject between them:

    ABSENT   --like-->     ACTIVE    create event at 'now'
    ACTIVE   --unlike-->   INACTIVE  keep original timestamp
    INACTIVE --restore-->  ACTIVE    keep original timestamp
    INACTIVE --refresh-->  ACTIVE    original timestamp := now, costs one quota
    ACTIVE   --refresh-->  ACTIVE    same as above, renews a stale like

'like' on ACTIVE and 'unlike' on INACTIVE are no-ops. Re-liking an INACTIVE
event is rejected: the caller has to pick 'restore' or 'refresh' explicitly.

'transition' raises 'ReactionError' subclasses. 'apply_reaction' is the
public entry point and returns a 'ReactionResult' instead. Neither mutates the
history passed in.
"""

from loguru import logger

from totem_toolkit.exceptions import (
    InvalidTransitionError,
    NotAuthenticatedError,
    QuotaExhaustedError,
    ReactionError,
)
from totem_toolkit.reactions.data_models import (
    ReactionEvent,
    ReactionHistory,
    ReactionIntent,
    ReactionResult,
    ReactionState,
)


def find_event(history: ReactionHistory, subject_id: str) -> int | None:
    """Index of the subject's event in 'history', or None."""
    matches = [i for i, event in enumerate(history) if event.subject_id == subject_id]
    if len(matches) > 1:
        logger.warning(f"History holds {len(matches)} events for subject '{subject_id}', using the first one.")
    return matches[0] if matches else None


def current_state(history: ReactionHistory, subject_id: str) -> ReactionState:
    return _state_at(history, find_event(history, subject_id))


def _state_at(history: ReactionHistory, index: int | None) -> ReactionState:
    if index is None:
        return ReactionState.ABSENT
    return ReactionState.ACTIVE if history[index].is_active else ReactionState.INACTIVE


def transition(
    history: ReactionHistory,
    subject_id: str,
    intent: ReactionIntent,
    now: int,
    quota_remaining: int | None = None,
) -> tuple[ReactionHistory, int | None]:
    """Apply 'intent' for 'subject_id' and return the next history and quota.

    Raises:
        NotAuthenticatedError: 'subject_id' is empty.
        InvalidTransitionError: 'intent' is not allowed from the current state.
        QuotaExhaustedError: refresh with no quota left. Checked before any change.
    """
    if not subject_id:
        raise NotAuthenticatedError("A signed-in user is required to react to a totem.")

    index = find_event(history, subject_id)
    state = _state_at(history, index)
    next_history = [event.model_copy() for event in history]

    if intent == ReactionIntent.LIKE:
        if state == ReactionState.ACTIVE:
            return next_history, quota_remaining
        if state == ReactionState.INACTIVE:
            raise InvalidTransitionError("You liked this totem before. Restore or refresh your like instead.")
        next_history.append(
            ReactionEvent(subject_id=subject_id, original_timestamp=now, last_updated_at=now, is_active=True, value=1)
        )
        return next_history, quota_remaining

    if index is None:
        raise InvalidTransitionError(f"Cannot {intent} a totem you have never liked.")
    event = next_history[index]

    if intent == ReactionIntent.UNLIKE:
        if state == ReactionState.ACTIVE:
            next_history[index] = event.model_copy(update={"is_active": False, "last_updated_at": now})
        return next_history, quota_remaining

    if intent == ReactionIntent.RESTORE:
        if state == ReactionState.ACTIVE:
            raise InvalidTransitionError("This like is already active.")
        next_history[index] = event.model_copy(update={"is_active": True, "last_updated_at": now})
        return next_history, quota_remaining

    if intent == ReactionIntent.REFRESH:
        if not quota_remaining or quota_remaining <= 0:
            raise QuotaExhaustedError("No refreshes remaining today.")
        next_history[index] = event.model_copy(
            update={"is_active": True, "original_timestamp": now, "last_updated_at": now}
        )
        return next_history, quota_remaining - 1

    raise InvalidTransitionError(f"Unknown intent '{intent}'.")


def apply_reaction(
    history: ReactionHistory,
    subject_id: str,
    intent: ReactionIntent,
    now: int,
    quota_remaining: int | None = None,
) -> ReactionResult:
    """Run 'transition' and wrap the outcome, failures included, in a 'ReactionResult'."""
    try:
        next_history, next_quota = transition(history, subject_id, intent, now, quota_remaining)
    except ReactionError as e:
        logger.warning(f"Rejected {intent} by '{subject_id}': {e.kind} ({e})")
        return ReactionResult(
            history=list(history),
            quota_remaining=quota_remaining,
            error=e.kind,
            message=str(e),
        )
    logger.debug(f"{intent} by '{subject_id}' at {now}: {len(next_history)} events")
    return ReactionResult(history=next_history, quota_remaining=next_quota)
