"""
Crispness decay.

Each active like contributes a linear weight factor that falls from 1 at the
moment of the like to 0 at the end of the decay window. The crispness of a
totem is the mean decayed like value, scaled to [0, 100] for unit weights.

'compute_freshness' takes plain '(weight, timestamp)' pairs and is the only
scoring entry point; 'active_weights' turns a 'ReactionHistory' into that form
by dropping inactive events and anchoring each like at its
'original_timestamp'. Anchoring there is what makes restore keep a like's age
and refresh reset it.

The calculator never fails. Future timestamps clamp to age 0 and expired likes
contribute a zero factor.
"""

import math
from enum import StrEnum
from typing import Sequence

from totem_toolkit.reactions.data_models import ReactionHistory
from totem_toolkit.utils.time import ONE_DAY_MS

ONE_WEEK_MS = 7 * ONE_DAY_MS
ONE_YEAR_MS = 365 * ONE_DAY_MS


class DecayModel(StrEnum):
    """Decay speed of a totem."""

    FAST = "FAST"
    MEDIUM = "MEDIUM"
    NONE = "NONE"

    @property
    def window_ms(self) -> float:
        if self is DecayModel.FAST:
            return ONE_WEEK_MS
        if self is DecayModel.MEDIUM:
            return ONE_YEAR_MS
        return math.inf


def compute_freshness(
    active_events: Sequence[tuple[float, int]],
    now: int,
    window_ms: float = ONE_WEEK_MS,
) -> float:
    """Return the freshness score of 'active_events' at time 'now'.

    Args:
        active_events: '(weight, timestamp_ms)' pairs, one per active like.
        now: Evaluation time in epoch ms.
        window_ms: Age at which a like stops counting.

    Returns:
        The mean of '100 * factor * weight' over all events, or 0.0 when there
        are no events or every event has expired. Expired likes stay in the
        denominator, so old likes drag a totem's crispness down. A window of
        zero or less expires every like.
    """
    if not active_events or window_ms <= 0:
        return 0.0
    weighted_sum = 0.0
    total_weight = 0.0
    for weight, timestamp in active_events:
        age = max(0, now - timestamp)
        factor = max(0.0, 1 - age / window_ms)
        weighted_sum += factor * max(0.0, weight)
        total_weight += factor
    if total_weight <= 0:
        return 0.0
    return weighted_sum / len(active_events) * 100


def active_weights(history: ReactionHistory) -> list[tuple[float, int]]:
    return [(event.value, event.original_timestamp) for event in history if event.is_active]


def freshness_of(history: ReactionHistory, now: int, decay_model: DecayModel = DecayModel.FAST) -> float:
    """Crispness of a stored history, the value shown next to a totem."""
    return compute_freshness(active_weights(history), now, decay_model.window_ms)
