from totem_toolkit.scoring.decay import (
    ONE_WEEK_MS,
    DecayModel,
    active_weights,
    compute_freshness,
    freshness_of,
)

__all__ = [
    "ONE_WEEK_MS",
    "DecayModel",
    "active_weights",
    "compute_freshness",
    "freshness_of",
]
