"""
Crispness report pipeline.

Replays a simulated stretch of totem activity through the reaction controller
and logs how crispness evolves. Each stage is an independent function so you
can run and inspect individual steps. loguru logs the intermediate state at
every stage.

Steps at a glance:
    1  build_controller()   — Wire in-memory stores, cache and a fake clock
    2  seed_likes()         — Every subject likes the totem, one per day
    3  churn()              — Half the subjects unlike, then restore or refresh
    4  report()             — Log like count and crispness day by day

Configuration (all optional):
    SUBJECTS     — number of simulated users (default 6)
    DAYS         — days to report after the last action (default 8)
    DECAY_MODEL  — FAST | MEDIUM | NONE (default: TOTEM_DECAY_MODEL or FAST)

Usage:
    python -m shrug_backend.crispness_report
    SUBJECTS=10 DAYS=14 DECAY_MODEL=MEDIUM python -m shrug_backend.crispness_report
"""

import asyncio
import os

from loguru import logger

from totem_toolkit.controller import TotemReactionController
from totem_toolkit.reactions.data_models import ReactionIntent, TargetKey, TotemSummary
from totem_toolkit.reactions.in_memory import InMemoryQuotaDatabase, InMemoryReactionHistoryDatabase
from totem_toolkit.scoring.decay import DecayModel
from totem_toolkit.settings import Settings, load_settings
from totem_toolkit.utils.time import ONE_DAY_MS

START_TIMESTAMP = 1_700_000_000_000
TARGET = TargetKey(post_id="post-1", answer_id="answer-1", totem_name="helpful")


class FakeClock:
    """Manually advanced clock, in epoch ms."""

    def __init__(self, start: int) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance_days(self, days: float) -> None:
        self.now += int(days * ONE_DAY_MS)


def build_controller(settings: Settings, clock: FakeClock) -> TotemReactionController:
    logger.info(f"Building controller (decay={settings.decay_model}, refreshes/day={settings.daily_refreshes})")
    return TotemReactionController(
        history_db=InMemoryReactionHistoryDatabase(),
        quota_db=InMemoryQuotaDatabase(),
        settings=settings,
        clock=clock,
    )


async def seed_likes(controller: TotemReactionController, clock: FakeClock, subjects: list[str]) -> None:
    for subject_id in subjects:
        result = await controller.like(TARGET, subject_id)
        logger.debug(f"{subject_id} liked: ok={result.ok}")
        clock.advance_days(1)
    summary = await controller.get_summary(TARGET)
    logger.info(f"After seeding: likes={summary.likes} crispness={summary.crispness:.2f}")


async def churn(controller: TotemReactionController, clock: FakeClock, subjects: list[str]) -> None:
    """Unlike with the first half of 'subjects', then alternate restore and refresh."""
    churners = subjects[: len(subjects) // 2]
    for subject_id in churners:
        await controller.unlike(TARGET, subject_id)
    clock.advance_days(0.5)

    for i, subject_id in enumerate(churners):
        intent = ReactionIntent.REFRESH if i % 2 == 0 else ReactionIntent.RESTORE
        result = await controller.react(TARGET, subject_id, intent)
        if result.ok:
            logger.info(f"{subject_id} {intent}: quota left={result.quota_remaining}")
        else:
            logger.warning(f"{subject_id} {intent} failed: {result.error} ({result.message})")


async def report(controller: TotemReactionController, clock: FakeClock, days: int) -> list[TotemSummary]:
    summaries = []
    for day in range(days + 1):
        summary = await controller.get_summary(TARGET)
        logger.info(f"Day +{day}: likes={summary.likes} crispness={summary.crispness:.2f}")
        summaries.append(summary)
        clock.advance_days(1)
    return summaries


async def run_pipeline(subjects: int = 6, days: int = 8, decay_model: DecayModel | None = None) -> list[TotemSummary]:
    """Run all stages in order and return the daily summaries."""
    settings = load_settings()
    if decay_model is not None:
        settings = settings.model_copy(update={"decay_model": decay_model})

    clock = FakeClock(START_TIMESTAMP)
    controller = build_controller(settings, clock)
    subject_ids = [f"user-{i}" for i in range(subjects)]

    await seed_likes(controller, clock, subject_ids)
    await churn(controller, clock, subject_ids)
    summaries = await report(controller, clock, days)

    logger.info("Crispness report done")
    return summaries


if __name__ == "__main__":
    _decay = os.getenv("DECAY_MODEL")
    asyncio.run(
        run_pipeline(
            subjects=int(os.getenv("SUBJECTS", "6")),
            days=int(os.getenv("DAYS", "8")),
            decay_model=DecayModel(_decay) if _decay else None,
        )
    )
