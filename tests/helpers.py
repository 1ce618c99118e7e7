from totem_toolkit.reactions.data_models import ReactionEvent
from totem_toolkit.utils.time import ONE_DAY_MS

NOW = 1_700_000_000_000


class FakeClock:
    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms

    def advance_days(self, days: float) -> None:
        self.advance(int(days * ONE_DAY_MS))


def make_event(subject_id: str, original: int, last: int | None = None, active: bool = True) -> ReactionEvent:
    return ReactionEvent(
        subject_id=subject_id,
        original_timestamp=original,
        last_updated_at=original if last is None else last,
        is_active=active,
    )
