import pytest

from totem_toolkit.controller import TotemReactionController
from totem_toolkit.reactions.data_models import TargetKey
from totem_toolkit.reactions.in_memory import InMemoryQuotaDatabase, InMemoryReactionHistoryDatabase
from totem_toolkit.settings import Settings

from tests.helpers import FakeClock


@pytest.fixture
def target() -> TargetKey:
    return TargetKey(post_id="p1", answer_id="a1", totem_name="helpful")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def history_db() -> InMemoryReactionHistoryDatabase:
    return InMemoryReactionHistoryDatabase()


@pytest.fixture
def quota_db() -> InMemoryQuotaDatabase:
    return InMemoryQuotaDatabase()


@pytest.fixture
def controller(history_db, quota_db, clock) -> TotemReactionController:
    return TotemReactionController(history_db, quota_db, settings=Settings(daily_refreshes=3), clock=clock)
