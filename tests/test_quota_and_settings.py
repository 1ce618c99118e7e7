"""
Unit tests for refresh quota replenishment and settings loading
"""
import pytest

from totem_toolkit.quota import DEFAULT_DAILY_REFRESHES, RefreshQuota
from totem_toolkit.scoring.decay import DecayModel
from totem_toolkit.settings import Settings, load_settings
from totem_toolkit.utils.time import ONE_DAY_MS

from tests.helpers import NOW


def test_new_quota_gets_full_allowance():
    quota = RefreshQuota.new("alice", NOW)

    assert quota.refreshes_remaining == DEFAULT_DAILY_REFRESHES
    assert quota.refresh_reset_time == NOW + ONE_DAY_MS


def test_replenish_before_reset_time_is_noop():
    quota = RefreshQuota(subject_id="alice", refreshes_remaining=1, refresh_reset_time=NOW + 10)

    assert quota.replenish_if_due(NOW) is quota


def test_replenish_after_reset_time_tops_up():
    quota = RefreshQuota(subject_id="alice", refreshes_remaining=0, refresh_reset_time=NOW)

    replenished = quota.replenish_if_due(NOW, daily_allowance=3)

    assert replenished.refreshes_remaining == 3
    assert replenished.refresh_reset_time == NOW + ONE_DAY_MS
    assert quota.refreshes_remaining == 0


def test_replenish_after_several_days_lands_on_next_boundary():
    quota = RefreshQuota(subject_id="alice", refreshes_remaining=0, refresh_reset_time=NOW)

    replenished = quota.replenish_if_due(NOW + 3 * ONE_DAY_MS + 5)

    assert replenished.refresh_reset_time == NOW + 4 * ONE_DAY_MS
    assert replenished.refresh_reset_time > NOW + 3 * ONE_DAY_MS + 5


def test_settings_defaults(monkeypatch):
    for name in ["TOTEM_DECAY_MODEL", "TOTEM_DAILY_REFRESHES", "TOTEM_CACHE_TTL_SECONDS", "TOTEM_MAX_WRITE_RETRIES"]:
        monkeypatch.delenv(name, raising=False)

    assert load_settings() == Settings()


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("TOTEM_DECAY_MODEL", "MEDIUM")
    monkeypatch.setenv("TOTEM_DAILY_REFRESHES", "2")
    monkeypatch.setenv("TOTEM_CACHE_TTL_SECONDS", "0")
    monkeypatch.setenv("TOTEM_MAX_WRITE_RETRIES", "5")

    settings = load_settings()

    assert settings.decay_model == DecayModel.MEDIUM
    assert settings.daily_refreshes == 2
    assert settings.cache_ttl_seconds == 0
    assert settings.max_write_retries == 5


@pytest.mark.parametrize("name,value", [("TOTEM_DECAY_MODEL", "SLOW"), ("TOTEM_DAILY_REFRESHES", "-1")])
def test_settings_reject_bad_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        load_settings()


def test_empty_environment_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("TOTEM_DECAY_MODEL", "")
    monkeypatch.setenv("TOTEM_DAILY_REFRESHES", "")

    settings = load_settings()

    assert settings.decay_model == DecayModel.FAST
    assert settings.daily_refreshes == DEFAULT_DAILY_REFRESHES


def test_explicit_values_override_environment(monkeypatch):
    monkeypatch.setenv("TOTEM_DAILY_REFRESHES", "9")

    assert Settings(daily_refreshes=1).daily_refreshes == 1
