"""
Runtime configuration.

Values come from environment variables so the same code runs unchanged in
tests, the reporting pipeline and a hosting process:

    TOTEM_DECAY_MODEL        FAST | MEDIUM | NONE   (default FAST)
    TOTEM_DAILY_REFRESHES    refreshes per subject per day (default 5)
    TOTEM_CACHE_TTL_SECONDS  history cache TTL, 0 disables expiry (default 60)
    TOTEM_MAX_WRITE_RETRIES  compare-and-swap retries per intent (default 3)

Empty variables fall back to the defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from totem_toolkit.quota import DEFAULT_DAILY_REFRESHES
from totem_toolkit.scoring.decay import DecayModel


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TOTEM_", env_ignore_empty=True)

    decay_model: DecayModel = DecayModel.FAST
    daily_refreshes: int = Field(default=DEFAULT_DAILY_REFRESHES, ge=0)
    cache_ttl_seconds: float = Field(default=60, ge=0)
    max_write_retries: int = Field(default=3, ge=0)


def load_settings() -> Settings:
    """Build 'Settings' from the environment.

    Raises:
        ValueError: An environment variable holds a value that does not parse.
    """
    return Settings()
