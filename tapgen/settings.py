"""Environment configuration for the default generator instances.

Only ``shared.py`` reads these settings. Generators constructed directly
take their seed as an argument and ignore the environment.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class TapgenSettings(BaseSettings):
    """Settings read from ``TAPGEN_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="TAPGEN_")

    # Seed of the global and per-thread default instances.
    seed: int = 1

    # Seed default instances from OS entropy instead; ``seed`` becomes
    # the fallback when entropy cannot be read.
    seed_from_entropy: bool = False


def load_settings() -> TapgenSettings:
    return TapgenSettings()
