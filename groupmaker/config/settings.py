# groupmaker/config/settings.py

from typing import Optional, Tuple

from pydantic_settings import BaseSettings, SettingsConfigDict

from groupmaker.domain.models import Precedence


class Settings(BaseSettings):
    ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    GROUP_SIZE_DEFAULT: int = 4
    NUM_GROUPS_DEFAULT: int = 3

    # engine weights, see EngineConfig
    FRIEND_WEIGHTS: Tuple[float, float, float] = (150.0, 150.0, 100.0)
    SPACE_PENALTY: float = 50.0
    GENDER_WEIGHT: float = 20.0
    KEEP_APART_WEIGHT: float = 1000.0
    MAX_FRIENDS: Optional[int] = None
    MAX_KEEP_APART: Optional[int] = None
    PRECEDENCE: Precedence = Precedence.MUST_TOGETHER
    REBALANCE_ROUNDS: int = 0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
