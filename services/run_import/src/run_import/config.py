from functools import cached_property, lru_cache
import os

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from run_import.models import ScoreBounds


class Settings(BaseSettings):
    GRAPHJSON_API_KEY: str
    GRAPHJSON_COLLECTION_RUNS: str  # eg. callum_runs_dev
    GRAPHJSON_COLLECTION_ZONES: str  # eg. hr_zones_dev
    GRAPHJSON_API_BASE_URL: str = "https://api.graphjson.com/api"
    GRAPHJSON_TIME_ZONE: str = "UTC"
    GRAPHJSON_TIMEOUT_SECONDS: float = 10.0
    IMPORT_API_KEY: str
    PACE_LOWER_BOUND: float
    PACE_UPPER_BOUND: float
    HR_LOWER_BOUND: float
    HR_UPPER_BOUND: float
    MAX_RETRIES: int = 3
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=(".env", f".env.{os.getenv('ENV_NAME', 'development')}"),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="after")
    def validate_score_bounds(self) -> "Settings":
        # Raises on upper <= lower so a bad config fails at startup
        self.score_bounds
        return self

    @cached_property
    def score_bounds(self) -> ScoreBounds:
        return ScoreBounds(
            pace_lower_bound=self.PACE_LOWER_BOUND,
            pace_upper_bound=self.PACE_UPPER_BOUND,
            hr_lower_bound=self.HR_LOWER_BOUND,
            hr_upper_bound=self.HR_UPPER_BOUND,
        )

class DevelopmentSettings(Settings):
    LOG_LEVEL: str = "DEBUG"

class ProductionSettings(Settings):
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = []  # must be set via environment variable

class TestSettings(Settings):
    GRAPHJSON_API_KEY: str = "test_graphjson_key"
    GRAPHJSON_COLLECTION_RUNS: str = "runs_test"
    GRAPHJSON_COLLECTION_ZONES: str = "zones_test"
    GRAPHJSON_API_BASE_URL: str = "https://graphjson.test/api"
    IMPORT_API_KEY: str = "test_import_key"
    PACE_LOWER_BOUND: float = 4.0
    PACE_UPPER_BOUND: float = 7.0
    HR_LOWER_BOUND: float = 120.0
    HR_UPPER_BOUND: float = 180.0
    MAX_RETRIES: int = 1
    LOG_LEVEL: str = "DEBUG"

ENV_SETTINGS_MAP = {
    "development": DevelopmentSettings,
    "production": ProductionSettings,
    "test": TestSettings,
}

@lru_cache
def get_settings() -> Settings:
    env_name = os.getenv("ENV_NAME", "development")
    settings_class = ENV_SETTINGS_MAP.get(env_name, Settings)
    return settings_class()
