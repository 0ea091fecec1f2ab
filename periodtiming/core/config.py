from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    APP_NAME: str = "School Period Timing"
    AUTH_MODE: Literal["mock"] = "mock"
    STORE_MODE: Literal["memory", "supabase"] = "memory"

    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    SUPABASE_SERVICE_KEY: str = ""
    PERIOD_TIMING_TABLE: str = "school_period_timings"

    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    DEFAULT_DAY_START_TIME: str = "08:00"
    DEFAULT_PERIOD_DURATION_MINUTES: int = 45
    DEFAULT_TOTAL_PERIODS_PER_DAY: int = 8
    DEFAULT_ASSEMBLY_DURATION_MINUTES: int = 15

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
