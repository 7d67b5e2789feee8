from __future__ import annotations

import os
from functools import lru_cache
from pydantic import Field, AnyHttpUrl
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # App
    APP_NAME: str = "moodguard"
    ENV: str = Field(default=os.getenv("ENV", "local"))
    DEBUG: bool = Field(default=os.getenv("DEBUG", "false").lower() == "true")
    LOG_FORMAT: str = Field(default=os.getenv("LOG_FORMAT", "console"))  # "console" | "json"

    # OpenAI / classifier
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = Field(default=os.getenv("OPENAI_MODEL", "gpt-4o"))
    OPENAI_TIMEOUT_S: float = Field(default=float(os.getenv("OPENAI_TIMEOUT_S", "30")))
    RISK_TEMPERATURE: float = 0.1  # low for consistent crisis detection
    ANALYSIS_TEMPERATURE: float = 0.3

    # Retry policy around every classifier call
    CLASSIFIER_MAX_ATTEMPTS: int = 3
    CLASSIFIER_BASE_DELAY_S: float = 1.0
    CLASSIFIER_JITTER_S: float = 1.0
    CLASSIFIER_MAX_DELAY_S: float = 10.0

    # Safety path
    SAFETY_CLASSIFIER_TIMEOUT_S: float | None = Field(default=None)
    SAFETY_SKIP_CLASSIFIER_ON_CRITICAL: bool = True
    SAFETY_REGION: str | None = Field(default=os.getenv("SAFETY_REGION"))

    # Supabase
    SUPABASE_URL: AnyHttpUrl | None = None
    SUPABASE_SERVICE_ROLE: str | None = None
    SUPABASE_SCHEMA: str = Field(default=os.getenv("SUPABASE_SCHEMA", "public"))
    SUPABASE_TIMEOUT_S: float = 15.0

    # Tables
    T_MOOD_ENTRIES: str = "mood_entries"
    T_JOURNAL_ENTRIES: str = "journal_entries"
    T_MOOD_FORECASTS: str = "mood_forecasts"
    T_CRISIS_LOGS: str = "crisis_logs"
    T_SAFETY_CHECK_INS: str = "safety_check_ins"

    class Config:
        env_file = (".env.backend", ".env.local", ".env")
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached Settings instance. Call anywhere.
    """
    return Settings()
