from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "API_KEY", "GOOGLE_API_KEY"),
    )
    CLEAN_MODEL: str = "gemini-2.5-flash"
    DASHBOARD_MODEL: str = "gemini-2.5-pro"
    ROWS_PER_PAGE: int = 10
    MAX_FILTER_VALUES: int = 50
    PREVIEW_ROWS: int = 5
    DASHBOARD_SAMPLE_ROWS: int = 10
    LOG_LEVEL: str = "INFO"


settings = Settings()
