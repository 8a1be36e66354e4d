# quote_finder/settings.py

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="Quote Finder")
    ENV: str = Field(default="dev")

    # refinement model
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = Field(default="gpt-4.1-nano")
    REFINEMENT_TEMPERATURE: float = Field(default=0.1, ge=0.0, le=2.0)

    # ranking
    MAX_CONTENT_CHARS: int = Field(default=50000, gt=0)
    FUZZY_THRESHOLD: float = Field(default=0.6, ge=0.0, le=1.0)
    MAX_SELECTED_SENTENCES: Optional[int] = Field(default=None, gt=0)

    # content cache + segmentation
    SEGMENT_SIZE: int = Field(default=50000, gt=0)
    CACHE_TTL_SECONDS: float = Field(default=300.0, gt=0)
    MAX_CACHE_SIZE: int = Field(default=15, gt=0)

    # OCR
    OCR_ENABLED: bool = Field(default=True)
    OCR_LANGUAGE: str = Field(default="eng")
    OCR_PAGES_PER_REQUEST: int = Field(default=5, gt=0)
    OCR_MAX_PAGES: int = Field(default=30, gt=0)
    SCANNED_CHARS_PER_PAGE: int = Field(default=500, ge=0)

    # HTTP surface
    REQUEST_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0)
    STORAGE_DIR: str = Field(default="storage")
    CORS_ORIGINS: List[str] = Field(default=["*"])

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


def get_settings() -> Settings:
    return Settings()
