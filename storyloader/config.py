from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    storyblok_access_token: str = Field(default="", alias="STORYBLOK_ACCESS_TOKEN")
    storyblok_version: Literal["published", "draft"] = Field(default="published", alias="STORYBLOK_VERSION")
    storyblok_region: Literal["us", "eu"] = Field(default="us", alias="STORYBLOK_REGION")
    storyblok_timeout: float = Field(default=15, alias="STORYBLOK_TIMEOUT")
    storyblok_max_pages: Optional[int] = Field(default=None, alias="STORYBLOK_MAX_PAGES")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @model_validator(mode="after")
    def validate_runtime(self) -> "Settings":
        if self.storyblok_timeout < 1:
            raise ValueError("STORYBLOK_TIMEOUT must be >= 1")
        if self.storyblok_max_pages is not None and self.storyblok_max_pages < 1:
            raise ValueError("STORYBLOK_MAX_PAGES must be >= 1")
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
