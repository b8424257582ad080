import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _level_from_name(name: str, default: int) -> int:
    level = getattr(logging, name.upper(), default)
    return level if isinstance(level, int) else default


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = Field(default="BBBank API", alias="APP_NAME")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    access_log_level: str = Field(default="WARNING", alias="ACCESS_LOG_LEVEL")
    database_url: str = Field(default="sqlite:///./bbbank.db", alias="DATABASE_URL")
    seed_demo_data: bool = Field(default=False, alias="SEED_DEMO_DATA")
    enable_docs: bool = Field(default=True, alias="ENABLE_DOCS")
    enable_telemetry_endpoint: bool = Field(default=True, alias="ENABLE_TELEMETRY_ENDPOINT")
    telemetry_buffer_size: int = Field(default=1000, alias="TELEMETRY_BUFFER_SIZE")

    @property
    def log_level_value(self) -> int:
        return _level_from_name(self.log_level, logging.INFO)

    @property
    def access_log_level_value(self) -> int:
        return _level_from_name(self.access_log_level, logging.WARNING)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
