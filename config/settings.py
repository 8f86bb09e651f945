"""
Application settings.

Every value can be overridden with a VADIMPEX_-prefixed environment variable
or a .env file next to the working directory.
"""
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SHEET_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vS0xg3Yy-RTLmgOM4pLYpTz_2Z27312GhQttLF1Tjo1rDBPq65tS2J_GbDPnBDQpNdtTl-7O4ZqDvv5"
    "/pub?gid=1729295615&single=true&output=csv"
)


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VADIMPEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === DATA SOURCE ===
    sheet_url: str = DEFAULT_SHEET_URL
    refresh_interval_seconds: int = 300
    request_timeout_seconds: float = 15.0
    cache_bust_param: str = "t"

    # === EXPORT ===
    export_basename: str = "vadimpex-products"
    document_title: str = "Vadimpex Products"

    # === LOGGING ===
    log_level: str = "INFO"
    log_format: str = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"

    # === ANALYTICS ===
    analytics_measurement_id: Optional[str] = None
    analytics_api_secret: Optional[str] = None
    analytics_client_id: str = "vadimpex-desktop"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
