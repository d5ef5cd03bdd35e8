"""Application configuration pulled from environment variables via pydantic."""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")


class Settings(BaseSettings):
    """Environment-driven configuration for the daily weather stylist service."""
    model_config = SettingsConfigDict(env_prefix="STYLIST_", extra="ignore")

    # storage
    user_store: str = "sql"  # options: sql, memory
    database_url: str = "sqlite:///./stylist.db"

    # weather provider
    open_meteo_base_url: str = "https://api.open-meteo.com/v1"
    http_timeout_seconds: float = 10.0
    http_cache_path: str | None = ".cache/open_meteo"
    http_cache_ttl_seconds: int = 3600
    http_retries: int = 3

    # email transport
    resend_api_url: str = "https://api.resend.com"
    resend_api_key: str | None = None
    email_from: str = "Daily Weather Stylist <hello@dailyweatherstylist.com>"
    confirmation_email_from: str | None = None

    # geocoding
    geocoder_user_agent: str = "daily-weather-stylist"
    geocoder_timeout_seconds: float = 10.0

    # dispatch
    dispatch_hour: int = 5
    dispatch_max_workers: int = 1

    # api access
    api_key: str | None = None
    api_key_redis_url: str | None = None
    api_key_redis_set: str = "api_keys"

    log_level: str = "INFO"

    @field_validator("open_meteo_base_url", "resend_api_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("dispatch_hour", mode="after")
    @classmethod
    def check_dispatch_hour(cls, v: int) -> int:
        """Dispatch hour is an hour of the local day."""
        if not 0 <= v <= 23:
            raise ValueError("dispatch_hour must be between 0 and 23")
        return v

    @field_validator("dispatch_max_workers", mode="after")
    @classmethod
    def check_workers(cls, v: int) -> int:
        """At least one worker; 1 means sequential."""
        return max(1, v)


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4)}")
