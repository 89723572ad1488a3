"""Application configuration pulled from environment variables via pydantic."""
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")

PLACEHOLDER_API_KEY = "YOUR_API_KEY"


class Settings(BaseSettings):
    """Environment-driven configuration for the Aether weather service."""
    model_config = SettingsConfigDict(env_prefix="AETHER_", extra="ignore")

    data_source: str = "live"  # options: live, offline
    weatherstack_base_url: str = "http://api.weatherstack.com"
    weatherstack_api_key: str | None = None
    relay_base_url: str = "https://api.allorigins.win"
    archive_base_url: str = "https://archive-api.open-meteo.com/v1"
    air_quality_base_url: str = "https://air-quality-api.open-meteo.com/v1"

    request_timeout_seconds: float = Field(default=10.0, gt=0)
    http_retries: int = Field(default=1, ge=0)
    http_backoff_factor: float = 0.2
    http_cache_enabled: bool = False
    http_cache_path: str = ".cache"
    http_cache_expire_seconds: int = 900

    history_days: int = Field(default=7, ge=1)
    default_location: str = "London"
    search_on_startup: bool = True
    max_workers: int = Field(default=4, ge=2)
    mock_seed: int | None = None
    log_level: str = "INFO"

    @field_validator(
        "weatherstack_base_url",
        "relay_base_url",
        "archive_base_url",
        "air_quality_base_url",
        mode="after",
    )
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @property
    def has_weatherstack_key(self) -> bool:
        """True when a real (non-placeholder) current-conditions key is configured."""
        key = (self.weatherstack_api_key or "").strip()
        return bool(key) and key != PLACEHOLDER_API_KEY


settings = Settings()


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {settings.model_dump_json(indent=4, exclude={'weatherstack_api_key'})}")
