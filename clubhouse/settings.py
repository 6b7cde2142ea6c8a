from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"
    allowed_origin: str
    listen_port: int

    # Infra
    database_uri: str
    database_name: str
    redis_url: str = "redis://redis:6379/0"

    # Mail relay
    sender_address: str
    sender_credentials: str
    relay_host: str

    # Security / policies
    code_ttl_seconds: int = 60
    auth_rate_limit_attempts: int = 15
    auth_rate_limit_window_seconds: int = 900

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Raises pydantic.ValidationError when a required field is missing."""
    return Settings()
