# hospital_admin/core/config.py
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = "local"
    api_v1_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Security
    secret_key: str = "changeme"  # override in .env
    access_token_expire_minutes: int = 60

    # Database
    database_url: str = "sqlite:///./hospital_admin.db"

    # Redis (optional, dashboard caching only)
    redis_url: str | None = None
    dashboard_cache_ttl_seconds: int = 60

    # Human-readable identifiers
    patient_number_prefix: str = "PAT"
    bill_number_prefix: str = "BILL"
    number_generation_attempts: int = 5

    # First admin account (scripts/create_admin.py)
    initial_admin_email: str | None = None
    initial_admin_password: str | None = None

    # Printed on receipts
    hospital_name: str = "General Hospital"
    hospital_address: str | None = None
    hospital_phone: str | None = None

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings instance so the .env is parsed once.
    """
    return Settings()
