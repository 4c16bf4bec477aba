"""Configuration management for the meal-planner backend."""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=("../.env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    environment: str = "development"
    log_level: str = "info"

    # Supabase (plan store)
    supabase_url: str | None = None
    supabase_service_role_key: str | None = None

    # Shopping list
    shopping_locale: str = "ru"  # "C" for plain code-point ordering
    allergy_exclude_reason: str = "Аллергия"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def plan_store_configured(self) -> bool:
        """Check if the Supabase plan store has credentials."""
        return (
            self.supabase_url is not None
            and self.supabase_service_role_key is not None
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
