"""
Configuration management for AdoptApp.
Loads settings from environment variables and provides typed configuration access.
"""

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Settings
    environment: str = Field(default="development", description="Environment: development, staging, production")
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Adoption rules
    max_interest_requests: int = Field(
        default=2,
        ge=1,
        description="Maximum number of pets a user may request to adopt at once"
    )

    # Storage
    store_backend: str = Field(default="memory", description="Store backend: memory, firestore")
    seed_file: Optional[str] = Field(
        default=None,
        description="JSON file with cities and pets loaded into the memory backend"
    )
    gcp_project_id: str = Field(default="adoptapp", description="GCP Project ID")

    # Firestore
    firestore_collection_users: str = Field(
        default="users",
        description="Firestore collection for adopters"
    )
    firestore_collection_pets: str = Field(
        default="pets",
        description="Firestore collection for pets"
    )
    firestore_collection_cities: str = Field(
        default="cities",
        description="Firestore collection for cities"
    )
    firestore_collection_adoptions: str = Field(
        default="adoptions",
        description="Firestore collection for completed adoptions"
    )
    firestore_collection_user_emails: str = Field(
        default="users_by_email",
        description="Firestore collection reserving each adopter email"
    )

    # API Settings
    api_host: str = Field(default="0.0.0.0", description="HTTP bind host")
    api_port: int = Field(default=8080, description="HTTP bind port")

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings


# Convenience access
settings = get_settings()
