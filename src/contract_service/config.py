"""Application configuration with structured settings groups."""
import logging
from functools import lru_cache

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


# =============================================================================
# Nested Settings Models
# =============================================================================


class DatabaseConfig(BaseModel):
    """
    Connection pool settings.

    Ignored for SQLite URLs, which have no pool to size.
    """

    echo: bool = False
    pool_size: int = 10
    max_overflow: int = 20


class PaginationSettings(BaseModel):
    """
    Page size limits for the active-contracts listing.

    default_page_size: Used when a request does not ask for a size.
    max_page_size: Requests above this size are rejected.
    """

    default_page_size: int = Field(default=20, gt=0)
    max_page_size: int = Field(default=100, gt=0)

    @model_validator(mode="after")
    def check_default_within_max(self) -> "PaginationSettings":
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) must not exceed "
                f"max_page_size ({self.max_page_size})"
            )
        return self


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """
    Application settings with nested configuration groups.

    Environment variables use double underscore as delimiter for nested values.
    Example: PAGINATION__MAX_PAGE_SIZE=50, DATABASE__POOL_SIZE=5
    """

    # Application metadata
    app_name: str = "Contract Service API"
    app_version: str = "1.0.0"

    # Database
    database_url: str = "postgresql+asyncpg://localhost/contracts"

    # Nested settings groups
    database: DatabaseConfig = DatabaseConfig()
    pagination: PaginationSettings = PaginationSettings()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
