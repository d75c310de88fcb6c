"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
"""

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # API SECURITY
    # ===================
    mcp_api_key: str = Field(
        ...,
        min_length=1,
        description="Shared API key expected in the X-API-Key header"
    )

    # ===================
    # WOOCOMMERCE
    # ===================
    woocommerce_url: str = Field(
        ...,
        min_length=1,
        description="WooCommerce site URL (without /wp-json)"
    )
    woocommerce_key: str = Field(
        ...,
        min_length=1,
        description="WooCommerce REST consumer key"
    )
    woocommerce_secret: str = Field(
        ...,
        min_length=1,
        description="WooCommerce REST consumer secret"
    )
    request_timeout_seconds: float = Field(
        default=30,
        gt=0,
        le=300,
        description="Timeout for a single WooCommerce request"
    )

    # ===================
    # PERSISTENCE
    # ===================
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding category_map.json and product_map.json"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="API port"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def log_level_uppercase(cls, v):
        """Accept lowercase levels like the Node-era LOG_LEVEL=info."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("woocommerce_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def woocommerce_api_url(self) -> str:
        """Base URL of the WooCommerce v3 REST API."""
        return f"{self.woocommerce_url}/wp-json/wc/v3"

    @property
    def category_map_path(self) -> Path:
        return self.data_dir / "category_map.json"

    @property
    def product_map_path(self) -> Path:
        return self.data_dir / "product_map.json"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
