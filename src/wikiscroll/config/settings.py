"""
Configuration settings for the WikiScroll edge service.

Uses pydantic-settings for configuration management with environment
variable support and validation.
"""

from typing import Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="production", description="Runtime environment")

    # Product
    product_name: str = Field(default="WikiScroll", description="Product name")
    default_preview_image: str = Field(
        default="https://wikiscroll.com/og-image.png",
        description="Image used in previews when the article has no thumbnail",
    )
    user_agent: str = Field(
        default="WikiScroll/1.0 (https://wikiscroll.com)",
        description="User agent sent to Wikimedia APIs",
    )

    # Upstream Configuration
    encyclopedia_host: str = Field(
        default="wikipedia.org", description="Encyclopedia base domain"
    )
    travel_guide_host: str = Field(
        default="wikivoyage.org", description="Travel guide base domain"
    )
    preview_language: str = Field(
        default="en", description="Language edition used to resolve shared articles"
    )
    travel_guide_language: str = Field(
        default="en", description="Language edition of the travel guide"
    )
    request_timeout: float = Field(
        default=10.0, description="Per-request upstream timeout in seconds"
    )
    upstream_max_concurrency: int = Field(
        default=25, description="Maximum in-flight upstream requests per batch"
    )
    max_fanout: int = Field(
        default=60, description="Maximum upstream candidates requested per batch"
    )
    encyclopedia_oversample: float = Field(
        default=2.5, description="Candidates requested per wanted encyclopedia article"
    )
    travel_guide_oversample: float = Field(
        default=3.0, description="Candidates requested per wanted travel guide article"
    )
    travel_guide_page_size: int = Field(
        default=10, description="Random pages per travel guide generator request"
    )
    refill_rounds: int = Field(
        default=0, description="Extra oversampling rounds when a batch comes up short"
    )

    # Edge cache
    cache_ttl_seconds: int = Field(default=300, description="Edge cache TTL")
    cache_max_entries: int = Field(default=512, description="Edge cache capacity")

    # Batch endpoint
    batch_default_count: int = Field(default=10, description="Default batch size")
    batch_max_count: int = Field(default=20, description="Hard cap on batch size")

    # HTTP caching directives
    preview_max_age: int = Field(default=3600, description="Preview Cache-Control max-age")
    batch_max_age: int = Field(default=300, description="Batch Cache-Control max-age")

    # Pass-through page
    static_dir: str = Field(default="public", description="Directory of the web app")
    index_file: str = Field(default="index.html", description="Page served to humans")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log format (json or text)")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")
    log_rotation: str = Field(default="daily", description="Log rotation policy")
    log_retention: int = Field(default=7, description="Rotated log files to keep")

    @validator("log_format")
    def _check_log_format(cls, value: str) -> str:
        if value not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("dev", "development", "local")

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
