"""
Configuration management for the PhimAPI channel adapter.
Uses pydantic-settings for environment variable loading.
"""
from enum import Enum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class SummaryMode(str, Enum):
    """How listing items are turned into channels."""
    EAGER = "eager"
    LIGHTWEIGHT = "lightweight"


class PointerStyle(str, Enum):
    """Where the lightweight listing points clients for the detail lookup."""
    REMOTE_DATA = "remote_data"
    DETAIL_URL = "detail_url"


class EpisodePolicy(str, Enum):
    """How the detail mapper lays out a server's episodes."""
    PER_EPISODE_STREAM = "per_episode_stream"
    PER_EPISODE_LINK = "per_episode_link"


class ImageField(str, Enum):
    """Upstream artwork field used for channel and stream images."""
    POSTER_URL = "poster_url"
    THUMB_URL = "thumb_url"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    app_name: str = "PhimAPI Channels"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server Configuration
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS Configuration
    cors_origins: list[str] = ["*"]

    # Upstream catalog
    phimapi_base: str = "https://phimapi.com"
    upstream_timeout_seconds: float = 8.0

    # Listing
    listing_path: str = "/"
    listing_limit: int = 10
    strict_page: bool = False  # Reject pages that are not positive integers

    # Mapping strategy (fixed for the lifetime of the process)
    summary_mode: SummaryMode = SummaryMode.EAGER
    pointer_style: PointerStyle = PointerStyle.REMOTE_DATA
    episode_policy: EpisodePolicy = EpisodePolicy.PER_EPISODE_STREAM
    image_field: ImageField = ImageField.POSTER_URL

    # Provider metadata shown by the front end
    provider_id: str = "phimapi-latest"
    provider_name: str = "Phim Mới Cập Nhật"
    provider_description: str = "Danh sách phim mới nhất được lấy từ PhimAPI"
    provider_url: str = "https://phimapi.com"
    provider_color: str = "#2196F3"
    provider_logo_url: str = "https://phimapi.com/phimimg/logo.png"
    provider_logo_type: str = "contain"
    provider_logo_width: int = 50
    provider_logo_height: int = 50
    provider_grid_number: int = 4
    group_title: str = "Phim Mới Cập Nhật"

    model_config = SettingsConfigDict(env_prefix="PHIM_", env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
