"""Configuration settings for the application."""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # TikTok scraping API
    tiktok_api_url: str = "http://localhost:8080"
    tiktok_timeout: float = 30.0
    sync_keywords: str = "カフェ,観光,遊び場"
    sync_delay_seconds: float = 1.0

    # Gemini (generative language API)
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"

    # Google Places / Geocoding API
    google_places_api_key: Optional[str] = None
    google_places_language: str = "ja"
    google_places_region: str = "jp"
    google_places_timeout: float = 10.0
    photo_max_width: int = 800

    # Enrichment loop pacing
    enrichment_delay_seconds: float = 2.0
    enrichment_batch_limit: int = 20

    # Redis Configuration (geocoding cache)
    cache_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: Optional[str] = None

    # Cache TTL (1 day in seconds) - place lookups rarely change
    cache_ttl_seconds: int = 86400

    # Static bearer token for sync/enrich/delete; endpoints stay open when unset
    admin_token: Optional[str] = None

    # FastAPI Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = True
    log_level: str = "INFO"

    # CORS Configuration
    cors_origins: str = "*"

    # Environment
    environment: str = "development"

    # Database
    database_url: str = "sqlite+aiosqlite:///./clipmap.db"
    auto_create_tables: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def keyword_list(self) -> List[str]:
        """Default sync keywords as a list."""
        return [k.strip() for k in self.sync_keywords.split(",") if k.strip()]

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Global settings instance
settings = Settings()
