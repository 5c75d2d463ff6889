"""Application configuration."""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "UniMarket"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./unimarket.db"

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Bearer tokens
    jwt_secret: str = "your-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7

    # Message rate limiting
    message_rate_limit_enabled: bool = True
    message_rate_limit: int = 30
    message_rate_limit_window: int = 60  # seconds

    # CORS
    frontend_url: str = "http://localhost:5173"

    # Seed demo users and items into an empty database on startup
    seed_demo_data: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
