"""
Application configuration using pydantic-settings.
Loads from environment variables / .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # Application
    app_name: str = "schoolpay"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    
    # API Server
    host: str = "0.0.0.0"
    port: int = 3000
    
    # Postgres (asyncpg). Empty disables the database layer.
    database_url: str = ""
    database_ssl: bool = False
    
    # Redis (Celery broker)
    redis_url: str = "redis://localhost:6379/0"
    
    # Collect-request gateway
    gateway_base_url: str = "https://dev-vanilla.edviron.com"
    gateway_api_key: str = ""
    gateway_pg_secret: str = ""
    gateway_timeout_seconds: float = 30.0
    
    # Default callback after the hosted payment page
    public_app_url: str = "http://localhost:3001/payment-success"
    
    # Dashboard origin for CORS
    frontend_url: str = "http://localhost:3001"
    
    # Webhook status ordering: warn-and-apply when False, reject when True
    reject_status_regressions: bool = False
    
    # Access keys
    api_key: str = ""
    admin_api_key: str = ""
    
    @property
    def is_development(self) -> bool:
        return self.app_env == "development"
    
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
