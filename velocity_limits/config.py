"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./velocity_limits.db"
    db_pool_size: int = 10
    db_max_overflow: int = 10

    # Service
    service_name: str = "velocity-limits"
    log_level: str = "INFO"

    # History endpoint
    history_max_items: int = 50


settings = Settings()
