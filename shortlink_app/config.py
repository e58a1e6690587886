from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True

    # Application
    app_name: str = "Shortlink"
    app_version: str = "1.0.0"

    # Server
    host: str = "127.0.0.1"
    port: int = 7171
    base_url: str = "http://127.0.0.1:7171"

    # Link storage
    link_data_path: str = "data/links.json"

    # Keys
    min_key_length: int = 4
    key_blacklist: str = ""  # Space separated, e.g. "api admin static"

    # Usage tracking
    merge_interval_ms: int = 200  # How often queued access events are merged

    # Queue settings
    queue_backend: str = "memory"  # Options: "memory", "redis"
    redis_url: str = "redis://localhost:6379/0"
    queue_name: str = "link_access_events"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def blacklisted_keys(self) -> List[str]:
        """Blacklist as a list, empty items skipped"""
        return [key.strip() for key in self.key_blacklist.split(" ") if key.strip()]

    @property
    def merge_interval_seconds(self) -> float:
        return self.merge_interval_ms / 1000


# Create settings instance
settings = Settings()
