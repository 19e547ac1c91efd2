"""
Settings Configuration
Pydantic-based configuration for listing fetches and the media cache
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class ListingSettings(BaseSettings):
    """Listing endpoint configuration"""
    base_url: str = Field(default="https://www.reddit.com", description="Canonical listing host")
    fetch_limit: int = Field(default=30, description="Entries requested per listing")
    request_timeout: float = Field(default=10.0, description="Per-request timeout (seconds)")
    user_agent: str = Field(default="SubSwipe/1.0", description="User Agent")
    fallback_enabled: bool = Field(default=True, description="Try alternate proxies when the canonical endpoint fails")
    fallback_endpoints: List[str] = Field(
        default_factory=lambda: ["allorigins", "jina"],
        description="Alternate endpoints, in priority order",
    )

    class Config:
        env_prefix = "LISTING_"


class CacheSettings(BaseSettings):
    """Media cache configuration"""
    ttl_seconds: float = Field(default=300.0, description="Snapshot time-to-live (seconds)")
    cache_dir: str = Field(default="./data/cache", description="Disk tier directory")
    key_prefix: str = Field(default="subswipe:", description="Disk tier key prefix")
    disk_enabled: bool = Field(default=True, description="Enable the persistent tier")

    class Config:
        env_prefix = "CACHE_"


class GeneralSettings(BaseSettings):
    """General settings"""
    log_level: str = Field(default="INFO", description="Log level")
    log_file: Optional[str] = Field(default=None, description="Optional log file name")


class Settings(BaseSettings):
    """Root settings, aggregates all sub-settings"""

    listing: ListingSettings = Field(default_factory=ListingSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    general: GeneralSettings = Field(default_factory=GeneralSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def load_from_env_file(cls, env_path: Optional[Path] = None) -> "Settings":
        """Load settings, reading the given .env file first when it exists"""
        if env_path is None:
            # config/.env by default
            env_path = Path(__file__).parent / ".env"

        if env_path.exists():
            from dotenv import load_dotenv
            load_dotenv(env_path)

        return cls(
            listing=ListingSettings(),
            cache=CacheSettings(),
            general=GeneralSettings(),
        )


@lru_cache()
def get_settings() -> Settings:
    """Global settings singleton"""
    return Settings.load_from_env_file()
