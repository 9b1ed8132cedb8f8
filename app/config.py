"""Configuration management for the headline video service."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="HV_", extra="ignore")

    # Upstream news feed
    feed_url: str = "https://news.google.com/rss?hl=hi-IN&gl=IN&ceid=IN:hi"
    feed_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    feed_ttl_seconds: int = 300  # 5 minutes
    feed_timeout_seconds: float = 15
    max_headlines: int = Field(default=6, ge=1)

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Encoder
    scratch_dir: str = Field(default="./scratch")
    ffmpeg_binary: str = Field(default="ffmpeg")

    # Rendering
    font_path: str = Field(default="")  # Devanagari-capable TrueType font
    font_path_latin: str = Field(default="")  # counter and date caption
    display_locale: str = "hi_IN"
    display_timezone: str = "Asia/Kolkata"

    # Presentation
    download_filename: str = "aaj-ki-headlines.mp4"

    # CORS
    frontend_origin: str = "http://localhost:5173"

    # Environment
    env: str = Field(default="dev", pattern="^(dev|prod)$")
    log_level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$")


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
