import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class YouTubeSettings:
    api_key: str = field(default_factory=lambda: os.getenv("YOUTUBE_API_KEY", ""))
    max_comments: int = field(default_factory=lambda: _int_env("YOUTUBE_MAX_COMMENTS", 100))


@dataclass
class InstagramSettings:
    api_key: str = field(default_factory=lambda: os.getenv("RAPIDAPI_KEY", ""))
    base_url: str = field(
        default_factory=lambda: os.getenv(
            "INSTAGRAM_BASE_URL", "https://instagram-scraper-api2.p.rapidapi.com"
        )
    )
    timeout_seconds: int = field(default_factory=lambda: _int_env("INSTAGRAM_TIMEOUT_SECONDS", 15))


@dataclass
class RedisSettings:
    url: str = field(default_factory=lambda: os.getenv("REDIS_URL", ""))
    socket_timeout: int = field(default_factory=lambda: _int_env("REDIS_SOCKET_TIMEOUT", 2))


@dataclass
class CacheSettings:
    default_ttl: int = field(default_factory=lambda: _int_env("CACHE_TTL_SECONDS", 3600))
    youtube_ttl: int | None = field(default_factory=lambda: _int_env("CACHE_TTL_YOUTUBE_SECONDS", 0) or None)
    instagram_ttl: int | None = field(
        default_factory=lambda: _int_env("CACHE_TTL_INSTAGRAM_SECONDS", 0) or None
    )
    history_max_entries: int = 30
    history_ttl: int = 86400 * 30
    rate_limit_max_requests: int = field(default_factory=lambda: _int_env("RATE_LIMIT_MAX_REQUESTS", 100))
    rate_limit_window_seconds: int = field(default_factory=lambda: _int_env("RATE_LIMIT_WINDOW_SECONDS", 900))

    def ttl_for(self, platform: str) -> int:
        overrides = {"youtube": self.youtube_ttl, "instagram": self.instagram_ttl}
        return overrides.get(platform.lower()) or self.default_ttl


@dataclass
class AnalyticsSettings:
    supported_platforms: tuple[str, ...] = field(
        default_factory=lambda: tuple(
            p.strip().lower()
            for p in os.getenv("SUPPORTED_PLATFORMS", "youtube,instagram").split(",")
            if p.strip()
        )
    )
    compare_max_urls: int = field(default_factory=lambda: _int_env("COMPARE_MAX_URLS", 10))
    top_comments_limit: int = field(default_factory=lambda: _int_env("TOP_COMMENTS_LIMIT", 10))
    max_keywords: int = field(default_factory=lambda: _int_env("MAX_KEYWORDS", 15))
    max_hashtags: int = field(default_factory=lambda: _int_env("MAX_HASHTAGS", 10))


@dataclass
class SecuritySettings:
    encryption_secret: str = field(default_factory=lambda: os.getenv("API_KEY_ENCRYPTION_SECRET", ""))


@dataclass
class LoggingSettings:
    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: str = field(
        default_factory=lambda: os.getenv(
            "LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )
