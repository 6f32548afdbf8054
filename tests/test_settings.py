import logging

from config.database.session import build_database_url
from config.logging_config import configure_logging
from config.redis_config import get_redis
from config.settings import AnalyticsSettings, CacheSettings, LoggingSettings, RedisSettings


def test_platform_ttl_overrides_default():
    settings = CacheSettings(default_ttl=3600, youtube_ttl=600, instagram_ttl=None)
    assert settings.ttl_for("YouTube") == 600
    assert settings.ttl_for("instagram") == 3600


def test_env_values_are_read_at_construction(monkeypatch):
    monkeypatch.setenv("CACHE_TTL_SECONDS", "120")
    monkeypatch.setenv("CACHE_TTL_INSTAGRAM_SECONDS", "not-a-number")
    monkeypatch.setenv("SUPPORTED_PLATFORMS", "YouTube, TikTok,")

    cache = CacheSettings()
    analytics = AnalyticsSettings()

    assert cache.default_ttl == 120
    assert cache.instagram_ttl is None
    assert analytics.supported_platforms == ("youtube", "tiktok")


def test_redis_disabled_without_url():
    assert get_redis(RedisSettings(url="")) is None


def test_redis_client_from_url():
    client = get_redis(RedisSettings(url="redis://localhost:6379/0", socket_timeout=1))
    assert client is not None
    assert client.connection_pool.connection_kwargs["decode_responses"] is True


def test_database_url_prefers_explicit(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///analytics.db")
    assert build_database_url() == "sqlite:///analytics.db"


def test_database_url_from_parts(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("SQL_USER", "app")
    monkeypatch.setenv("SQL_PASSWORD", "p@ss word")
    monkeypatch.setenv("SQL_HOST", "db")
    monkeypatch.setenv("SQL_PORT", "5433")
    monkeypatch.delenv("SQL_DATABASE", raising=False)

    assert build_database_url() == "postgresql+psycopg2://app:p%40ss+word@db:5433/video_analytics"


def test_configure_logging_quiets_client_libraries():
    configure_logging(LoggingSettings(level="DEBUG", format="%(message)s"))
    assert logging.getLogger("googleapiclient.discovery").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING
