import os

# The ORM module builds its engine at import time; keep tests off PostgreSQL.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["REDIS_URL"] = ""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from config.settings import AnalyticsSettings, CacheSettings
from analytics.application.port.platform_video_source_port import PlatformVideoSourcePort
from analytics.application.usecase.analyze_video_usecase import AnalyzeVideoUseCase
from analytics.application.usecase.api_key_resolver import ApiKeyResolver
from analytics.application.usecase.sentiment_usecase import SentimentUseCase
from analytics.domain.analytics_error import AnalyticsError
from analytics.domain.channel import Channel
from analytics.domain.raw_video_data import RawVideoData
from analytics.domain.video import Video
from analytics.domain.video_comment import VideoComment
from analytics.infrastructure.cache.redis_cache_store import RedisCacheStore

TEST_LEXICON = {
    "love": 3.0,
    "great": 3.0,
    "amazing": 3.0,
    "good": 2.0,
    "bad": -2.5,
    "terrible": -3.0,
    "hate": -3.0,
    "boring": -2.0,
}

YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
YOUTUBE_ID = "dQw4w9WgXcQ"
INSTAGRAM_URL = "https://www.instagram.com/reel/Cxyz123AbC/"


class FakeRedis:
    """In-memory stand-in for the redis.asyncio client calls the store makes."""

    def __init__(self):
        self.values: dict[str, str] = {}
        self.lists: dict[str, list[str]] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.values.get(key)

    async def setex(self, key, ttl, value):
        self.values[key] = value
        self.ttls[key] = ttl
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            removed += int(self.values.pop(key, None) is not None)
            removed += int(self.lists.pop(key, None) is not None)
        return removed

    async def lpush(self, key, *values):
        items = self.lists.setdefault(key, [])
        for value in values:
            items.insert(0, value)
        return len(items)

    async def ltrim(self, key, start, end):
        items = self.lists.get(key, [])
        self.lists[key] = items[start : end + 1]
        return True

    async def lrange(self, key, start, end):
        return list(self.lists.get(key, [])[start : end + 1])

    async def expire(self, key, seconds):
        self.ttls[key] = seconds
        return True

    async def incr(self, key):
        value = int(self.values.get(key, 0)) + 1
        self.values[key] = str(value)
        return value

    async def flushdb(self):
        self.values.clear()
        self.lists.clear()
        self.ttls.clear()
        return True

    async def ping(self):
        return True

    async def aclose(self):
        return None


class BrokenRedis:
    """Every command fails the way a dropped connection does."""

    def __getattr__(self, name):
        async def _fail(*args, **kwargs):
            raise RedisConnectionError("connection refused")

        return _fail


class FakeVideoSource(PlatformVideoSourcePort):
    def __init__(self, platform, credential_name, id_prefix, raw_factory):
        self.platform = platform
        self.credential_name = credential_name
        self.id_prefix = id_prefix
        self.raw_factory = raw_factory
        self.calls: list[tuple[str, str]] = []
        self.error: AnalyticsError | None = None
        self.enabled = True

    def extract_id(self, url):
        if self.id_prefix not in url:
            return None
        return url.split(self.id_prefix, 1)[1].strip("/").split("&")[0] or None

    async def fetch(self, url, credential):
        self.calls.append((url, credential))
        if self.error is not None:
            raise self.error
        return self.raw_factory(url, self.extract_id(url))

    def is_enabled(self):
        return self.enabled


def make_raw_video(
    url=YOUTUBE_URL,
    video_id=YOUTUBE_ID,
    platform="youtube",
    views=10_000,
    likes=500,
    comments_count=100,
    shares=0,
    comments=None,
    title="Test video",
    description="Watch this #Python #tutorial",
):
    if comments is None:
        comments = (
            VideoComment("c1", "alice", "I love this great tutorial", like_count=40),
            VideoComment("c2", "bob", "This was boring and bad", like_count=2),
            VideoComment("c3", "carol", "Uploaded from my phone #python", like_count=0),
        )
    return RawVideoData(
        video=Video(
            platform=platform,
            platform_video_id=video_id,
            url=url,
            title=title,
            channel_id="UC123",
            description=description,
            duration=213,
            tags=("python", "tutorial"),
        ),
        channel=Channel(platform=platform, platform_channel_id="UC123", name="Test Channel", subscriber_count=1_500_000),
        view_count=views,
        like_count=likes,
        comment_count=comments_count,
        share_count=shares,
        comments=tuple(comments),
    )


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache_settings():
    return CacheSettings(default_ttl=3600, youtube_ttl=None, instagram_ttl=None, rate_limit_max_requests=5)


@pytest.fixture
def analytics_settings():
    return AnalyticsSettings(
        supported_platforms=("youtube", "instagram"),
        compare_max_urls=5,
        top_comments_limit=10,
        max_keywords=15,
        max_hashtags=10,
    )


@pytest.fixture
def cache(fake_redis, cache_settings):
    return RedisCacheStore(fake_redis, cache_settings)


@pytest.fixture
def disabled_cache(cache_settings):
    return RedisCacheStore(None, cache_settings)


@pytest.fixture
def sentiment_usecase():
    return SentimentUseCase(lexicon=TEST_LEXICON)


@pytest.fixture
def youtube_source():
    return FakeVideoSource(
        "youtube",
        "YOUTUBE_API_KEY",
        "watch?v=",
        lambda url, video_id: make_raw_video(url=url, video_id=video_id),
    )


@pytest.fixture
def instagram_source():
    return FakeVideoSource(
        "instagram",
        "RAPIDAPI_KEY",
        "/reel/",
        lambda url, video_id: make_raw_video(
            url=url, video_id=video_id, platform="instagram", views=2_000, likes=400, comments_count=50, shares=25,
            title="Reel",
        ),
    )


@pytest.fixture
def key_resolver():
    return ApiKeyResolver(system_keys={"youtube": "system-yt-key", "instagram": "system-ig-key"})


@pytest.fixture
def make_analyze_usecase(youtube_source, instagram_source, key_resolver, sentiment_usecase, cache_settings, analytics_settings):
    def _make(cache, resolver=None):
        return AnalyzeVideoUseCase(
            cache=cache,
            sources={"youtube": youtube_source, "instagram": instagram_source},
            key_resolver=resolver or key_resolver,
            sentiment_usecase=sentiment_usecase,
            cache_settings=cache_settings,
            analytics_settings=analytics_settings,
        )

    return _make


@pytest.fixture
def analyze_usecase(make_analyze_usecase, cache):
    return make_analyze_usecase(cache)
