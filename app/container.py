import logging
from dataclasses import dataclass

from config.redis_config import get_redis
from config.settings import (
    AnalyticsSettings,
    CacheSettings,
    InstagramSettings,
    RedisSettings,
    SecuritySettings,
    YouTubeSettings,
)
from analytics.application.port.cache_store_port import CacheStorePort
from analytics.application.port.platform_video_source_port import PlatformVideoSourcePort
from analytics.application.usecase.analyze_video_usecase import AnalyzeVideoUseCase
from analytics.application.usecase.api_key_resolver import ApiKeyResolver
from analytics.application.usecase.compare_videos_usecase import CompareVideosUseCase
from analytics.application.usecase.detect_platform_usecase import DetectPlatformUseCase
from analytics.application.usecase.sentiment_usecase import SentimentUseCase
from analytics.application.usecase.video_history_usecase import VideoHistoryUseCase
from analytics.infrastructure.cache.redis_cache_store import RedisCacheStore
from analytics.infrastructure.client.instagram_client import InstagramClient
from analytics.infrastructure.client.youtube_client import YouTubeClient

logger = logging.getLogger(__name__)


@dataclass
class AnalyticsContainer:
    cache: CacheStorePort
    key_resolver: ApiKeyResolver
    detect_platform_usecase: DetectPlatformUseCase
    analyze_video_usecase: AnalyzeVideoUseCase
    compare_videos_usecase: CompareVideosUseCase
    video_history_usecase: VideoHistoryUseCase


def build_user_key_store(security: SecuritySettings):
    """Stored user keys need both the database and the encryption secret."""
    if not security.encryption_secret:
        logger.warning("API_KEY_ENCRYPTION_SECRET not set - user API keys disabled, system keys only")
        return None, None
    from analytics.infrastructure.crypto.fernet_key_cipher import FernetKeyCipher
    from analytics.infrastructure.repository.user_api_key_repository_impl import UserApiKeyRepositoryImpl

    return UserApiKeyRepositoryImpl(), FernetKeyCipher(security.encryption_secret)


def build_container(
    cache: CacheStorePort | None = None,
    sources: dict[str, PlatformVideoSourcePort] | None = None,
    key_resolver: ApiKeyResolver | None = None,
    sentiment_usecase: SentimentUseCase | None = None,
    analytics_settings: AnalyticsSettings | None = None,
    cache_settings: CacheSettings | None = None,
) -> AnalyticsContainer:
    analytics_settings = analytics_settings or AnalyticsSettings()
    cache_settings = cache_settings or CacheSettings()
    youtube_settings = YouTubeSettings()
    instagram_settings = InstagramSettings()

    if cache is None:
        cache = RedisCacheStore(get_redis(RedisSettings()), cache_settings)
    if sources is None:
        sources = {
            YouTubeClient.platform: YouTubeClient(youtube_settings),
            InstagramClient.platform: InstagramClient(instagram_settings),
        }
    if key_resolver is None:
        repository, cipher = build_user_key_store(SecuritySettings())
        key_resolver = ApiKeyResolver(
            system_keys={
                YouTubeClient.platform: youtube_settings.api_key,
                InstagramClient.platform: instagram_settings.api_key,
            },
            repository=repository,
            cipher=cipher,
        )

    detect_platform_usecase = DetectPlatformUseCase(analytics_settings.supported_platforms)
    analyze_video_usecase = AnalyzeVideoUseCase(
        cache=cache,
        sources=sources,
        key_resolver=key_resolver,
        sentiment_usecase=sentiment_usecase or SentimentUseCase(),
        platform_detector=detect_platform_usecase,
        cache_settings=cache_settings,
        analytics_settings=analytics_settings,
    )
    return AnalyticsContainer(
        cache=cache,
        key_resolver=key_resolver,
        detect_platform_usecase=detect_platform_usecase,
        analyze_video_usecase=analyze_video_usecase,
        compare_videos_usecase=CompareVideosUseCase(analyze_video_usecase, analytics_settings.compare_max_urls),
        video_history_usecase=VideoHistoryUseCase(cache),
    )
