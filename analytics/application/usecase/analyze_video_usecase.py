import logging
from datetime import datetime, timezone

from config.settings import AnalyticsSettings, CacheSettings
from analytics.application.port.cache_store_port import CacheStorePort
from analytics.application.port.platform_video_source_port import PlatformVideoSourcePort
from analytics.application.usecase.api_key_resolver import ApiKeyResolver
from analytics.application.usecase.detect_platform_usecase import DetectPlatformUseCase
from analytics.application.usecase.sentiment_usecase import SentimentUseCase
from analytics.domain.analytics_error import AnalyticsError
from analytics.domain.analytics_snapshot import AnalyticsSnapshot
from analytics.domain.raw_video_data import RawVideoData
from analytics.domain.sentiment_analysis import SentimentAnalysis
from analytics.domain.video_comment import AnalyzedComment
from analytics.domain.video_metrics import VideoMetrics, format_duration, format_number

logger = logging.getLogger(__name__)


class AnalyzeVideoUseCase:
    """
    URL -> analytics result, with the cache in front of the platform APIs.

    Concurrent misses on the same key are not coalesced: each caller fetches
    and writes on its own and the last write wins.
    """

    def __init__(
        self,
        cache: CacheStorePort,
        sources: dict[str, PlatformVideoSourcePort],
        key_resolver: ApiKeyResolver,
        sentiment_usecase: SentimentUseCase,
        platform_detector: DetectPlatformUseCase | None = None,
        cache_settings: CacheSettings | None = None,
        analytics_settings: AnalyticsSettings | None = None,
    ):
        self.cache = cache
        self.sources = {name.lower(): source for name, source in sources.items()}
        self.key_resolver = key_resolver
        self.sentiment_usecase = sentiment_usecase
        self.analytics_settings = analytics_settings or AnalyticsSettings()
        self.platform_detector = platform_detector or DetectPlatformUseCase(
            self.analytics_settings.supported_platforms
        )
        self.cache_settings = cache_settings or CacheSettings()

    def cache_key_for(self, url: str) -> str:
        platform = self.platform_detector.resolve_supported(url)
        source = self._source_for(platform.value)
        return self.cache.video_key(platform.value, self._extract_id(source, url))

    async def execute(
        self,
        url: str,
        skip_cache: bool = False,
        include_sentiment: bool = True,
        include_keywords: bool = True,
        user_key: str | None = None,
        user_id: str | None = None,
    ) -> dict:
        platform = self.platform_detector.resolve_supported(url).value
        source = self._source_for(platform)
        video_id = self._extract_id(source, url)
        cache_key = self.cache.video_key(platform, video_id)

        if not skip_cache:
            cached = await self.cache.get(cache_key)
            if cached and not isinstance(cached, dict):
                logger.warning("Ignoring non-object cache entry under %s", cache_key)
                cached = None
            if cached:
                logger.debug("Serving %s from cache", cache_key)
                return {**cached, "meta": {**cached.get("meta", {}), "fromCache": True}}

        credential = user_key or await self.key_resolver.resolve(user_id, platform)
        if not credential:
            raise AnalyticsError.service_not_configured(platform, source.credential_name)

        raw = await source.fetch(url, credential)

        analyzed: list[AnalyzedComment] = []
        sentiment: SentimentAnalysis | None = None
        if include_sentiment:
            analyzed = self.sentiment_usecase.analyze_comments(raw.comments)
            sentiment = self.sentiment_usecase.summarize(analyzed)

        keywords: list[dict] = []
        hashtags: list[dict] = []
        if include_keywords:
            comment_texts = [c.content for c in raw.comments]
            keywords = self.sentiment_usecase.extract_keywords(
                comment_texts, self.analytics_settings.max_keywords
            )
            hashtags = self.sentiment_usecase.extract_hashtags(
                [raw.video.description or "", *comment_texts], self.analytics_settings.max_hashtags
            )

        result = self._build_result(raw, platform, cache_key, sentiment, analyzed, keywords, hashtags)

        await self.cache.set(cache_key, result, ttl=self.cache_settings.ttl_for(platform))
        await self.cache.push_history(
            raw.platform_video_id,
            AnalyticsSnapshot.capture(raw.view_count, raw.like_count, raw.comment_count),
        )
        return result

    def _source_for(self, platform: str) -> PlatformVideoSourcePort:
        source = self.sources.get(platform)
        if source is None:
            raise AnalyticsError.service_not_configured(platform, "video source")
        return source

    @staticmethod
    def _extract_id(source: PlatformVideoSourcePort, url: str) -> str:
        video_id = source.extract_id(url)
        if not video_id:
            raise AnalyticsError.invalid_input(f"Invalid {source.platform} URL: {url}", url=url)
        return video_id

    def _build_result(
        self,
        raw: RawVideoData,
        platform: str,
        cache_key: str,
        sentiment: SentimentAnalysis | None,
        analyzed: list[AnalyzedComment],
        keywords: list[dict],
        hashtags: list[dict],
    ) -> dict:
        video = raw.video
        channel = raw.channel
        metrics = VideoMetrics.from_raw(raw.view_count, raw.like_count, raw.comment_count, raw.share_count)
        top_limit = self.analytics_settings.top_comments_limit
        return {
            "video": {
                "platform": video.platform,
                "id": video.platform_video_id,
                "url": video.url,
                "title": video.title,
                "description": video.description,
                "thumbnail": video.thumbnail_url,
                "publishedAt": video.published_at,
                "duration": video.duration,
                "durationFormatted": format_duration(video.duration),
                "tags": list(video.tags),
            },
            "channel": {
                "name": channel.name,
                "id": channel.platform_channel_id,
                "thumbnail": channel.thumbnail_url,
                "subscribers": channel.subscriber_count,
                "subscribersFormatted": format_number(channel.subscriber_count),
            },
            "metrics": metrics.to_dict(),
            "sentiment": sentiment.to_dict() if sentiment else None,
            "keywords": keywords,
            "hashtags": hashtags,
            "topComments": [c.to_dict() for c in analyzed[:top_limit]],
            "meta": {
                "fetchedAt": datetime.now(timezone.utc).isoformat(),
                "fromCache": False,
                "platform": platform,
                "cacheKey": cache_key,
            },
        }
