import asyncio
import json
from unittest.mock import AsyncMock

import pytest

from analytics.application.usecase.api_key_resolver import ApiKeyResolver
from analytics.domain.analytics_error import AnalyticsError, ErrorKind
from analytics.domain.sentiment_analysis import POSITIVE
from conftest import INSTAGRAM_URL, YOUTUBE_ID, YOUTUBE_URL, make_raw_video


def test_fresh_analysis_result_shape(analyze_usecase, youtube_source):
    result = asyncio.run(analyze_usecase.execute(YOUTUBE_URL))

    assert set(result) == {"video", "channel", "metrics", "sentiment", "keywords", "hashtags", "topComments", "meta"}
    assert result["video"]["id"] == YOUTUBE_ID
    assert result["video"]["durationFormatted"] == "3:33"
    assert result["channel"]["subscribersFormatted"] == "1.5M"
    assert result["metrics"]["engagementRate"] == 6.0
    assert result["meta"]["fromCache"] is False
    assert result["meta"]["platform"] == "youtube"
    assert result["meta"]["cacheKey"] == f"video:youtube:{YOUTUBE_ID}"
    assert youtube_source.calls == [(YOUTUBE_URL, "system-yt-key")]


def test_sentiment_and_keywords_come_from_comments(analyze_usecase):
    result = asyncio.run(analyze_usecase.execute(YOUTUBE_URL))

    sentiment = result["sentiment"]
    assert sentiment["overall"]["sentiment"] == POSITIVE
    assert sentiment["distribution"] == {"positive": 33, "neutral": 33, "negative": 33}
    assert sentiment["totalAnalyzed"] == 3
    assert [c["id"] for c in result["topComments"]] == ["c1", "c2", "c3"]
    assert {"hashtag": "#python", "count": 2} in result["hashtags"]
    assert any(k["keyword"] == "tutorial" for k in result["keywords"])


def test_second_call_is_served_from_cache(analyze_usecase, youtube_source):
    first = asyncio.run(analyze_usecase.execute(YOUTUBE_URL))
    second = asyncio.run(analyze_usecase.execute(YOUTUBE_URL + "&t=10"))

    assert len(youtube_source.calls) == 1
    assert second["meta"]["fromCache"] is True
    assert second["meta"]["cacheKey"] == first["meta"]["cacheKey"]
    # Everything except the cache flag survives the JSON round trip.
    assert {k: v for k, v in second.items() if k != "meta"} == json.loads(
        json.dumps({k: v for k, v in first.items() if k != "meta"})
    )
    assert second["meta"]["fetchedAt"] == first["meta"]["fetchedAt"]


def test_cache_entry_written_with_platform_ttl(analyze_usecase, fake_redis):
    asyncio.run(analyze_usecase.execute(YOUTUBE_URL))
    stored = json.loads(fake_redis.values[f"video:youtube:{YOUTUBE_ID}"])

    assert stored["meta"]["fromCache"] is False
    assert fake_redis.ttls[f"video:youtube:{YOUTUBE_ID}"] == 3600


def test_skip_cache_refetches_and_overwrites(analyze_usecase, youtube_source):
    asyncio.run(analyze_usecase.execute(YOUTUBE_URL))
    result = asyncio.run(analyze_usecase.execute(YOUTUBE_URL, skip_cache=True))

    assert len(youtube_source.calls) == 2
    assert result["meta"]["fromCache"] is False


def test_each_fetch_appends_history(analyze_usecase, fake_redis):
    asyncio.run(analyze_usecase.execute(YOUTUBE_URL))
    asyncio.run(analyze_usecase.execute(YOUTUBE_URL))  # cache hit, no snapshot
    asyncio.run(analyze_usecase.execute(YOUTUBE_URL, skip_cache=True))

    history = fake_redis.lists[f"history:{YOUTUBE_ID}"]
    assert len(history) == 2
    assert json.loads(history[0])["views"] == 10_000


def test_instagram_uses_its_own_credential(analyze_usecase, instagram_source):
    result = asyncio.run(analyze_usecase.execute(INSTAGRAM_URL))

    assert instagram_source.calls == [(INSTAGRAM_URL, "system-ig-key")]
    assert result["meta"]["cacheKey"] == "video:instagram:Cxyz123AbC"
    assert result["metrics"]["shares"] == 25
    assert result["metrics"]["engagementRate"] == 23.75


def test_detected_but_unsupported_platform(analyze_usecase):
    with pytest.raises(AnalyticsError) as exc_info:
        asyncio.run(analyze_usecase.execute("https://www.tiktok.com/@a/video/1"))
    assert exc_info.value.kind is ErrorKind.UNSUPPORTED_PLATFORM


@pytest.mark.parametrize("url", ["", "https://www.youtube.com/feed/trending"])
def test_invalid_urls(analyze_usecase, url):
    with pytest.raises(AnalyticsError) as exc_info:
        asyncio.run(analyze_usecase.execute(url))
    assert exc_info.value.kind is ErrorKind.INVALID_INPUT


def test_missing_credential_names_the_variable(make_analyze_usecase, cache, youtube_source):
    usecase = make_analyze_usecase(cache, ApiKeyResolver(system_keys={"youtube": ""}))

    with pytest.raises(AnalyticsError) as exc_info:
        asyncio.run(usecase.execute(YOUTUBE_URL))

    assert exc_info.value.kind is ErrorKind.SERVICE_NOT_CONFIGURED
    assert exc_info.value.status_code == 503
    assert "YOUTUBE_API_KEY" in exc_info.value.message
    assert youtube_source.calls == []


def test_request_key_overrides_resolver(analyze_usecase, youtube_source):
    asyncio.run(analyze_usecase.execute(YOUTUBE_URL, user_key="my-own-key"))
    assert youtube_source.calls == [(YOUTUBE_URL, "my-own-key")]


def test_user_id_is_passed_to_resolver(make_analyze_usecase, cache, youtube_source):
    resolver = AsyncMock(spec=ApiKeyResolver)
    resolver.resolve.return_value = "user-key"
    usecase = make_analyze_usecase(cache, resolver)

    asyncio.run(usecase.execute(YOUTUBE_URL, user_id="u-42"))

    resolver.resolve.assert_awaited_once_with("u-42", "youtube")
    assert youtube_source.calls == [(YOUTUBE_URL, "user-key")]


def test_upstream_errors_propagate_without_retry(analyze_usecase, youtube_source, fake_redis):
    youtube_source.error = AnalyticsError.quota_exceeded("YouTube")

    with pytest.raises(AnalyticsError) as exc_info:
        asyncio.run(analyze_usecase.execute(YOUTUBE_URL))

    assert exc_info.value.kind is ErrorKind.QUOTA_EXCEEDED
    assert len(youtube_source.calls) == 1
    assert fake_redis.values == {}


def test_disabled_cache_still_analyzes(make_analyze_usecase, disabled_cache, youtube_source):
    usecase = make_analyze_usecase(disabled_cache)

    first = asyncio.run(usecase.execute(YOUTUBE_URL))
    second = asyncio.run(usecase.execute(YOUTUBE_URL))

    assert first["meta"]["fromCache"] is False
    assert second["meta"]["fromCache"] is False
    assert len(youtube_source.calls) == 2


def test_zero_views_and_no_comments(analyze_usecase, youtube_source):
    youtube_source.raw_factory = lambda url, video_id: make_raw_video(
        url=url, video_id=video_id, views=0, likes=0, comments_count=0, comments=()
    )
    result = asyncio.run(analyze_usecase.execute(YOUTUBE_URL))

    assert result["metrics"]["engagementRate"] == 0
    assert result["sentiment"]["distribution"] == {"positive": 0, "neutral": 100, "negative": 0}
    assert result["sentiment"]["totalAnalyzed"] == 0
    assert result["topComments"] == []
    assert result["keywords"] == []


def test_optional_sections_can_be_skipped(analyze_usecase):
    result = asyncio.run(analyze_usecase.execute(YOUTUBE_URL, include_sentiment=False, include_keywords=False))

    assert result["sentiment"] is None
    assert result["topComments"] == []
    assert result["keywords"] == []
    assert result["hashtags"] == []


def test_cache_key_for(analyze_usecase):
    assert analyze_usecase.cache_key_for(YOUTUBE_URL + "&feature=share") == f"video:youtube:{YOUTUBE_ID}"


@pytest.mark.parametrize("stored", ['["not", "an", "object"]', '"stale string"', "42"])
def test_non_object_cache_entry_is_a_miss(analyze_usecase, youtube_source, fake_redis, stored):
    fake_redis.values[f"video:youtube:{YOUTUBE_ID}"] = stored

    result = asyncio.run(analyze_usecase.execute(YOUTUBE_URL))

    assert result["meta"]["fromCache"] is False
    assert len(youtube_source.calls) == 1
    assert json.loads(fake_redis.values[f"video:youtube:{YOUTUBE_ID}"])["video"]["id"] == YOUTUBE_ID
