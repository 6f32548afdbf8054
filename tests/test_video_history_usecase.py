import asyncio

import pytest

from analytics.application.usecase.video_history_usecase import VideoHistoryUseCase
from analytics.domain.analytics_error import AnalyticsError
from analytics.domain.analytics_snapshot import AnalyticsSnapshot


def _seed(cache, video_id, counts):
    async def push():
        for i, (views, likes, comments) in enumerate(counts):
            await cache.push_history(video_id, AnalyticsSnapshot(f"2026-01-0{i + 1}T00:00:00+00:00", views, likes, comments))

    asyncio.run(push())


def test_growth_is_newest_minus_oldest(cache):
    _seed(cache, "abc", [(100, 10, 1), (150, 12, 1), (300, 20, 4)])

    result = asyncio.run(VideoHistoryUseCase(cache).execute("abc"))

    assert result["videoId"] == "abc"
    assert [s["views"] for s in result["snapshots"]] == [300, 150, 100]
    assert result["summary"] == {
        "totalSnapshots": 3,
        "oldestSnapshot": "2026-01-01T00:00:00+00:00",
        "newestSnapshot": "2026-01-03T00:00:00+00:00",
        "viewsGrowth": 200,
        "likesGrowth": 10,
        "commentsGrowth": 3,
    }


def test_days_limits_snapshot_count(cache):
    _seed(cache, "abc", [(i, 0, 0) for i in range(9)])
    result = asyncio.run(VideoHistoryUseCase(cache).execute("abc", days=2))
    assert [s["views"] for s in result["snapshots"]] == [8, 7]


def test_unknown_video_has_empty_history(cache):
    result = asyncio.run(VideoHistoryUseCase(cache).execute("never-seen"))
    assert result == {"videoId": "never-seen", "snapshots": [], "summary": {"totalSnapshots": 0}}


def test_disabled_cache_returns_empty(disabled_cache):
    result = asyncio.run(VideoHistoryUseCase(disabled_cache).execute("abc"))
    assert result["snapshots"] == []


@pytest.mark.parametrize("video_id, days", [("", 7), ("abc", 0)])
def test_rejects_bad_arguments(cache, video_id, days):
    with pytest.raises(AnalyticsError):
        asyncio.run(VideoHistoryUseCase(cache).execute(video_id, days))
