from analytics.application.port.cache_store_port import CacheStorePort
from analytics.domain.analytics_error import AnalyticsError
from analytics.domain.analytics_snapshot import AnalyticsSnapshot


class VideoHistoryUseCase:
    """
    Growth tracking over the cached snapshot list.

    `days` is a count of most-recent snapshots, not a time window: a video
    analysed twice a day returns half a week for days=7.
    """

    def __init__(self, cache: CacheStorePort):
        self.cache = cache

    async def execute(self, video_id: str, days: int = 7) -> dict:
        if not video_id:
            raise AnalyticsError.invalid_input("Video ID is required")
        if days < 1:
            raise AnalyticsError.invalid_input("days must be a positive integer", days=days)

        snapshots = await self.cache.read_history(video_id, days) if self.cache.is_enabled() else []
        return {
            "videoId": video_id,
            "snapshots": [s.to_dict() for s in snapshots],
            "summary": self.summarize(snapshots),
        }

    @staticmethod
    def summarize(snapshots: list[AnalyticsSnapshot]) -> dict:
        if not snapshots:
            return {"totalSnapshots": 0}
        newest, oldest = snapshots[0], snapshots[-1]
        return {
            "totalSnapshots": len(snapshots),
            "oldestSnapshot": oldest.timestamp,
            "newestSnapshot": newest.timestamp,
            "viewsGrowth": newest.views - oldest.views,
            "likesGrowth": newest.likes - oldest.likes,
            "commentsGrowth": newest.comments - oldest.comments,
        }
