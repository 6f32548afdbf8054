import asyncio
import logging

from analytics.application.usecase.analyze_video_usecase import AnalyzeVideoUseCase
from analytics.domain.analytics_error import AnalyticsError

logger = logging.getLogger(__name__)

COMPARED_METRICS = ("views", "likes", "comments", "engagementRate")
MIN_URLS = 2


class CompareVideosUseCase:
    def __init__(self, analyze_usecase: AnalyzeVideoUseCase, max_urls: int = 10):
        self.analyze_usecase = analyze_usecase
        self.max_urls = max_urls

    async def execute(self, urls: list[str], user_id: str | None = None, skip_cache: bool = False) -> dict:
        if not isinstance(urls, list) or len(urls) < MIN_URLS:
            raise AnalyticsError.invalid_input(f"At least {MIN_URLS} URLs are required for comparison")
        if len(urls) > self.max_urls:
            raise AnalyticsError.invalid_input(f"Maximum {self.max_urls} videos can be compared at once")

        # Siblings keep running when one URL fails.
        outcomes = await asyncio.gather(
            *(self.analyze_usecase.execute(url, skip_cache=skip_cache, user_id=user_id) for url in urls),
            return_exceptions=True,
        )

        videos: list[dict] = []
        successful: list[dict] = []
        for url, outcome in zip(urls, outcomes):
            if isinstance(outcome, BaseException):
                videos.append(self._error_item(url, outcome))
            else:
                videos.append(outcome)
                successful.append(outcome)

        best = self.best_performing(successful)
        worst = self.worst_performing(successful)
        return {
            "videos": videos,
            "comparison": self.generate_comparison(successful) if len(successful) >= MIN_URLS else None,
            "ranking": self.rank(successful),
            "summary": {
                "totalVideos": len(urls),
                "successfulFetches": len(successful),
                "failedFetches": len(urls) - len(successful),
                "bestPerforming": best["video"]["url"] if best else None,
                "worstPerforming": worst["video"]["url"] if worst else None,
            },
        }

    @staticmethod
    def _error_item(url: str, error: BaseException) -> dict:
        if isinstance(error, AnalyticsError):
            return {"url": url, "error": error.message, "code": error.code, "statusCode": error.status_code}
        if not isinstance(error, Exception):
            raise error
        logger.error("Unexpected failure while comparing %s", url, exc_info=error)
        return {"url": url, "error": str(error) or error.__class__.__name__, "code": "INTERNAL_ERROR", "statusCode": 500}

    @staticmethod
    def generate_comparison(videos: list[dict]) -> dict:
        comparison = {}
        for metric in COMPARED_METRICS:
            values = [v["metrics"][metric] for v in videos]
            highest = max(values)
            winner = videos[values.index(highest)]
            comparison[metric] = {
                "highest": highest,
                "lowest": min(values),
                "average": round(sum(values) / len(values), 2),
                "winner": winner["video"]["title"],
                "winnerUrl": winner["video"]["url"],
            }
        return comparison

    @staticmethod
    def rank(videos: list[dict]) -> list[dict]:
        """Views first, engagement rate breaks ties."""
        ordered = sorted(
            videos,
            key=lambda v: (v["metrics"]["views"], v["metrics"]["engagementRate"]),
            reverse=True,
        )
        return [
            {
                "rank": position,
                "url": v["video"]["url"],
                "title": v["video"]["title"],
                "platform": v["video"]["platform"],
                "views": v["metrics"]["views"],
                "engagementRate": v["metrics"]["engagementRate"],
            }
            for position, v in enumerate(ordered, start=1)
        ]

    @staticmethod
    def best_performing(videos: list[dict]) -> dict | None:
        if not videos:
            return None
        return max(videos, key=lambda v: v["metrics"]["engagementRate"])

    @staticmethod
    def worst_performing(videos: list[dict]) -> dict | None:
        if not videos:
            return None
        return min(videos, key=lambda v: v["metrics"]["engagementRate"])
