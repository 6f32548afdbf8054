from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """
    One point-in-time observation of a video's counters.
    Stored most-recent-first in the per-video history list.
    """

    timestamp: str
    views: int
    likes: int
    comments: int

    @classmethod
    def capture(cls, views: int, likes: int, comments: int) -> "AnalyticsSnapshot":
        return cls(
            timestamp=datetime.now(timezone.utc).isoformat(),
            views=views,
            likes=likes,
            comments=comments,
        )

    @classmethod
    def from_dict(cls, payload: dict) -> "AnalyticsSnapshot":
        return cls(
            timestamp=str(payload.get("timestamp", "")),
            views=int(payload.get("views", 0)),
            likes=int(payload.get("likes", 0)),
            comments=int(payload.get("comments", 0)),
        )

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "views": self.views,
            "likes": self.likes,
            "comments": self.comments,
        }
