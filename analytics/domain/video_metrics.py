from dataclasses import dataclass

VIRAL_VIEWS = 1_000_000
VIRAL_ENGAGEMENT = 5.0
HIGH_ENGAGEMENT = 3.0


def format_number(value: int | float) -> str:
    """1000 -> 1K, 1500000 -> 1.5M, 2000000000 -> 2B."""
    for threshold, suffix in ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K")):
        if value >= threshold:
            scaled = f"{value / threshold:.1f}"
            if scaled.endswith(".0"):
                scaled = scaled[:-2]
            return scaled + suffix
    return f"{int(value):,}"


def format_duration(seconds: int) -> str:
    if not seconds:
        return "0:00"
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _rate(part: int, views: int) -> float:
    if views == 0:
        return 0.0
    return round(part / views * 100, 4)


@dataclass(frozen=True)
class VideoMetrics:
    view_count: int
    like_count: int
    comment_count: int
    share_count: int
    engagement_rate: float

    @classmethod
    def from_raw(cls, views: int, likes: int, comments: int, shares: int = 0) -> "VideoMetrics":
        return cls(
            view_count=views,
            like_count=likes,
            comment_count=comments,
            share_count=shares,
            engagement_rate=cls.calculate_engagement_rate(views, likes, comments, shares),
        )

    @staticmethod
    def calculate_engagement_rate(views: int, likes: int, comments: int, shares: int = 0) -> float:
        """Percentage of views that turned into a like, comment or share."""
        return _rate(likes + comments + shares, views)

    @property
    def total_engagement(self) -> int:
        return self.like_count + self.comment_count + self.share_count

    @property
    def like_rate(self) -> float:
        return _rate(self.like_count, self.view_count)

    @property
    def comment_rate(self) -> float:
        return _rate(self.comment_count, self.view_count)

    def is_viral(self) -> bool:
        return self.view_count >= VIRAL_VIEWS and self.engagement_rate >= VIRAL_ENGAGEMENT

    def is_highly_engaged(self) -> bool:
        return self.engagement_rate >= HIGH_ENGAGEMENT

    def compare_with(self, other: "VideoMetrics") -> dict:
        return {
            "viewsDiff": self.view_count - other.view_count,
            "likesDiff": self.like_count - other.like_count,
            "commentsDiff": self.comment_count - other.comment_count,
            "engagementDiff": round(self.engagement_rate - other.engagement_rate, 4),
        }

    def to_dict(self) -> dict:
        return {
            "views": self.view_count,
            "viewsFormatted": format_number(self.view_count),
            "likes": self.like_count,
            "likesFormatted": format_number(self.like_count),
            "comments": self.comment_count,
            "commentsFormatted": format_number(self.comment_count),
            "shares": self.share_count,
            "sharesFormatted": format_number(self.share_count),
            "engagementRate": self.engagement_rate,
            "engagementRateFormatted": f"{self.engagement_rate:.2f}%",
        }
