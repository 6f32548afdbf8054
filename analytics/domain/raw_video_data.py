from dataclasses import dataclass, field
from datetime import datetime, timezone

from analytics.domain.channel import Channel
from analytics.domain.video import Video
from analytics.domain.video_comment import VideoComment


@dataclass(frozen=True)
class RawVideoData:
    """What a platform source hands back for one URL."""

    video: Video
    channel: Channel
    view_count: int
    like_count: int
    comment_count: int
    share_count: int = 0
    comments: tuple[VideoComment, ...] = ()
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def platform(self) -> str:
        return self.video.platform

    @property
    def platform_video_id(self) -> str:
        return self.video.platform_video_id
