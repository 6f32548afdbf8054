from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Channel:
    platform: str
    platform_channel_id: str
    name: str
    thumbnail_url: Optional[str] = None
    subscriber_count: int = 0
    video_count: Optional[int] = None
    view_count: Optional[int] = None
