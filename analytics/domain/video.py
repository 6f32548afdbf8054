from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class Video:
    platform: str
    platform_video_id: str
    url: str
    title: str
    channel_id: str
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    published_at: Optional[str] = None
    duration: int = 0
    tags: tuple[str, ...] = ()
    category_id: Optional[str] = None
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
