from abc import ABC, abstractmethod
from typing import Any

from analytics.domain.analytics_snapshot import AnalyticsSnapshot


class CacheStorePort(ABC):
    """
    TTL key/value cache plus a bounded per-video history list.
    Implementations never raise: reads miss, writes return False.
    """

    @staticmethod
    def video_key(platform: str, video_id: str) -> str:
        return f"video:{platform.lower()}:{video_id}"

    @staticmethod
    def history_key(video_id: str) -> str:
        return f"history:{video_id}"

    @abstractmethod
    def is_enabled(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        raise NotImplementedError

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def push_history(self, video_id: str, snapshot: AnalyticsSnapshot) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def read_history(self, video_id: str, max_days: int = 7) -> list[AnalyticsSnapshot]:
        raise NotImplementedError

    @abstractmethod
    async def increment_rate_limit(self, identifier: str, window_seconds: int | None = None) -> dict:
        raise NotImplementedError

    @abstractmethod
    async def clear_all(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def stats(self) -> dict:
        raise NotImplementedError
