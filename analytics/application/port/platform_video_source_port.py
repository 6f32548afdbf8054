from abc import ABC, abstractmethod

from analytics.domain.raw_video_data import RawVideoData


class PlatformVideoSourcePort(ABC):
    """
    One implementation per platform. Sources only see (url, credential);
    cache, history and user identity stay on the caller's side.
    """

    platform: str
    # env var naming the system-wide credential, used in "not configured" errors
    credential_name: str

    @abstractmethod
    def extract_id(self, url: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    async def fetch(self, url: str, credential: str) -> RawVideoData:
        raise NotImplementedError

    @abstractmethod
    def is_enabled(self) -> bool:
        """
        True when the process-wide system credential is set. A user key can
        still make the platform usable when this is False; ask ApiKeyResolver
        for the per-user answer.
        """
        raise NotImplementedError
