from typing import Iterable

from analytics.domain.analytics_error import AnalyticsError
from analytics.domain.platform import PLATFORM_MARKERS, Platform

DEFAULT_SUPPORTED_PLATFORMS = (Platform.YOUTUBE.value, Platform.INSTAGRAM.value)


class DetectPlatformUseCase:
    """
    Maps a URL to a platform by domain marker. Detection and support are
    separate: TikTok and Vimeo are recognised but not analysed.
    """

    def __init__(self, supported_platforms: Iterable[str] = DEFAULT_SUPPORTED_PLATFORMS):
        self.supported_platforms = tuple(p.lower() for p in supported_platforms)

    def detect(self, url: str) -> Platform | None:
        if not url or not isinstance(url, str):
            raise AnalyticsError.invalid_input("Valid URL is required")
        normalized = url.lower()
        for marker, platform in PLATFORM_MARKERS:
            if marker in normalized:
                return platform
        return None

    def is_supported(self, platform: str | Platform | None) -> bool:
        if platform is None:
            return False
        value = platform.value if isinstance(platform, Platform) else str(platform).lower()
        return value in self.supported_platforms

    def resolve_supported(self, url: str) -> Platform:
        platform = self.detect(url)
        if platform is None:
            raise AnalyticsError.unsupported_platform(url)
        if not self.is_supported(platform):
            raise AnalyticsError.unsupported_platform(url, platform.value)
        return platform

    def execute(self, url: str) -> dict:
        platform = self.detect(url)
        return {
            "url": url,
            "platform": platform.value if platform else None,
            "supported": self.is_supported(platform),
            "supportedPlatforms": list(self.supported_platforms),
        }
