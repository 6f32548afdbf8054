from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    UNSUPPORTED_PLATFORM = "UNSUPPORTED_PLATFORM"
    SERVICE_NOT_CONFIGURED = "SERVICE_NOT_CONFIGURED"
    VIDEO_NOT_FOUND = "VIDEO_NOT_FOUND"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    INVALID_API_KEY = "INVALID_API_KEY"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    RATE_LIMITED = "RATE_LIMITED"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]

    @property
    def is_upstream(self) -> bool:
        return self in _UPSTREAM_KINDS


_STATUS_CODES = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.UNSUPPORTED_PLATFORM: 400,
    ErrorKind.SERVICE_NOT_CONFIGURED: 503,
    ErrorKind.VIDEO_NOT_FOUND: 404,
    ErrorKind.QUOTA_EXCEEDED: 429,
    ErrorKind.INVALID_API_KEY: 401,
    ErrorKind.UPSTREAM_ERROR: 502,
    ErrorKind.RATE_LIMITED: 429,
}

_UPSTREAM_KINDS = frozenset(
    {
        ErrorKind.VIDEO_NOT_FOUND,
        ErrorKind.QUOTA_EXCEEDED,
        ErrorKind.INVALID_API_KEY,
        ErrorKind.UPSTREAM_ERROR,
    }
)


@dataclass(eq=False)
class AnalyticsError(Exception):
    """
    The single error type raised by the analytics pipeline.
    Callers branch on `kind` instead of catching subclasses.
    """

    kind: ErrorKind
    message: str
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def is_upstream(self) -> bool:
        return self.kind.is_upstream

    def to_dict(self) -> dict:
        return {
            "success": False,
            "error": self.message,
            "code": self.code,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def invalid_input(cls, message: str, **details) -> "AnalyticsError":
        return cls(ErrorKind.INVALID_INPUT, message, details)

    @classmethod
    def unsupported_platform(cls, url: str, platform: str | None = None) -> "AnalyticsError":
        if platform:
            message = f"Platform '{platform}' is detected but not supported"
        else:
            message = f"Unsupported platform for URL: {url}"
        return cls(ErrorKind.UNSUPPORTED_PLATFORM, message, {"url": url, "platform": platform})

    @classmethod
    def service_not_configured(cls, platform: str, missing: str) -> "AnalyticsError":
        return cls(
            ErrorKind.SERVICE_NOT_CONFIGURED,
            f"{platform} service is not configured. Missing: {missing}",
            {"platform": platform, "missing": missing},
        )

    @classmethod
    def video_not_found(cls, video_id: str) -> "AnalyticsError":
        return cls(ErrorKind.VIDEO_NOT_FOUND, f"Video with ID '{video_id}' was not found", {"video_id": video_id})

    @classmethod
    def quota_exceeded(cls, platform: str, detail: str = "") -> "AnalyticsError":
        return cls(ErrorKind.QUOTA_EXCEEDED, f"{platform} API quota exceeded", {"platform": platform, "detail": detail})

    @classmethod
    def invalid_api_key(cls, platform: str, detail: str = "") -> "AnalyticsError":
        return cls(ErrorKind.INVALID_API_KEY, f"{platform} API key was rejected", {"platform": platform, "detail": detail})

    @classmethod
    def rate_limited(cls, identifier: str) -> "AnalyticsError":
        return cls(ErrorKind.RATE_LIMITED, "Too many requests, try again later", {"identifier": identifier})

    @classmethod
    def upstream(cls, platform: str, detail: str) -> "AnalyticsError":
        return cls(ErrorKind.UPSTREAM_ERROR, f"Failed to fetch {platform} video: {detail}", {"platform": platform})
