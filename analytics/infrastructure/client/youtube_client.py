import asyncio
import html
import logging
import re
from typing import Callable, List

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config.settings import YouTubeSettings
from analytics.application.port.platform_video_source_port import PlatformVideoSourcePort
from analytics.domain.analytics_error import AnalyticsError
from analytics.domain.channel import Channel
from analytics.domain.raw_video_data import RawVideoData
from analytics.domain.video import Video
from analytics.domain.video_comment import VideoComment

logger = logging.getLogger(__name__)

_VIDEO_ID_PATTERNS = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtube\.com/watch\?.+&v=)([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtu\.be/([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/embed/([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/shorts/([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtube\.com/live/([a-zA-Z0-9_-]{11})"),
)
_ISO_DURATION = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")
_HTML_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
# Socket-level failures surface from httplib2 underneath the discovery client.
_TRANSPORT_ERRORS = (OSError, httplib2.HttpLib2Error)


class YouTubeClient(PlatformVideoSourcePort):
    platform = "youtube"
    credential_name = "YOUTUBE_API_KEY"

    def __init__(self, settings: YouTubeSettings, service_factory: Callable[[str], object] | None = None):
        # A Data API client is built per credential, so user keys never leak across requests.
        self.settings = settings
        self._service_factory = service_factory or self._build_service

    def is_enabled(self) -> bool:
        return bool(self.settings.api_key)

    def extract_id(self, url: str) -> str | None:
        for pattern in _VIDEO_ID_PATTERNS:
            match = pattern.search(url or "")
            if match:
                return match.group(1)
        return None

    async def fetch(self, url: str, credential: str) -> RawVideoData:
        video_id = self.extract_id(url)
        if not video_id:
            raise AnalyticsError.invalid_input(f"Invalid YouTube URL: {url}", url=url)
        return await asyncio.to_thread(self._fetch_sync, url, video_id, credential)

    def _fetch_sync(self, url: str, video_id: str, credential: str) -> RawVideoData:
        service = self._service_factory(credential)
        try:
            response = (
                service.videos()
                .list(part="snippet,statistics,contentDetails", id=video_id)
                .execute()
            )
        except HttpError as exc:
            raise self._translate_error(exc, video_id) from exc
        except _TRANSPORT_ERRORS as exc:
            raise self._transport_error(exc, video_id) from exc

        items = response.get("items", [])
        if not items:
            raise AnalyticsError.video_not_found(video_id)
        item = items[0]
        snippet = item.get("snippet", {})
        stats = item.get("statistics", {})
        content = item.get("contentDetails", {})

        channel = self._fetch_channel(service, snippet)
        comments = self._fetch_comments(service, video_id)

        video = Video(
            platform=self.platform,
            platform_video_id=video_id,
            url=url,
            title=snippet.get("title", ""),
            channel_id=snippet.get("channelId", ""),
            description=snippet.get("description") or None,
            thumbnail_url=self._best_thumbnail(snippet.get("thumbnails", {})),
            published_at=snippet.get("publishedAt"),
            duration=self.parse_duration(content.get("duration")),
            tags=tuple(snippet.get("tags", [])),
            category_id=snippet.get("categoryId"),
        )
        return RawVideoData(
            video=video,
            channel=channel,
            view_count=int(stats.get("viewCount", 0)),
            like_count=int(stats.get("likeCount", 0)) if stats.get("likeCount") else 0,
            comment_count=int(stats.get("commentCount", 0)) if stats.get("commentCount") else 0,
            comments=tuple(comments),
        )

    def _fetch_channel(self, service, snippet: dict) -> Channel:
        channel_id = snippet.get("channelId", "")
        channel_item: dict = {}
        if channel_id:
            try:
                response = service.channels().list(part="snippet,statistics", id=channel_id).execute()
            except HttpError as exc:
                raise self._translate_error(exc, channel_id) from exc
            except _TRANSPORT_ERRORS as exc:
                raise self._transport_error(exc, channel_id) from exc
            channel_item = (response.get("items") or [{}])[0]
        channel_snippet = channel_item.get("snippet", {})
        channel_stats = channel_item.get("statistics", {})
        return Channel(
            platform=self.platform,
            platform_channel_id=channel_id,
            name=snippet.get("channelTitle") or channel_snippet.get("title", ""),
            thumbnail_url=(channel_snippet.get("thumbnails", {}).get("default") or {}).get("url"),
            subscriber_count=int(channel_stats.get("subscriberCount", 0)),
            video_count=int(channel_stats["videoCount"]) if channel_stats.get("videoCount") else None,
            view_count=int(channel_stats["viewCount"]) if channel_stats.get("viewCount") else None,
        )

    def _fetch_comments(self, service, video_id: str) -> List[VideoComment]:
        try:
            response = (
                service.commentThreads()
                .list(
                    part="snippet",
                    videoId=video_id,
                    maxResults=min(self.settings.max_comments, 100),
                    order="relevance",
                    textFormat="plainText",
                )
                .execute()
            )
        except HttpError as exc:
            # Comments disabled on the video is a 403 here; the rest of the fetch still stands.
            logger.warning("Comments unavailable for %s: %s", video_id, exc)
            return []
        except _TRANSPORT_ERRORS as exc:
            raise self._transport_error(exc, video_id) from exc

        comments: List[VideoComment] = []
        for item in response.get("items", []):
            snippet = item["snippet"]["topLevelComment"]["snippet"]
            comments.append(
                VideoComment(
                    comment_id=item.get("id", ""),
                    author=snippet.get("authorDisplayName") or "Unknown",
                    content=self.clean_text(snippet.get("textDisplay", "")),
                    like_count=int(snippet.get("likeCount", 0)),
                    published_at=snippet.get("publishedAt"),
                )
            )
        return comments

    def _translate_error(self, exc: HttpError, resource_id: str) -> AnalyticsError:
        status = getattr(exc.resp, "status", 0)
        status = int(status) if str(status).isdigit() else 0
        detail = str(exc)
        lowered = detail.lower()
        logger.error("YouTube API error (%s) for %s: %s", status, resource_id, detail)
        if "quota" in lowered or "dailylimitexceeded" in lowered or "ratelimitexceeded" in lowered:
            return AnalyticsError.quota_exceeded("YouTube", detail)
        if status in (401, 403) or (status == 400 and ("api key" in lowered or "keyinvalid" in lowered)):
            return AnalyticsError.invalid_api_key("YouTube", detail)
        if status == 404:
            return AnalyticsError.video_not_found(resource_id)
        return AnalyticsError.upstream("YouTube", detail)

    @staticmethod
    def _transport_error(exc: Exception, resource_id: str) -> AnalyticsError:
        logger.error("YouTube request failed for %s: %s", resource_id, exc)
        return AnalyticsError.upstream("YouTube", str(exc) or exc.__class__.__name__)

    @staticmethod
    def _build_service(credential: str):
        return build("youtube", "v3", developerKey=credential, cache_discovery=False)

    @staticmethod
    def _best_thumbnail(thumbnails: dict) -> str | None:
        for size in ("maxres", "high", "default"):
            url = (thumbnails.get(size) or {}).get("url")
            if url:
                return url
        return None

    @staticmethod
    def parse_duration(value: str | None) -> int:
        """ISO-8601 PT#H#M#S -> seconds."""
        if not value:
            return 0
        match = _ISO_DURATION.match(value)
        if not match:
            return 0
        hours, minutes, seconds = (int(part or 0) for part in match.groups())
        return hours * 3600 + minutes * 60 + seconds

    @staticmethod
    def clean_text(text: str) -> str:
        if not text:
            return ""
        decoded = _HTML_TAG.sub("", html.unescape(text))
        return _WHITESPACE.sub(" ", decoded).strip()
