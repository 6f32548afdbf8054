import logging
import re
from datetime import datetime, timezone

import httpx

from config.settings import InstagramSettings
from analytics.application.port.platform_video_source_port import PlatformVideoSourcePort
from analytics.domain.analytics_error import AnalyticsError
from analytics.domain.channel import Channel
from analytics.domain.raw_video_data import RawVideoData
from analytics.domain.video import Video
from analytics.domain.video_comment import VideoComment

logger = logging.getLogger(__name__)

_SHORTCODE_PATTERNS = (
    re.compile(r"instagram\.com/reels?/([A-Za-z0-9_-]+)"),
    re.compile(r"instagram\.com/p/([A-Za-z0-9_-]+)"),
    re.compile(r"instagram\.com/tv/([A-Za-z0-9_-]+)"),
)
TITLE_LENGTH = 100


class InstagramClient(PlatformVideoSourcePort):
    """Instagram posts and reels through the RapidAPI instagram-scraper endpoint."""

    platform = "instagram"
    credential_name = "RAPIDAPI_KEY"

    def __init__(self, settings: InstagramSettings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._transport = transport

    def is_enabled(self) -> bool:
        return bool(self.settings.api_key)

    def extract_id(self, url: str) -> str | None:
        for pattern in _SHORTCODE_PATTERNS:
            match = pattern.search(url or "")
            if match:
                return match.group(1)
        return None

    async def fetch(self, url: str, credential: str) -> RawVideoData:
        shortcode = self.extract_id(url)
        if not shortcode:
            raise AnalyticsError.invalid_input(f"Invalid Instagram URL: {url}", url=url)

        host = httpx.URL(self.settings.base_url).host
        headers = {"X-RapidAPI-Key": credential, "X-RapidAPI-Host": host}
        try:
            async with httpx.AsyncClient(
                base_url=self.settings.base_url,
                timeout=self.settings.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get("/v1/post_info", params={"shortcode": shortcode}, headers=headers)
        except httpx.HTTPError as exc:
            logger.error("Instagram request failed for %s: %s", shortcode, exc)
            raise AnalyticsError.upstream("Instagram", str(exc)) from exc

        if response.status_code != 200:
            raise self._translate_status(response, shortcode)

        try:
            payload = response.json()
        except ValueError as exc:
            raise AnalyticsError.upstream("Instagram", "response was not valid JSON") from exc
        return self.transform(payload, url, shortcode)

    def _translate_status(self, response: httpx.Response, shortcode: str) -> AnalyticsError:
        detail = response.text[:200]
        logger.error("Instagram API error (%s) for %s: %s", response.status_code, shortcode, detail)
        if response.status_code == 429:
            return AnalyticsError.quota_exceeded("Instagram", detail)
        if response.status_code in (401, 403):
            return AnalyticsError.invalid_api_key("Instagram", detail)
        if response.status_code == 404:
            return AnalyticsError.video_not_found(shortcode)
        return AnalyticsError.upstream("Instagram", f"status {response.status_code}")

    def transform(self, payload: dict, url: str, shortcode: str) -> RawVideoData:
        post = payload.get("data", payload)
        if not post:
            raise AnalyticsError.video_not_found(shortcode)

        caption = (post.get("caption") or {}).get("text") or ""
        user = post.get("user") or {}
        candidates = (post.get("image_versions2") or {}).get("candidates") or [{}]
        # Photo posts have no play count; 1 keeps the engagement rate finite.
        views = post.get("play_count") or post.get("view_count") or 1

        video = Video(
            platform=self.platform,
            platform_video_id=str(post.get("pk") or post.get("id") or shortcode),
            url=url,
            title=caption[:TITLE_LENGTH] or "Instagram Post",
            channel_id=str(user.get("pk") or ""),
            description=caption or None,
            thumbnail_url=candidates[0].get("url") or post.get("thumbnail_url"),
            published_at=self._from_epoch(post.get("taken_at")),
            duration=int(post.get("video_duration") or 0),
        )
        channel = Channel(
            platform=self.platform,
            platform_channel_id=str(user.get("pk") or ""),
            name=user.get("username") or "Unknown",
            thumbnail_url=user.get("profile_pic_url"),
            subscriber_count=int(user.get("follower_count") or 0),
        )
        comments = tuple(
            VideoComment(
                comment_id=str(c.get("pk") or ""),
                author=(c.get("user") or {}).get("username") or "Unknown",
                content=c.get("text") or "",
                like_count=int(c.get("like_count") or 0),
                published_at=self._from_epoch(c.get("created_at")),
            )
            for c in post.get("preview_comments") or []
        )
        return RawVideoData(
            video=video,
            channel=channel,
            view_count=int(views),
            like_count=int(post.get("like_count") or 0),
            comment_count=int(post.get("comment_count") or 0),
            share_count=int(post.get("reshare_count") or 0),
            comments=comments,
        )

    @staticmethod
    def _from_epoch(value) -> str | None:
        if not value:
            return None
        return datetime.fromtimestamp(int(value), tz=timezone.utc).isoformat()
