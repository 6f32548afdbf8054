from fastapi import APIRouter, Depends, Header, Query, Request
from fastapi.responses import JSONResponse

from analytics.adapter.input.web.request.analytics_requests import (
    AnalyzeVideoRequest,
    CompareVideosRequest,
    DetectPlatformRequest,
)
from analytics.domain.analytics_error import AnalyticsError
from analytics.domain.platform import Platform
from app.container import AnalyticsContainer

analytics_router = APIRouter(tags=["analytics"])


def _container(request: Request) -> AnalyticsContainer:
    return request.app.state.container


def _ok(data) -> dict:
    return {"success": True, "data": data}


async def analytics_error_handler(request: Request, exc: AnalyticsError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def enforce_rate_limit(request: Request, x_user_id: str | None = Header(default=None)) -> None:
    # Signed-in callers are counted per user id, anonymous ones per client address.
    identifier = x_user_id or (request.client.host if request.client else "anonymous")
    result = await _container(request).cache.increment_rate_limit(identifier)
    if not result["allowed"]:
        raise AnalyticsError.rate_limited(identifier)


@analytics_router.post("/analyze", dependencies=[Depends(enforce_rate_limit)])
async def analyze_video(
    request: Request,
    body: AnalyzeVideoRequest,
    x_user_id: str | None = Header(default=None),
):
    """
    Analyze a single YouTube or Instagram video.
    - Metrics, sentiment, keywords and hashtags; cached per video.
    """
    result = await _container(request).analyze_video_usecase.execute(
        body.url,
        skip_cache=body.skip_cache,
        include_sentiment=body.include_sentiment,
        include_keywords=body.include_keywords,
        user_key=body.api_key,
        user_id=x_user_id,
    )
    return _ok(result)


@analytics_router.get("/analyze", dependencies=[Depends(enforce_rate_limit)])
async def analyze_video_by_query(
    request: Request,
    url: str = Query(min_length=1),
    skip_cache: bool = Query(default=False, alias="skipCache"),
    x_user_id: str | None = Header(default=None),
):
    result = await _container(request).analyze_video_usecase.execute(
        url, skip_cache=skip_cache, user_id=x_user_id
    )
    return _ok(result)


@analytics_router.post("/compare", dependencies=[Depends(enforce_rate_limit)])
async def compare_videos(
    request: Request,
    body: CompareVideosRequest,
    x_user_id: str | None = Header(default=None),
):
    """
    Compare videos side by side. A failing URL shows up as an error item.
    """
    result = await _container(request).compare_videos_usecase.execute(
        body.urls, user_id=x_user_id, skip_cache=body.skip_cache
    )
    return _ok(result)


@analytics_router.get("/history/{video_id}")
async def get_video_history(request: Request, video_id: str, days: int = Query(default=7, ge=1, le=30)):
    return _ok(await _container(request).video_history_usecase.execute(video_id, days))


@analytics_router.post("/detect-platform")
async def detect_platform(request: Request, body: DetectPlatformRequest):
    return _ok(_container(request).detect_platform_usecase.execute(body.url))


@analytics_router.get("/key-source/{platform}")
async def get_key_source(
    request: Request,
    platform: str,
    x_user_id: str | None = Header(default=None),
):
    try:
        parsed = Platform.parse(platform)
    except ValueError:
        raise AnalyticsError.invalid_input(f"Unknown platform: {platform}") from None
    return _ok(await _container(request).key_resolver.source(x_user_id, parsed))
