from pydantic import BaseModel, ConfigDict, Field


class AnalyzeVideoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(min_length=1, description="Video URL (YouTube or Instagram)")
    skip_cache: bool = Field(default=False, alias="skipCache")
    include_sentiment: bool = Field(default=True, alias="includeSentiment")
    include_keywords: bool = Field(default=True, alias="includeKeywords")
    api_key: str | None = Field(default=None, alias="apiKey", description="Credential override for this request only")


class CompareVideosRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    urls: list[str] = Field(description="Between 2 and COMPARE_MAX_URLS video URLs")
    skip_cache: bool = Field(default=False, alias="skipCache")


class DetectPlatformRequest(BaseModel):
    url: str = Field(min_length=1)
