from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class VideoComment:
    comment_id: str
    author: str
    content: str
    like_count: int = 0
    published_at: Optional[str] = None


@dataclass(frozen=True)
class AnalyzedComment:
    """A comment plus its lexical sentiment. The source comment is left untouched."""

    comment: VideoComment
    sentiment_score: float
    sentiment: str
    positive_words: tuple[str, ...] = field(default_factory=tuple)
    negative_words: tuple[str, ...] = field(default_factory=tuple)

    @property
    def like_count(self) -> int:
        return self.comment.like_count

    def to_dict(self) -> dict:
        return {
            "id": self.comment.comment_id,
            "authorName": self.comment.author,
            "content": self.comment.content,
            "likeCount": self.comment.like_count,
            "publishedAt": self.comment.published_at,
            "sentimentScore": self.sentiment_score,
            "sentiment": self.sentiment,
            "positiveWords": list(self.positive_words),
            "negativeWords": list(self.negative_words),
        }
