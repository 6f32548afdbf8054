import math
from dataclasses import dataclass, field

POSITIVE = "POSITIVE"
NEUTRAL = "NEUTRAL"
NEGATIVE = "NEGATIVE"

LABEL_THRESHOLD = 0.1
OVERWHELMING_PERCENT = 70
MIXED_RANGE = (20, 45)


def _percent(count: int, total: int) -> int:
    # half-up, so 12.5 becomes 13
    return math.floor(count / total * 100 + 0.5)


def classify_score(score: float) -> str:
    if score > LABEL_THRESHOLD:
        return POSITIVE
    if score < -LABEL_THRESHOLD:
        return NEGATIVE
    return NEUTRAL


@dataclass(frozen=True)
class SentimentDistribution:
    positive: int = 0
    neutral: int = 100
    negative: int = 0

    def to_dict(self) -> dict:
        return {"positive": self.positive, "neutral": self.neutral, "negative": self.negative}


@dataclass(frozen=True)
class SentimentAnalysis:
    overall_score: float = 0.0
    overall_sentiment: str = NEUTRAL
    distribution: SentimentDistribution = field(default_factory=SentimentDistribution)
    total_analyzed: int = 0

    @classmethod
    def empty(cls) -> "SentimentAnalysis":
        return cls()

    @classmethod
    def from_counts(
        cls, positive: int, neutral: int, negative: int, weighted_score: float
    ) -> "SentimentAnalysis":
        total = positive + neutral + negative
        if total == 0:
            return cls.empty()
        # Each bucket is rounded on its own; the sum may land on 99 or 101.
        distribution = SentimentDistribution(
            positive=_percent(positive, total),
            neutral=_percent(neutral, total),
            negative=_percent(negative, total),
        )
        return cls(
            overall_score=round(weighted_score, 4),
            overall_sentiment=classify_score(weighted_score),
            distribution=distribution,
            total_analyzed=total,
        )

    @classmethod
    def from_dict(cls, payload: dict) -> "SentimentAnalysis":
        overall = payload.get("overall", {})
        dist = payload.get("distribution", {})
        return cls(
            overall_score=float(overall.get("score", 0.0)),
            overall_sentiment=overall.get("sentiment", NEUTRAL),
            distribution=SentimentDistribution(
                positive=int(dist.get("positive", 0)),
                neutral=int(dist.get("neutral", 100)),
                negative=int(dist.get("negative", 0)),
            ),
            total_analyzed=int(payload.get("totalAnalyzed", 0)),
        )

    def is_overwhelmingly_positive(self) -> bool:
        return self.distribution.positive >= OVERWHELMING_PERCENT

    def is_overwhelmingly_negative(self) -> bool:
        return self.distribution.negative >= OVERWHELMING_PERCENT

    def is_mixed(self) -> bool:
        low, high = MIXED_RANGE
        return (
            low <= self.distribution.positive <= high
            and low <= self.distribution.negative <= high
        )

    @property
    def dominant_sentiment(self) -> str:
        dist = self.distribution
        highest = max(dist.positive, dist.neutral, dist.negative)
        if highest == dist.positive:
            return POSITIVE
        if highest == dist.negative:
            return NEGATIVE
        return NEUTRAL

    @property
    def confidence(self) -> int:
        dist = self.distribution
        return max(dist.positive, dist.neutral, dist.negative)

    @property
    def formatted_score(self) -> str:
        return f"{self.overall_score:.2f}"

    def to_dict(self) -> dict:
        return {
            "overall": {"score": self.overall_score, "sentiment": self.overall_sentiment},
            "distribution": self.distribution.to_dict(),
            "totalAnalyzed": self.total_analyzed,
            "confidence": self.confidence,
            "dominantSentiment": self.dominant_sentiment,
        }
