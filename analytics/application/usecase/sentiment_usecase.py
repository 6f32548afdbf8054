import math
import re
from collections import Counter
from typing import Iterable, Mapping

from vaderSentiment.vaderSentiment import NEGATE, SentimentIntensityAnalyzer

from analytics.domain.sentiment_analysis import (
    NEGATIVE,
    POSITIVE,
    SentimentAnalysis,
    classify_score,
)
from analytics.domain.video_comment import AnalyzedComment, VideoComment

_HTML_TAG = re.compile(r"<[^>]*>")
_WORD = re.compile(r"[a-z0-9']+")
_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_HASHTAG = re.compile(r"#\w+")

STOPWORDS = frozenset(
    """
    the be to of and a in that have i it for not on with he as you do at this but his by
    from they we say her she or an will my one all would there their what so up out if
    about who get which go me video like just can its your was are been has had did does
    is am http https www com youtube watch really very much how why when where than then
    now here
    """.split()
)


def _load_lexicon() -> dict[str, float]:
    return dict(SentimentIntensityAnalyzer().lexicon)


class SentimentUseCase:
    """
    Lexicon-based comment sentiment.

    Each comment gets a comparative score: the summed valence of its known
    words divided by its token count, clamped to [-1, 1]. A word directly
    after a negator ("not", "don't", ...) has its valence flipped. The
    aggregate weights every comment by 1 + ln(1 + likes).
    """

    def __init__(self, lexicon: Mapping[str, float] | None = None, negations: Iterable[str] = NEGATE):
        self.lexicon = dict(lexicon) if lexicon is not None else _load_lexicon()
        self.negations = frozenset(n.lower() for n in negations)

    def analyze_text(self, text: str) -> dict:
        if not text or not isinstance(text, str):
            return {"score": 0.0, "comparative": 0.0, "sentiment": classify_score(0.0), "positive": [], "negative": []}

        tokens = _WORD.findall(_HTML_TAG.sub(" ", text).lower())
        total = 0.0
        positive: list[str] = []
        negative: list[str] = []
        for index, token in enumerate(tokens):
            valence = self.lexicon.get(token)
            if valence is None:
                continue
            if index > 0 and tokens[index - 1] in self.negations:
                valence = -valence
            total += valence
            (positive if valence > 0 else negative).append(token)

        comparative = total / len(tokens) if tokens else 0.0
        comparative = max(-1.0, min(1.0, comparative))
        return {
            "score": total,
            "comparative": comparative,
            "sentiment": classify_score(comparative),
            "positive": positive,
            "negative": negative,
        }

    def analyze_comment(self, comment: VideoComment) -> AnalyzedComment:
        result = self.analyze_text(comment.content)
        return AnalyzedComment(
            comment=comment,
            sentiment_score=result["comparative"],
            sentiment=result["sentiment"],
            positive_words=tuple(result["positive"]),
            negative_words=tuple(result["negative"]),
        )

    def analyze_comments(self, comments: Iterable[VideoComment]) -> list[AnalyzedComment]:
        return [self.analyze_comment(c) for c in comments]

    def summarize(self, analyzed: list[AnalyzedComment]) -> SentimentAnalysis:
        if not analyzed:
            return SentimentAnalysis.empty()

        positive = sum(1 for c in analyzed if c.sentiment == POSITIVE)
        negative = sum(1 for c in analyzed if c.sentiment == NEGATIVE)
        neutral = len(analyzed) - positive - negative

        weighted_sum = 0.0
        weight_total = 0.0
        for comment in analyzed:
            weight = 1 + math.log(1 + max(comment.like_count, 0))
            weighted_sum += comment.sentiment_score * weight
            weight_total += weight
        weighted_score = weighted_sum / weight_total if weight_total > 0 else 0.0

        return SentimentAnalysis.from_counts(positive, neutral, negative, weighted_score)

    def analyze(self, comments: Iterable[VideoComment]) -> SentimentAnalysis:
        return self.summarize(self.analyze_comments(comments))

    def extract_keywords(self, texts: list[str], max_keywords: int = 15) -> list[dict]:
        """TF-IDF terms summed over all documents, highest first."""
        if not texts:
            return []

        documents = [
            _NON_ALNUM.sub(" ", _HTML_TAG.sub(" ", text or "").lower()).split()
            for text in texts
        ]
        document_frequency: Counter = Counter()
        for terms in documents:
            document_frequency.update(set(terms))

        total_documents = len(documents)
        scores: dict[str, float] = {}
        for terms in documents:
            for term, frequency in Counter(terms).items():
                if len(term) < 3 or term in STOPWORDS:
                    continue
                idf = 1 + math.log(total_documents / (1 + document_frequency[term]))
                scores[term] = scores.get(term, 0.0) + frequency * idf

        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)[:max_keywords]
        return [{"keyword": term, "score": round(score, 2)} for term, score in ranked]

    def extract_hashtags(self, texts: list[str], max_hashtags: int = 10) -> list[dict]:
        counts: Counter = Counter()
        for text in texts:
            counts.update(tag.lower() for tag in _HASHTAG.findall(text or ""))
        return [{"hashtag": tag, "count": count} for tag, count in counts.most_common(max_hashtags)]
