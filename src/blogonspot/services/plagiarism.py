"""Bag-of-words similarity scorer.

Estimates verbatim textual overlap between submitted content and published
posts using cosine similarity over term-frequency vectors. There is no IDF
weighting and no notion of word order or synonyms.
"""
from __future__ import annotations

import math
import re
from collections import Counter
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.orm import Session

from blogonspot.core.settings import settings
from blogonspot.models import Post
from blogonspot.services.errors import ValidationFailedError

MIN_CONTENT_LENGTH = 30

STOPWORDS = frozenset(
    """
    the is at of on and a to in it that for with as was were be by or an are
    from this which you your we our they their i me my
    """.split()
)

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


@dataclass(frozen=True)
class SimilarityMatch:
    """A published post that shares vocabulary with the submitted content."""

    id: int
    title: str
    author: int | None
    created_at: datetime
    similarity: float


@dataclass(frozen=True)
class SimilarityReport:
    """Ranked result of a similarity check."""

    score: int
    total_compared: int
    matches: list[SimilarityMatch] = field(default_factory=list)


def tokenize(text: str | None) -> list[str]:
    """Lowercase, strip punctuation, split, and drop stopwords."""
    cleaned = _NON_ALNUM.sub(" ", (text or "").lower())
    return [token for token in cleaned.split() if token and token not in STOPWORDS]


def term_frequency(tokens: Sequence[str]) -> dict[str, float]:
    """Return each token's count divided by the total token count."""
    total = len(tokens) or 1
    return {term: count / total for term, count in Counter(tokens).items()}


def cosine_similarity(a: Mapping[str, float], b: Mapping[str, float]) -> float:
    """Cosine similarity of two sparse term-frequency vectors.

    A zero norm on either side yields 0.0 rather than a division error.
    """
    smaller, larger = (a, b) if len(a) < len(b) else (b, a)
    dot = sum(value * larger.get(term, 0.0) for term, value in smaller.items())
    norm_a = math.sqrt(sum(value * value for value in a.values()))
    norm_b = math.sqrt(sum(value * value for value in b.values()))
    denominator = norm_a * norm_b or 1.0
    return dot / denominator


def validate_content(content: object) -> str:
    """Return `content` when it is a string of at least 30 non-blank characters."""
    if not isinstance(content, str) or len(content.strip()) < MIN_CONTENT_LENGTH:
        raise ValidationFailedError(
            f"Content must be a non-empty string of at least {MIN_CONTENT_LENGTH} characters."
        )
    return content


def check_similarity(db: Session, content: str) -> SimilarityReport:
    """Score `content` against the most recent published posts."""
    validate_content(content)

    candidates = (
        db.query(Post)
        .filter(Post.is_published.is_(True))
        .order_by(Post.created_at.desc(), Post.id.desc())
        .limit(settings.plagiarism_candidate_limit)
        .all()
    )

    query_tf = term_frequency(tokenize(content))
    matches: list[SimilarityMatch] = []
    for post in candidates:
        tokens = tokenize(post.content or post.title)
        if not tokens:
            continue
        similarity = cosine_similarity(query_tf, term_frequency(tokens))
        if similarity > 0:
            matches.append(
                SimilarityMatch(
                    id=post.id,
                    title=post.title,
                    author=post.author_id,
                    created_at=post.created_at,
                    similarity=similarity,
                )
            )

    matches.sort(key=lambda match: match.similarity, reverse=True)
    top = matches[: settings.plagiarism_top_matches]
    best = top[0].similarity if top else 0.0
    return SimilarityReport(
        # Half-up rounding, not banker's rounding.
        score=math.floor(best * 100 + 0.5),
        total_compared=len(candidates),
        matches=top,
    )
