"""Article scoring. Pure functions, no I/O."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Iterable

from common.datetime import ensure_utc
from common.utils import clamp, get_value, round_half_up, to_score
from score_articles.models import ScoreComponents

logger = logging.getLogger(__name__)

DEFAULT_CREDIBILITY = 0.5

# (max age in days, score); first matching bucket wins
FRESHNESS_BUCKETS = (
    (1.0, 1.0),
    (2.0, 0.9),
    (7.0, 0.7),
    (14.0, 0.5),
    (30.0, 0.3),
)
STALE_FRESHNESS = 0.1

TREND_NORMALIZER = 3.0

WEIGHTS = {
    "credibility": 0.4,
    "relevance": 0.3,
    "freshness": 0.2,
    "trend": 0.1,
}


def source_credibility_score(value: Any) -> float:
    """Source credibility, or the neutral default when the source has none."""
    if value is None:
        return DEFAULT_CREDIBILITY
    return clamp(to_score(value))


def freshness_score(publication_date: datetime | None, now: datetime) -> float:
    """Step function of article age in days; missing dates count as stale."""
    if not isinstance(publication_date, datetime):
        return STALE_FRESHNESS

    age_days = (ensure_utc(now) - ensure_utc(publication_date)).total_seconds() / 86400
    if age_days < FRESHNESS_BUCKETS[0][0]:
        return FRESHNESS_BUCKETS[0][1]
    for max_age, score in FRESHNESS_BUCKETS[1:]:
        if age_days <= max_age:
            return score
    return STALE_FRESHNESS


def trend_contribution_score(
    pulse_keywords: Iterable[str],
    trending_topics: Iterable[Any],
    lemmatizer: Callable[[str], str],
) -> float:
    """
    Overlap between an article's pulse keywords and current trending topics.

    Each keyword adds the buzz of the first trending topic whose lemmatized
    text equals it. The sum is divided by 3, capped at 1 and rounded to one
    decimal.

    Args:
        pulse_keywords: Already lemmatized, lower-cased keywords
        trending_topics: Objects or dicts with topic_text and buzz_score
        lemmatizer: Function applied to each lower-cased topic text
    """
    lemmatized_topics = []
    for topic in trending_topics:
        text = get_value(topic, "topic_text")
        if not text:
            continue
        lemmatized_topics.append((lemmatizer(text.lower()), to_score(get_value(topic, "buzz_score"))))

    if not lemmatized_topics:
        return 0.0

    total = 0.0
    for keyword in pulse_keywords:
        for topic_text, buzz in lemmatized_topics:
            if topic_text == keyword:
                total += buzz
                break

    return round_half_up(clamp(total / TREND_NORMALIZER), 1)


def initial_score(
    credibility: Any,
    relevance: Any,
    freshness: Any,
    trend: Any,
) -> float:
    """Weighted composite of the four components, clamped and rounded to 2 decimals."""
    raw = (
        WEIGHTS["credibility"] * to_score(credibility)
        + WEIGHTS["relevance"] * to_score(relevance)
        + WEIGHTS["freshness"] * to_score(freshness)
        + WEIGHTS["trend"] * to_score(trend)
    )
    return round_half_up(clamp(raw), 2)


def compute_scores(
    credibility: Any,
    relevance: Any,
    publication_date: datetime | None,
    pulse_keywords: Iterable[str],
    trending_topics: Iterable[Any],
    lemmatizer: Callable[[str], str],
    now: datetime,
) -> ScoreComponents:
    """Compute every score component of one article and the composite."""
    scs = source_credibility_score(credibility)
    krs = clamp(to_score(relevance))
    fs = freshness_score(publication_date, now)
    tcs = trend_contribution_score(pulse_keywords, trending_topics, lemmatizer)

    return ScoreComponents(
        source_credibility_score=scs,
        keyword_relevance_score=krs,
        freshness_score=fs,
        trend_contribution_score=tcs,
        initial_score=initial_score(scs, krs, fs, tcs),
    )
