"""Aggregate recent article tags into trending topics and onboarding interests."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import asdict
from datetime import datetime, timedelta
from typing import Iterable, Mapping, Optional

from sqlalchemy.orm import Session

from calculate_trends.models import SuggestedInterest, TrendingTopicRecord, TrendResult
from common.datetime import ensure_utc, utc_now
from common.utils import clamp, round_half_up
from pulse_store.repository import (
    load_generic_terms,
    load_recent_article_tags,
    load_synonym_map,
    replace_onboarding_interests,
    upsert_trending_topics,
)

logger = logging.getLogger(__name__)

MIN_BUZZ = 0.1
BASE_BUZZ = 0.2
BUZZ_RANGE = 0.8


def count_tags(tag_lists: Iterable[Optional[Iterable[object]]]) -> Counter:
    """Count trimmed, lower-cased tags across articles, skipping empty and non-string tags."""
    counts: Counter = Counter()
    for tags in tag_lists:
        if not tags:
            continue
        for tag in tags:
            if not isinstance(tag, str):
                continue
            normalized = tag.strip().lower()
            if normalized:
                counts[normalized] += 1
    return counts


def consolidate_synonyms(counts: Mapping[str, int], synonyms: Mapping[str, str]) -> Counter:
    """Fold each tag's count into its canonical term."""
    consolidated: Counter = Counter()
    for tag, count in counts.items():
        consolidated[synonyms.get(tag, tag)] += count
    return consolidated


def drop_generic_terms(counts: Mapping[str, int], generic_terms: set[str]) -> Counter:
    """Remove tags that are too generic to be a trend."""
    specific: Counter = Counter()
    for tag, count in counts.items():
        if tag in generic_terms:
            logger.debug("Filtered out generic tag %r with count %d", tag, count)
            continue
        specific[tag] = count
    return specific


def rank_tags(counts: Mapping[str, int]) -> list[tuple[str, int]]:
    """Tags by count descending; ties broken by tag text."""
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


def build_onboarding_interests(ranked: list[tuple[str, int]], top_m: int) -> list[SuggestedInterest]:
    return [
        SuggestedInterest(interest_text=tag, rank=index)
        for index, (tag, _count) in enumerate(ranked[:top_m], start=1)
    ]


def build_trending_topics(
    ranked: list[tuple[str, int]],
    top_n: int,
    now: datetime,
) -> list[TrendingTopicRecord]:
    """Top N tags with buzz = 0.2 + 0.8 * count / max_count, clamped to [0.1, 1.0]."""
    if not ranked:
        return []

    max_count = ranked[0][1] or 1
    topics = []
    for tag, count in ranked[:top_n]:
        buzz = clamp(BASE_BUZZ + BUZZ_RANGE * count / max_count, MIN_BUZZ, 1.0)
        topics.append(
            TrendingTopicRecord(
                topic_text=tag,
                buzz_score=round_half_up(buzz, 2),
                source_count=count,
                last_updated_at=now,
            )
        )
    return topics


def calculate_trends(
    session: Session,
    lookback_hours: int = 48,
    top_trending: int = 10,
    top_onboarding: int = 15,
    now: Optional[datetime] = None,
    prune_stale_topics: bool = True,
) -> TrendResult:
    """
    Recompute trending topics and onboarding interests from recent articles.

    Synonyms and generic terms are reloaded from the store on every run.
    Both output tables are written in one transaction; when there are no
    recent articles, or no tags survive filtering, neither table is touched.

    Args:
        session: Store session
        lookback_hours: Window over processed_articles.created_at
        top_trending: Number of trending topics to keep
        top_onboarding: Number of onboarding interests to keep
        now: Reference time (default: current UTC time)
        prune_stale_topics: Delete trending topics missing from this run

    Returns:
        TrendResult with the rows written
    """
    now = ensure_utc(now) if now else utc_now()
    since = now - timedelta(hours=lookback_hours)

    synonyms = load_synonym_map(session)
    generic_terms = load_generic_terms(session)
    logger.info("Loaded %d synonyms and %d generic terms", len(synonyms), len(generic_terms))

    tag_lists = load_recent_article_tags(session, since)
    result = TrendResult(articles_considered=len(tag_lists))
    if not tag_lists:
        logger.info("No recent articles found since %s, leaving trends unchanged", since.isoformat())
        return result

    counts = drop_generic_terms(consolidate_synonyms(count_tags(tag_lists), synonyms), generic_terms)
    if not counts:
        logger.info("No specific tags remaining after filtering generic terms, leaving trends unchanged")
        return result

    ranked = rank_tags(counts)
    result.onboarding_interests = build_onboarding_interests(ranked, top_onboarding)
    result.trending_topics = build_trending_topics(ranked, top_trending, now)

    replace_onboarding_interests(
        session,
        [{**asdict(interest), "last_updated": now} for interest in result.onboarding_interests],
    )
    upsert_trending_topics(
        session,
        [asdict(topic) for topic in result.trending_topics],
        prune_stale=prune_stale_topics,
    )
    session.commit()

    logger.info(
        "Updated %d trending topics and %d onboarding interests from %d articles: %s",
        len(result.trending_topics),
        len(result.onboarding_interests),
        len(tag_lists),
        [topic.topic_text for topic in result.trending_topics],
    )
    return result
