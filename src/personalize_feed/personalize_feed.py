"""Personalized ranking of processed articles for one user."""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from common.utils import clamp, get_value, to_score
from personalize_feed.models import (
    DEFAULT_SUMMARY_STYLE,
    ContentPreferences,
    FeedArticle,
    UserProfile,
    default_profile,
)
from pulse_store.models import Profile
from pulse_store.repository import load_profile, load_recent_processed_articles

logger = logging.getLogger(__name__)

SUMMARY_NOT_AVAILABLE = "Summary not available."

# Preferred summary column per style
STYLE_SUMMARY_FIELDS = {
    "executive": "summary_executive",
    "technical": "summary_technical",
    "simple": "summary_simple",
    "brief": "summary_executive",
    "detailed": "summary_technical",
}
FALLBACK_SUMMARY_FIELDS = ("summary_executive", "summary_simple", "summary_technical")

# user_type -> summary column that earns the affinity bonus
USER_TYPE_SUMMARY_FIELDS = {
    "technical": "summary_technical",
    "executive": "summary_executive",
}


def profile_from_row(row: Profile, default_style: str = DEFAULT_SUMMARY_STYLE) -> UserProfile:
    """Build a ranking profile from a stored row, tolerating malformed JSON columns."""
    interests = row.ai_interests if isinstance(row.ai_interests, list) else []
    prefs = row.content_preferences if isinstance(row.content_preferences, dict) else {}

    style = prefs.get("summary_style")
    return UserProfile(
        user_id=row.id,
        user_type=row.user_type,
        ai_interests=[i for i in interests if isinstance(i, str) and i.strip()],
        content_preferences=ContentPreferences(
            summary_style=style if isinstance(style, str) and style else default_style,
            show_technical_details=bool(prefs.get("show_technical_details", False)),
        ),
    )


def personalized_score(
    article: Any,
    profile: UserProfile,
    interest_boost: float = 0.1,
    user_type_bonus: float = 0.05,
    summary_min_chars: int = 50,
) -> float:
    """
    Score an article for a user.

    Starts from the article's initial score, adds interest_boost for every
    user interest that equals one of the article's tags (case-insensitive),
    adds user_type_bonus when the summary matching the user's type is longer
    than summary_min_chars, and clamps to [0, 1].
    """
    score = to_score(get_value(article, "initial_score"))

    tags = {tag.lower() for tag in (get_value(article, "tags") or []) if isinstance(tag, str)}
    if tags:
        matches = sum(1 for interest in profile.ai_interests if interest.lower() in tags)
        score += matches * interest_boost

    summary_field = USER_TYPE_SUMMARY_FIELDS.get(profile.user_type or "")
    if summary_field:
        summary = get_value(article, summary_field)
        if summary and len(summary) > summary_min_chars:
            score += user_type_bonus

    return clamp(score)


def select_display_summary(article: Any, style: Optional[str]) -> str:
    """Summary variant for the preferred style, falling back executive, simple, technical."""
    preferred = STYLE_SUMMARY_FIELDS.get(style or "", STYLE_SUMMARY_FIELDS[DEFAULT_SUMMARY_STYLE])
    for field_name in (preferred, *FALLBACK_SUMMARY_FIELDS):
        summary = get_value(article, field_name)
        if summary and summary.strip():
            return summary
    return SUMMARY_NOT_AVAILABLE


def rank_feed(
    articles: list[Any],
    profile: UserProfile,
    feed_limit: int = 20,
    interest_boost: float = 0.1,
    user_type_bonus: float = 0.05,
    summary_min_chars: int = 50,
) -> list[FeedArticle]:
    """Rank candidate articles by personalized score, highest first, keeping input order on ties."""
    style = profile.content_preferences.summary_style

    feed = []
    for article in articles:
        feed.append(
            FeedArticle(
                id=get_value(article, "id"),
                title=get_value(article, "title") or "Untitled",
                source_name=get_value(article, "source_name"),
                publication_date=get_value(article, "publication_date"),
                original_url=get_value(article, "original_url"),
                tags=list(get_value(article, "tags") or []),
                initial_score=to_score(get_value(article, "initial_score")),
                personalized_score=personalized_score(
                    article,
                    profile,
                    interest_boost=interest_boost,
                    user_type_bonus=user_type_bonus,
                    summary_min_chars=summary_min_chars,
                ),
                display_summary=select_display_summary(article, style),
            )
        )

    feed.sort(key=lambda item: item.personalized_score, reverse=True)
    return feed[:feed_limit]


def load_user_profile(
    session: Session,
    user_id: str,
    default_style: str = DEFAULT_SUMMARY_STYLE,
) -> UserProfile:
    """The user's own profile, or the default profile when missing or unreadable."""
    try:
        row = load_profile(session, user_id)
    except SQLAlchemyError as e:
        session.rollback()
        logger.warning("Error fetching profile for user %s, using default profile: %s", user_id, e)
        return default_profile(user_id, default_style)

    if row is None:
        logger.warning("No profile for user %s, using default profile", user_id)
        return default_profile(user_id, default_style)
    return profile_from_row(row, default_style)


def get_personalized_feed(
    session: Session,
    user_id: str,
    candidate_limit: int = 50,
    feed_limit: int = 20,
    default_summary_style: str = DEFAULT_SUMMARY_STYLE,
    **score_options: Any,
) -> list[FeedArticle]:
    """Rank the most recent processed articles for one user."""
    profile = load_user_profile(session, user_id, default_summary_style)
    logger.info(
        "Building feed for user %s (type=%s, interests=%s)",
        user_id,
        profile.user_type,
        profile.ai_interests,
    )

    candidates = load_recent_processed_articles(session, candidate_limit)
    if not candidates:
        logger.info("No processed articles found")
        return []

    return rank_feed(candidates, profile, feed_limit=feed_limit, **score_options)
