"""Data models for personalize_feed."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

DEFAULT_SUMMARY_STYLE = "simple"


@dataclass
class ContentPreferences:
    summary_style: str = DEFAULT_SUMMARY_STYLE
    show_technical_details: bool = False


@dataclass
class UserProfile:
    """Ranking view of a user's profile."""
    user_id: str
    user_type: Optional[str] = None
    ai_interests: list[str] = field(default_factory=list)
    content_preferences: ContentPreferences = field(default_factory=ContentPreferences)


@dataclass
class FeedArticle:
    """Processed article as shown in a personalized feed, with one chosen summary."""
    id: int
    title: str
    source_name: Optional[str]
    publication_date: Optional[datetime]
    original_url: Optional[str]
    tags: list[str]
    initial_score: float
    personalized_score: float
    display_summary: str


def default_profile(user_id: str, summary_style: str = DEFAULT_SUMMARY_STYLE) -> UserProfile:
    """Profile used when the user has none or it cannot be loaded."""
    return UserProfile(user_id=user_id, content_preferences=ContentPreferences(summary_style=summary_style))
