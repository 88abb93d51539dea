"""Data models for calculate_trends pipeline stage."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class TrendingTopicRecord:
    """Trending topic row produced by one aggregation run."""
    topic_text: str
    buzz_score: float
    source_count: int
    last_updated_at: datetime


@dataclass
class SuggestedInterest:
    """Onboarding interest suggestion with its 1-based rank."""
    interest_text: str
    rank: int


@dataclass
class TrendResult:
    """Output of one aggregation run. Empty lists mean the store was left untouched."""
    articles_considered: int = 0
    trending_topics: list[TrendingTopicRecord] = field(default_factory=list)
    onboarding_interests: list[SuggestedInterest] = field(default_factory=list)
