"""Data models for score_articles."""

from dataclasses import dataclass


@dataclass
class ScoreComponents:
    """Normalized score components of one article plus the weighted composite."""
    source_credibility_score: float
    keyword_relevance_score: float
    freshness_score: float
    trend_contribution_score: float
    initial_score: float
