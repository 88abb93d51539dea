"""Data models for extract_insights pipeline stage."""

from dataclasses import dataclass, field

EMPTY_CONTENT_SUMMARY = "Content was empty or too short for analysis."

MAX_KEYWORDS = 7
MAX_TAGS = 5


@dataclass
class ArticleInsights:
    """Structured insights the LLM produces for one article."""
    executive_summary: str
    technical_summary: str
    simple_summary: str
    extracted_keywords: list[str] = field(default_factory=list)
    ai_relevance_score: float = 0.0
    generated_tags: list[str] = field(default_factory=list)


def default_insights() -> ArticleInsights:
    """Insights used when there is nothing worth sending to the model."""
    return ArticleInsights(
        executive_summary=EMPTY_CONTENT_SUMMARY,
        technical_summary=EMPTY_CONTENT_SUMMARY,
        simple_summary=EMPTY_CONTENT_SUMMARY,
    )
