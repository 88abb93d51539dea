"""Feed Pydantic models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FeedArticleResponse(BaseModel):
    """Article as shown in a personalized feed."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    source_name: str | None = None
    publication_date: datetime | None = None
    original_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    initial_score: float
    personalized_score: float
    display_summary: str


class FeedResponse(BaseModel):
    user_id: str
    articles: list[FeedArticleResponse]
