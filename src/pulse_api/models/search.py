"""Search Pydantic models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SearchResultResponse(BaseModel):
    """Processed article matching a search query."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    source_name: str | None = None
    publication_date: datetime | None = None
    original_url: str | None = None
    summary_executive: str | None = None
    summary_technical: str | None = None
    summary_simple: str | None = None
    tags: list[str] = Field(default_factory=list)
    initial_score: float


class SearchResponse(BaseModel):
    query: str
    results: list[SearchResultResponse]
