"""Trend Pydantic models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class TrendingTopicResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    topic_text: str
    buzz_score: float
    source_count: int
    last_updated_at: datetime


class PulseResponse(BaseModel):
    topics: list[TrendingTopicResponse]


class OnboardingInterestsResponse(BaseModel):
    interests: list[str]
