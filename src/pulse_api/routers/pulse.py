"""Trending topic and onboarding interest endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from common.config import PulseConfig
from pulse_api.dependencies import get_db_session, get_pulse_config
from pulse_api.models.pulse import OnboardingInterestsResponse, PulseResponse, TrendingTopicResponse
from pulse_store.repository import load_onboarding_interests, load_trending_topics

router = APIRouter(tags=["pulse"])


@router.get("/pulse", response_model=PulseResponse)
def get_pulse(
    session: Annotated[Session, Depends(get_db_session)],
    config: Annotated[PulseConfig, Depends(get_pulse_config)],
):
    """Top trending topics by buzz, most recently updated first on ties."""
    topics = load_trending_topics(session, config.api.trending_limit)
    return PulseResponse(topics=[TrendingTopicResponse.model_validate(topic) for topic in topics])


@router.get("/onboarding-interests", response_model=OnboardingInterestsResponse)
def get_onboarding_interests(
    session: Annotated[Session, Depends(get_db_session)],
    config: Annotated[PulseConfig, Depends(get_pulse_config)],
):
    return OnboardingInterestsResponse(
        interests=load_onboarding_interests(session, config.api.onboarding_limit)
    )
