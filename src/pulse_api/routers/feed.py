"""Personalized feed endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from common.config import PulseConfig
from personalize_feed.personalize_feed import get_personalized_feed
from pulse_api.dependencies import get_db_session, get_pulse_config, get_user_id
from pulse_api.models.feed import FeedArticleResponse, FeedResponse

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("", response_model=FeedResponse)
def get_feed(
    user_id: Annotated[str, Depends(get_user_id)],
    session: Annotated[Session, Depends(get_db_session)],
    config: Annotated[PulseConfig, Depends(get_pulse_config)],
    limit: Annotated[int | None, Query(ge=1, le=100, description="Max articles")] = None,
):
    """Feed of the calling user, ranked by personalized score.

    Users without a profile get the default (unpersonalized) ranking.
    """
    feed_config = config.feed
    feed = get_personalized_feed(
        session,
        user_id,
        candidate_limit=feed_config.candidate_limit,
        feed_limit=limit or feed_config.feed_limit,
        default_summary_style=feed_config.default_summary_style,
        interest_boost=feed_config.interest_boost,
        user_type_bonus=feed_config.user_type_bonus,
        summary_min_chars=feed_config.summary_min_chars,
    )
    return FeedResponse(
        user_id=user_id,
        articles=[FeedArticleResponse.model_validate(article) for article in feed],
    )
