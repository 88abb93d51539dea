"""Article search endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from common.config import PulseConfig
from pulse_api.dependencies import get_db_session, get_pulse_config
from pulse_api.models.search import SearchResponse, SearchResultResponse
from pulse_store.repository import search_processed_articles

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchResponse)
def search_articles(
    session: Annotated[Session, Depends(get_db_session)],
    config: Annotated[PulseConfig, Depends(get_pulse_config)],
    q: Annotated[str, Query(description="Terms that must all appear in the title or a summary")] = "",
):
    """Processed articles matching every query term, best initial score first."""
    query = q.strip()
    if not query:
        raise HTTPException(status_code=400, detail="Search query is required")

    articles = search_processed_articles(session, query, config.api.search_limit)
    return SearchResponse(
        query=query,
        results=[SearchResultResponse.model_validate(article) for article in articles],
    )
