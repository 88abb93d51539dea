"""Drive pending raw articles through insight extraction and scoring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from common.datetime import ensure_utc, utc_now
from common.errors import PulseError
from extract_insights.extract_insights import InsightExtractor
from extract_insights.lemmatize import lemmatize
from process_articles.models import ProcessingResult
from pulse_store.models import RawArticle
from pulse_store.repository import (
    claim_article,
    fail_stale_claims,
    insert_processed_article,
    load_pending_articles,
    load_trending_topics,
    mark_article_failed,
    mark_article_processed,
)
from score_articles.scoring import compute_scores

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = "Unknown Source"
STALE_CLAIM_ERROR = "Processing did not finish within {seconds} seconds of the claim"


@dataclass
class _PendingArticle:
    """Plain copy of the raw article fields needed after the claim commit."""
    id: int
    source_url: str
    title: Optional[str]
    raw_text: Optional[str]
    publication_date: Optional[datetime]
    source_name: str
    source_credibility: Any

    @classmethod
    def from_row(cls, row: RawArticle) -> _PendingArticle:
        source = row.source
        return cls(
            id=row.id,
            source_url=row.source_url,
            title=row.title,
            raw_text=row.raw_text,
            publication_date=ensure_utc(row.publication_date) if row.publication_date else None,
            source_name=source.name if source is not None else UNKNOWN_SOURCE,
            source_credibility=source.credibility_score if source is not None else None,
        )


def build_pulse_keywords(
    keywords: list[str],
    lemmatizer: Callable[[str], str],
    limit: int = 10,
) -> list[str]:
    """Lemmatize lower-cased keywords, keeping the first `limit` non-empty ones."""
    pulse_keywords = []
    for keyword in keywords:
        lemma = lemmatizer(keyword.lower()).strip()
        if lemma:
            pulse_keywords.append(lemma)
    return pulse_keywords[:limit]


def _load_trending(session: Session, limit: int) -> list[dict[str, Any]]:
    """Top trending topics as plain dicts; empty when the read fails."""
    try:
        topics = load_trending_topics(session, limit)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error fetching trending topics, continuing without trend contribution: %s", e)
        return []
    return [{"topic_text": t.topic_text, "buzz_score": t.buzz_score} for t in topics]


def _error_message(exc: BaseException) -> str:
    return str(exc).strip() or type(exc).__name__


def _fail_stale_claims(session: Session, now: datetime, stale_claim_seconds: int) -> list[int]:
    """Resolve articles left in processing by a crashed or interrupted run."""
    try:
        return fail_stale_claims(
            session,
            claimed_before=now - timedelta(seconds=stale_claim_seconds),
            error=STALE_CLAIM_ERROR.format(seconds=stale_claim_seconds),
        )
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Error failing stale claims, continuing: %s", e)
        return []


def _claim(session: Session, article_id: int, now: datetime) -> bool:
    try:
        return claim_article(session, article_id, claimed_at=now)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Article ID %d: error claiming article, skipping: %s", article_id, e)
        return False


def _mark_failed(session: Session, article_id: int, message: str) -> None:
    try:
        mark_article_failed(session, article_id, message)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(
            "Article ID %d: could not record failure, left in processing until the stale-claim sweep: %s",
            article_id,
            e,
        )


def process_article(
    session: Session,
    article: _PendingArticle,
    extractor: InsightExtractor,
    lemmatizer: Callable[[str], str],
    trending_topics: list[dict[str, Any]],
    now: datetime,
    max_pulse_keywords: int = 10,
) -> None:
    """Extract, score and store one claimed article. Does not commit."""
    text = article.raw_text or article.title or ""

    insights = extractor.extract(text)
    logger.info(
        "Article ID %d: insights -> relevance=%s tags=%s keywords=%s",
        article.id,
        insights.ai_relevance_score,
        insights.generated_tags,
        insights.extracted_keywords,
    )

    pulse_keywords = build_pulse_keywords(insights.extracted_keywords, lemmatizer, max_pulse_keywords)

    scores = compute_scores(
        credibility=article.source_credibility,
        relevance=insights.ai_relevance_score,
        publication_date=article.publication_date,
        pulse_keywords=pulse_keywords,
        trending_topics=trending_topics,
        lemmatizer=lemmatizer,
        now=now,
    )
    logger.info(
        "Article ID %d: scores -> initial=%.2f credibility=%.2f relevance=%.2f freshness=%.2f trend=%.1f",
        article.id,
        scores.initial_score,
        scores.source_credibility_score,
        scores.keyword_relevance_score,
        scores.freshness_score,
        scores.trend_contribution_score,
    )

    insert_processed_article(
        session,
        {
            "raw_article_id": article.id,
            "original_url": article.source_url,
            "title": article.title or "Untitled",
            "source_name": article.source_name,
            "publication_date": article.publication_date,
            "summary_executive": insights.executive_summary,
            "summary_technical": insights.technical_summary,
            "summary_simple": insights.simple_summary,
            "tags": insights.generated_tags,
            "pulse_keywords": pulse_keywords,
            "source_credibility_score": scores.source_credibility_score,
            "freshness_score": scores.freshness_score,
            "keyword_relevance_score": scores.keyword_relevance_score,
            "trend_contribution_score": scores.trend_contribution_score,
            "initial_score": scores.initial_score,
            "created_at": now,
        },
    )

    if not mark_article_processed(session, article.id):
        raise PulseError(f"Article {article.id} is no longer in processing status")


def process_pending_articles(
    session: Session,
    extractor: InsightExtractor,
    lemmatizer: Callable[[str], str] = lemmatize,
    batch_size: int = 3,
    trending_limit: int = 10,
    max_pulse_keywords: int = 10,
    stale_claim_seconds: int = 600,
    now: Optional[datetime] = None,
) -> ProcessingResult:
    """
    Process one batch of pending raw articles, oldest first.

    Each article is claimed with a committed conditional status update before
    any work happens; articles another worker claimed first are skipped. A
    failure after the claim rolls back the article's writes and marks it
    failed with the error message. The batch always continues.

    Before pulling the batch, articles claimed more than stale_claim_seconds
    ago that are still in processing are marked failed.

    Args:
        session: Store session
        extractor: Insight extractor (LLM)
        lemmatizer: Keyword lemmatizer used for trend matching
        batch_size: Maximum number of articles to pull
        trending_limit: Number of top trending topics used for trend contribution
        max_pulse_keywords: Maximum number of pulse keywords kept per article
        stale_claim_seconds: Age after which a processing claim counts as abandoned
        now: Reference time for freshness (default: current UTC time)

    Returns:
        ProcessingResult with processed, failed and skipped counts and ids
    """
    now = ensure_utc(now) if now else utc_now()
    result = ProcessingResult()

    result.stale_claim_ids = _fail_stale_claims(session, now, stale_claim_seconds)

    pending = [_PendingArticle.from_row(row) for row in load_pending_articles(session, batch_size)]
    if not pending:
        logger.info("No articles pending processing")
        return result

    logger.info("Processing batch of %d pending articles", len(pending))
    trending_topics = _load_trending(session, trending_limit)

    for article in pending:
        logger.info("Processing article ID %d: %s (%s)", article.id, article.title or "Untitled", article.source_url)

        if not _claim(session, article.id, now):
            logger.info("Article ID %d was claimed by another worker, skipping", article.id)
            result.skipped += 1
            result.skipped_ids.append(article.id)
            continue

        try:
            process_article(
                session,
                article,
                extractor,
                lemmatizer,
                trending_topics,
                now,
                max_pulse_keywords=max_pulse_keywords,
            )
            session.commit()
        except Exception as e:
            session.rollback()
            message = _error_message(e)
            logger.error("Article ID %d: error processing article: %s", article.id, message)
            _mark_failed(session, article.id, message)
            result.failed += 1
            result.failed_ids.append(article.id)
            continue

        result.processed += 1
        result.processed_ids.append(article.id)
        logger.info("Article ID %d: successfully processed", article.id)

    logger.info(
        "Batch finished: %d processed, %d failed, %d skipped",
        result.processed,
        result.failed,
        result.skipped,
    )
    return result
