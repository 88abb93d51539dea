"""Store queries used by the pipeline stages.

Writers do not commit unless noted; the calling stage owns the transaction.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from sqlalchemy import and_, delete, desc, or_, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session, selectinload

from common.datetime import utc_now
from pulse_store.models import (
    ArticleStatus,
    ConfigGenericTerm,
    ConfigSynonym,
    OnboardingSuggestedInterest,
    ProcessedArticle,
    Profile,
    RawArticle,
    Source,
    TrendingTopic,
)

logger = logging.getLogger(__name__)


def _insert(session: Session, model):
    """Dialect-specific INSERT supporting ON CONFLICT clauses."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(model)
    if dialect == "sqlite":
        return sqlite.insert(model)
    raise NotImplementedError(f"Upserts are not supported on dialect: {dialect}")


# Sources


def load_enabled_sources(session: Session) -> list[Source]:
    stmt = select(Source).where(Source.is_enabled.is_(True)).order_by(Source.id)
    return list(session.scalars(stmt))


def stamp_source_fetched(session: Session, source_id: int, fetched_at: datetime) -> None:
    session.execute(update(Source).where(Source.id == source_id).values(last_fetched_at=fetched_at))


# Raw articles


def raw_article_exists(session: Session, source_url: str) -> bool:
    stmt = select(RawArticle.id).where(RawArticle.source_url == source_url).limit(1)
    return session.execute(stmt).first() is not None


def insert_raw_article(
    session: Session,
    *,
    source_id: int | None,
    source_url: str,
    title: str | None,
    raw_text: str | None,
    publication_date: datetime | None,
) -> bool:
    """Insert a pending raw article. Returns False when source_url already exists."""
    stmt = (
        _insert(session, RawArticle)
        .values(
            source_id=source_id,
            source_url=source_url,
            title=title,
            raw_text=raw_text,
            publication_date=publication_date,
            status=ArticleStatus.PENDING_PROCESSING,
        )
        .on_conflict_do_nothing(index_elements=["source_url"])
    )
    result = session.execute(stmt)
    return bool(result.rowcount)


def load_pending_articles(session: Session, limit: int) -> list[RawArticle]:
    """Oldest pending articles first, with their source loaded."""
    stmt = (
        select(RawArticle)
        .options(selectinload(RawArticle.source))
        .where(RawArticle.status == ArticleStatus.PENDING_PROCESSING)
        .order_by(RawArticle.fetched_at, RawArticle.id)
        .limit(limit)
    )
    return list(session.scalars(stmt))


def _set_status(
    session: Session,
    article_id: int,
    current: ArticleStatus,
    target: ArticleStatus,
    **values: Any,
) -> bool:
    """Conditionally move a raw article from current to target status.

    Raises:
        InvalidStatusTransition: If target is not a forward move from current.
    """
    current.transition_to(target)
    stmt = (
        update(RawArticle)
        .where(and_(RawArticle.id == article_id, RawArticle.status == current))
        .values(status=target, **values)
    )
    result = session.execute(stmt)
    return result.rowcount == 1


def claim_article(session: Session, article_id: int, claimed_at: datetime | None = None) -> bool:
    """Mark a pending article as processing, stamp claimed_at, and commit.

    Returns False when another worker claimed it first.
    """
    claimed = _set_status(
        session,
        article_id,
        ArticleStatus.PENDING_PROCESSING,
        ArticleStatus.PROCESSING,
        claimed_at=claimed_at or utc_now(),
    )
    session.commit()
    return claimed


def fail_stale_claims(session: Session, claimed_before: datetime, error: str) -> list[int]:
    """Move articles stuck in processing since before claimed_before to failed. Commits.

    Rows in processing without a claimed_at are treated as stale.
    """
    stale = and_(
        RawArticle.status == ArticleStatus.PROCESSING,
        or_(RawArticle.claimed_at.is_(None), RawArticle.claimed_at < claimed_before),
    )
    article_ids = list(session.scalars(select(RawArticle.id).where(stale).order_by(RawArticle.id)))
    if not article_ids:
        return []

    ArticleStatus.PROCESSING.transition_to(ArticleStatus.FAILED)
    session.execute(
        update(RawArticle)
        .where(and_(stale, RawArticle.id.in_(article_ids)))
        .values(status=ArticleStatus.FAILED, processing_error=error)
        .execution_options(synchronize_session=False)
    )
    session.commit()
    logger.warning("Failed %d articles stuck in processing: %s", len(article_ids), article_ids)
    return article_ids


def mark_article_processed(session: Session, article_id: int) -> bool:
    return _set_status(
        session,
        article_id,
        ArticleStatus.PROCESSING,
        ArticleStatus.PROCESSED,
        processing_error=None,
    )


def mark_article_failed(session: Session, article_id: int, error: str) -> bool:
    return _set_status(
        session,
        article_id,
        ArticleStatus.PROCESSING,
        ArticleStatus.FAILED,
        processing_error=error,
    )


def reset_failed_articles(session: Session, article_ids: Iterable[int] | None = None) -> int:
    """Operator override: put failed articles back in the pending queue.

    This is the only path out of the terminal failed status and is never
    called by the pipeline itself. Commits.
    """
    stmt = (
        update(RawArticle)
        .where(RawArticle.status == ArticleStatus.FAILED)
        .values(status=ArticleStatus.PENDING_PROCESSING, processing_error=None)
    )
    if article_ids is not None:
        stmt = stmt.where(RawArticle.id.in_(list(article_ids)))
    result = session.execute(stmt)
    session.commit()
    logger.info("Reset %d failed articles to pending_processing", result.rowcount)
    return result.rowcount


# Processed articles


def insert_processed_article(session: Session, values: dict[str, Any]) -> ProcessedArticle:
    article = ProcessedArticle(**values)
    session.add(article)
    session.flush()
    return article


def load_recent_article_tags(session: Session, since: datetime) -> list[list[str]]:
    stmt = select(ProcessedArticle.tags).where(ProcessedArticle.created_at >= since)
    return [tags or [] for tags in session.scalars(stmt)]


def load_recent_processed_articles(session: Session, limit: int) -> list[ProcessedArticle]:
    stmt = (
        select(ProcessedArticle)
        .order_by(desc(ProcessedArticle.publication_date).nulls_last(), desc(ProcessedArticle.id))
        .limit(limit)
    )
    return list(session.scalars(stmt))


def _contains_pattern(term: str) -> str:
    """LIKE pattern matching term literally anywhere in the text."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search_processed_articles(session: Session, query: str, limit: int) -> list[ProcessedArticle]:
    """Articles whose title or any summary contains every whitespace-separated term."""
    terms = [term for term in query.split() if term]
    if not terms:
        return []

    conditions = []
    for term in terms:
        pattern = _contains_pattern(term)
        conditions.append(
            or_(
                ProcessedArticle.title.ilike(pattern, escape="\\"),
                ProcessedArticle.summary_executive.ilike(pattern, escape="\\"),
                ProcessedArticle.summary_technical.ilike(pattern, escape="\\"),
                ProcessedArticle.summary_simple.ilike(pattern, escape="\\"),
            )
        )
    stmt = (
        select(ProcessedArticle)
        .where(and_(*conditions))
        .order_by(desc(ProcessedArticle.initial_score), desc(ProcessedArticle.id))
        .limit(limit)
    )
    return list(session.scalars(stmt))


# Trend configuration and output


def load_synonym_map(session: Session) -> dict[str, str]:
    stmt = select(ConfigSynonym.synonym, ConfigSynonym.canonical_term).where(
        ConfigSynonym.is_enabled.is_(True)
    )
    return {synonym.lower().strip(): canonical.lower().strip() for synonym, canonical in session.execute(stmt)}


def load_generic_terms(session: Session) -> set[str]:
    stmt = select(ConfigGenericTerm.term).where(ConfigGenericTerm.is_enabled.is_(True))
    return {term.lower().strip() for term in session.scalars(stmt)}


def load_trending_topics(session: Session, limit: int) -> list[TrendingTopic]:
    stmt = (
        select(TrendingTopic)
        .order_by(desc(TrendingTopic.buzz_score), desc(TrendingTopic.last_updated_at))
        .limit(limit)
    )
    return list(session.scalars(stmt))


def upsert_trending_topics(
    session: Session,
    rows: list[dict[str, Any]],
    prune_stale: bool = True,
) -> int:
    """Upsert trending topics keyed on topic_text.

    With prune_stale, topics missing from rows are deleted so the table
    holds only the latest run.
    """
    if not rows:
        return 0

    stmt = _insert(session, TrendingTopic).values(rows)
    stmt = stmt.on_conflict_do_update(
        index_elements=["topic_text"],
        set_={
            "buzz_score": stmt.excluded.buzz_score,
            "source_count": stmt.excluded.source_count,
            "last_updated_at": stmt.excluded.last_updated_at,
        },
    )
    session.execute(stmt)

    if prune_stale:
        current = [row["topic_text"] for row in rows]
        result = session.execute(
            delete(TrendingTopic)
            .where(TrendingTopic.topic_text.not_in(current))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount:
            logger.info("Pruned %d stale trending topics", result.rowcount)

    return len(rows)


def replace_onboarding_interests(session: Session, rows: list[dict[str, Any]]) -> int:
    """Delete every suggested interest and insert rows in their place."""
    session.execute(delete(OnboardingSuggestedInterest).execution_options(synchronize_session=False))
    if rows:
        session.add_all(OnboardingSuggestedInterest(**row) for row in rows)
        session.flush()
    return len(rows)


def load_onboarding_interests(session: Session, limit: int) -> list[str]:
    stmt = (
        select(OnboardingSuggestedInterest.interest_text)
        .order_by(OnboardingSuggestedInterest.rank)
        .limit(limit)
    )
    return list(session.scalars(stmt))


# Profiles


def load_profile(session: Session, user_id: str) -> Profile | None:
    """Load only the requesting user's own profile row."""
    stmt = select(Profile).where(Profile.id == user_id)
    return session.scalars(stmt).first()
