"""Ingest enabled feed sources into pending raw articles."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from common.datetime import ensure_utc, utc_now
from common.errors import FeedFetchError
from ingest_articles.fetch_articles.fetch_rss_articles import fetch_feed as fetch_rss_feed
from ingest_articles.fetch_articles.fetch_rss_articles import parse_entry
from ingest_articles.models import FeedEntry, SourceIngestResult
from pulse_store.models import Source, SourceType
from pulse_store.repository import insert_raw_article, raw_article_exists, stamp_source_fetched

logger = logging.getLogger(__name__)


def _with_full_text(
    entry: FeedEntry,
    fetch_full_text: Optional[Callable[[str], Optional[str]]],
    min_chars: int,
) -> FeedEntry:
    if fetch_full_text is None or len(entry.raw_text) >= min_chars:
        return entry
    text = fetch_full_text(entry.url)
    if text and len(text) > len(entry.raw_text):
        entry.raw_text = text
    return entry


def _store_entry(session: Session, source: Source, entry: FeedEntry) -> bool:
    """Insert one entry as a pending raw article; False for duplicates."""
    if raw_article_exists(session, entry.url):
        return False
    inserted = insert_raw_article(
        session,
        source_id=source.id,
        source_url=entry.url,
        title=entry.title,
        raw_text=entry.raw_text,
        publication_date=entry.publication_date,
    )
    session.commit()
    return inserted


def ingest_source(
    session: Session,
    source: Source,
    since: datetime,
    fetch_feed: Callable[[str], Any] = fetch_rss_feed,
    fetch_full_text: Optional[Callable[[str], Optional[str]]] = None,
    full_text_min_chars: int = 200,
) -> SourceIngestResult:
    """
    Ingest one source.

    Returns a result with status "failed" when the feed itself could not be
    fetched or parsed, "skipped" for source types without a fetcher, and
    "ok" otherwise. Entry-level problems are logged and counted as rejected.
    """
    result = SourceIngestResult(source_id=source.id, source_name=source.name, status="ok")

    if source.type != SourceType.RSS:
        logger.warning("%s fetching for %s (id=%s) is not implemented, skipping", source.type.value, source.name, source.id)
        result.status = "skipped"
        return result

    try:
        feed = fetch_feed(source.url)
    except FeedFetchError as e:
        logger.error("Source %s (id=%s) failed: %s", source.name, source.id, e)
        result.status = "failed"
        return result

    entries = feed.get("entries") or []
    logger.info("Found %d entries from %s", len(entries), source.name)

    for raw_entry in entries:
        try:
            entry = parse_entry(raw_entry, since)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("Failed to parse entry from %s: %s", source.name, e)
            result.rejected += 1
            continue
        if entry is None:
            result.rejected += 1
            continue

        entry = _with_full_text(entry, fetch_full_text, full_text_min_chars)

        try:
            inserted = _store_entry(session, source, entry)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Error inserting article %s from %s: %s", entry.url, source.name, e)
            result.rejected += 1
            continue

        if inserted:
            result.ingested += 1
            result.ingested_urls.append(entry.url)
            logger.info("Ingested: %s", entry.title or "Untitled Article")
        else:
            result.duplicates += 1

    return result


def run_ingestion(
    session: Session,
    sources: list[Source],
    now: Optional[datetime] = None,
    recency_months: int = 3,
    fetch_feed: Callable[[str], Any] = fetch_rss_feed,
    fetch_full_text: Optional[Callable[[str], Optional[str]]] = None,
    full_text_min_chars: int = 200,
) -> list[SourceIngestResult]:
    """Ingest every source and return one result per source."""
    now = ensure_utc(now) if now else utc_now()
    since = now - relativedelta(months=recency_months)

    logger.info("Ingesting articles from %d sources (since %s)", len(sources), since.isoformat())

    results = []
    for source in sources:
        logger.info("Processing source: %s (%s)", source.name, source.url)
        result = ingest_source(
            session,
            source,
            since,
            fetch_feed=fetch_feed,
            fetch_full_text=fetch_full_text,
            full_text_min_chars=full_text_min_chars,
        )
        results.append(result)

        if result.status == "failed":
            continue

        stamp_source_fetched(session, source.id, now)
        session.commit()

    return results


def ingest_sources(
    session: Session,
    sources: list[Source],
    now: Optional[datetime] = None,
    recency_months: int = 3,
    fetch_feed: Callable[[str], Any] = fetch_rss_feed,
    fetch_full_text: Optional[Callable[[str], Optional[str]]] = None,
    full_text_min_chars: int = 200,
) -> int:
    """Ingest every enabled source and return the number of new raw articles."""
    results = run_ingestion(
        session,
        sources,
        now=now,
        recency_months=recency_months,
        fetch_feed=fetch_feed,
        fetch_full_text=fetch_full_text,
        full_text_min_chars=full_text_min_chars,
    )
    total = sum(result.ingested for result in results)
    logger.info("Ingestion complete. Total new recent articles ingested: %d", total)
    return total
