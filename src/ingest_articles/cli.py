"""CLI for ingesting feed sources."""

from __future__ import annotations

import logging
from functools import partial

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config
from common.local_io import save_jsonl_records_local
from ingest_articles.fetch_articles.fetch_article_text import fetch_article_text
from ingest_articles.fetch_articles.fetch_rss_articles import fetch_feed
from ingest_articles.helpers import parse_ingest_articles_args, select_sources
from ingest_articles.ingest_articles import run_ingestion
from pulse_store.connection import get_session
from pulse_store.repository import load_enabled_sources

load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_ingest_articles_args()
    setup_logging(args.log_level)

    config = load_config(args.config).ingest
    recency_months = args.recency_months or config.recency_months
    fetch_full_text = config.fetch_full_text if args.fetch_full_text is None else args.fetch_full_text

    with get_session() as session:
        sources = select_sources(load_enabled_sources(session), args.sources)
        if not sources:
            logger.warning("No enabled sources found")
            return

        results = run_ingestion(
            session,
            sources,
            recency_months=recency_months,
            fetch_feed=partial(
                fetch_feed,
                timeout=config.request_timeout_seconds,
                user_agent=config.user_agent,
            ),
            fetch_full_text=partial(
                fetch_article_text,
                timeout=config.request_timeout_seconds,
                user_agent=config.user_agent,
            )
            if fetch_full_text
            else None,
            full_text_min_chars=config.full_text_min_chars,
        )

    for result in results:
        logger.info(
            "  %s | %s | ingested=%d duplicates=%d rejected=%d",
            result.source_name,
            result.status,
            result.ingested,
            result.duplicates,
            result.rejected,
        )
    logger.info("Ingestion complete. Total new articles: %d", sum(r.ingested for r in results))

    if args.load_local:
        save_jsonl_records_local(results, "ingest_results")


if __name__ == "__main__":
    main()
