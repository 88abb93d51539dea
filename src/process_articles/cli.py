"""CLI for processing pending raw articles."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from common.config import load_config
from common.local_io import save_jsonl_records_local
from extract_insights.extract_insights import build_insight_extractor
from process_articles.helpers import parse_process_articles_args
from process_articles.process_articles import process_pending_articles
from pulse_store.connection import get_session

load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_process_articles_args()
    setup_logging(args.log_level)

    config = load_config(args.config)
    if args.model:
        config.llm.model = args.model

    # Fails before any article is touched when OPENAI_API_KEY is missing
    extractor = build_insight_extractor(config.llm)

    results = []
    with get_session() as session:
        for _ in range(args.batches):
            result = process_pending_articles(
                session,
                extractor,
                batch_size=args.batch_size or config.process.batch_size,
                trending_limit=config.process.trending_limit,
                max_pulse_keywords=config.process.max_pulse_keywords,
                stale_claim_seconds=config.process.stale_claim_seconds,
            )
            results.append(result)
            if not (result.processed or result.failed or result.skipped):
                break

    logger.info(
        "Processed %d, failed %d, skipped %d articles",
        sum(r.processed for r in results),
        sum(r.failed for r in results),
        sum(r.skipped for r in results),
    )

    if args.load_local:
        save_jsonl_records_local(results, "processing_results")


if __name__ == "__main__":
    main()
