"""CLI for recomputing trending topics and onboarding interests."""

from __future__ import annotations

import logging

from dotenv import load_dotenv

from calculate_trends.calculate_trends import calculate_trends
from calculate_trends.helpers import parse_calculate_trends_args
from common.cli_helpers import setup_logging
from common.config import load_config
from common.local_io import save_jsonl_records_local
from pulse_store.connection import get_session

load_dotenv()

logger = logging.getLogger(__name__)


def main() -> None:
    args = parse_calculate_trends_args()
    setup_logging(args.log_level)

    config = load_config(args.config).trends

    with get_session() as session:
        result = calculate_trends(
            session,
            lookback_hours=args.lookback_hours or config.lookback_hours,
            top_trending=args.top_trending or config.top_trending,
            top_onboarding=args.top_onboarding or config.top_onboarding,
            prune_stale_topics=config.prune_stale_topics and not args.keep_stale_topics,
        )

    if not result.trending_topics:
        logger.warning("No trends computed")
        return

    for topic in result.trending_topics:
        logger.info("  %s | buzz=%.2f | count=%d", topic.topic_text, topic.buzz_score, topic.source_count)

    if args.load_local:
        save_jsonl_records_local(result.trending_topics, "trending_topics")
        save_jsonl_records_local(result.onboarding_interests, "onboarding_interests")


if __name__ == "__main__":
    main()
