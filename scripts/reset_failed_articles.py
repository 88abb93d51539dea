"""Move failed raw articles back to pending_processing so they are retried."""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    logger = logging.getLogger(__name__)

    load_dotenv()

    from pulse_store.connection import get_session
    from pulse_store.repository import reset_failed_articles

    parser = argparse.ArgumentParser()
    parser.add_argument(
        "ids",
        nargs="*",
        type=int,
        help="Raw article ids to reset (default: every failed article)",
    )
    args = parser.parse_args()

    with get_session() as session:
        count = reset_failed_articles(session, args.ids or None)

    logger.info("Reset %d failed articles", count)


if __name__ == "__main__":
    main()
