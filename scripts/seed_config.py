"""Create tables and load sources, synonyms and generic terms from configs/seed.yaml."""

from __future__ import annotations

import argparse
import logging

from dotenv import load_dotenv


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    logger = logging.getLogger(__name__)

    load_dotenv()

    from common.config import CONFIG_DIR, find_config_path, load_yaml
    from pulse_store.connection import get_session, init_db
    from pulse_store.seed import seed_configuration

    parser = argparse.ArgumentParser()
    parser.add_argument("--seed", default="seed", help="Seed file name under configs/ (default: seed)")
    args = parser.parse_args()

    path = find_config_path(args.seed, CONFIG_DIR)
    init_db()

    with get_session() as session:
        counts = seed_configuration(session, load_yaml(path))

    logger.info("Loaded %s from %s", counts, path)


if __name__ == "__main__":
    main()
