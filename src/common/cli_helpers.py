"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def positive_int(value: str) -> int:
    """Parse a strictly positive integer for argparse arguments.

    Raises:
        argparse.ArgumentTypeError: If the value is not an integer >= 1.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if parsed < 1:
        raise argparse.ArgumentTypeError(f"expected a value >= 1, got {parsed}")
    return parsed


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add the --config and --log-level options every stage CLI shares."""
    parser.add_argument(
        "--config",
        default=None,
        help="Config name under configs/ (default: $PULSE_CONFIG or 'prod')",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
