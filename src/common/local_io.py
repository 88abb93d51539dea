"""Write stage results to local JSONL snapshots."""

from __future__ import annotations

import json
import logging
from dataclasses import is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from common.serialization import serialize_dataclass

logger = logging.getLogger(__name__)


def _to_record(item: Any) -> dict:
    if is_dataclass(item) and not isinstance(item, type):
        return serialize_dataclass(item)
    if isinstance(item, dict):
        return item
    raise TypeError(f"Cannot save {type(item).__name__} as a JSONL record")


def snapshot_path(prefix: str, output_dir: str = "output", now: Optional[datetime] = None) -> Path:
    """output/<prefix>_YYYY_MM_DD_HH_MM.jsonl for the given (or current) UTC time."""
    now = now or datetime.now(timezone.utc)
    return Path(output_dir) / f"{prefix}_{now.strftime('%Y_%m_%d_%H_%M')}.jsonl"


def save_jsonl_records_local(
    records: Iterable[Any],
    prefix: str,
    output_dir: str = "output",
    now: Optional[datetime] = None,
) -> Path:
    """
    Save stage results (dataclasses or plain dicts) as one JSON object per line.

    Args:
        records: Results to save
        prefix: Filename prefix (e.g., "trending_topics", "personalized_feed")
        output_dir: Directory to save to, created when missing (default: "output")
        now: Timestamp used in the filename (default: current UTC time)

    Returns:
        Path to the created file.
    """
    filepath = snapshot_path(prefix, output_dir, now)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with filepath.open("w", encoding="utf-8") as f:
        for record in records:
            f.write(json.dumps(_to_record(record), default=str, ensure_ascii=False) + "\n")
            count += 1

    logger.info("Saved %d records to %s", count, filepath)
    return filepath
